"""
Scraper registry — resolves a platform name to one cached scraper instance.

Built once per process (the Flask app factory and the worker entrypoint each
own one) and handed to the sync services and the webhook handler.
"""
import logging
import re
from typing import Callable, Dict, List, Optional

from influencer_tracker.errors import UnsupportedPlatformError
from influencer_tracker.scrapers.base import ScraperAdapter
from influencer_tracker.scrapers.linkedin import LinkedInScraper

logger = logging.getLogger('scrapers.registry')

# Normalized platform key → scraper factory
SCRAPERS: Dict[str, Callable[[], ScraperAdapter]] = {
    'linkedin': LinkedInScraper,
}


def normalize_platform(platform: str) -> str:
    """'LinkedIn', 'linked-in', ' LINKEDIN ' → 'linkedin'."""
    return re.sub(r'[^a-z0-9]', '', (platform or '').lower())


class ScraperRegistry:
    """One scraper instance per platform, constructed on first use."""

    def __init__(self, scrapers: Optional[Dict[str, Callable[[], ScraperAdapter]]] = None):
        self._factories = dict(SCRAPERS if scrapers is None else scrapers)
        self._instances: Dict[str, ScraperAdapter] = {}

    def get_scraper(self, platform: str) -> ScraperAdapter:
        key = normalize_platform(platform)

        scraper = self._instances.get(key)
        if scraper is not None:
            return scraper

        factory = self._factories.get(key)
        if factory is None:
            logger.error("Unsupported platform: %s", platform)
            raise UnsupportedPlatformError(platform)

        scraper = factory()
        self._instances[key] = scraper
        logger.info("Created %s scraper instance", key)
        return scraper

    def supported_platforms(self) -> List[str]:
        return sorted(self._factories)

    def is_platform_supported(self, platform: str) -> bool:
        return normalize_platform(platform) in self._factories

    def clear_cache(self):
        self._instances.clear()
        logger.info("Scraper cache cleared")
