from influencer_tracker.scrapers.base import (
    ScraperAdapter, ScrapJobContext, ProfileData, PostData,
    parse_number, parse_timestamp_ms,
)
from influencer_tracker.scrapers.linkedin import LinkedInScraper
from influencer_tracker.scrapers.registry import ScraperRegistry, SCRAPERS, normalize_platform
