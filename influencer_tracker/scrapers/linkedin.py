"""
LinkedIn scraper — Bright Data Web Scraper API.

Trigger calls register a per-job webhook (`<SCRAP_WEBHOOK_URL>/<job_id>`) and
return immediately; Bright Data handles CAPTCHAs, IP rotation and
fingerprinting, then posts the dataset rows back to the webhook.
"""
import base64
import hashlib
import logging
from typing import Any, Dict, List

import requests

from influencer_tracker.config import (
    BRIGHT_DATA_API_TOKEN, BRIGHT_DATA_API_URL,
    BRIGHT_DATA_PROFILE_DATASET, BRIGHT_DATA_POSTS_DATASET,
    SCRAP_WEBHOOK_URL, SCRAP_REQUEST_TIMEOUT, PLATFORM_LINKEDIN,
)
from influencer_tracker.errors import ScraperConfigError, ScraperRequestError
from influencer_tracker.scrapers.base import (
    ScraperAdapter, ScrapJobContext, ProfileData, PostData,
    first_of, first_present, parse_number, parse_optional_number, parse_timestamp_ms, now_ms,
)
from influencer_tracker.services import scrap_jobs

logger = logging.getLogger('scrapers.linkedin')


class LinkedInScraper(ScraperAdapter):
    """LinkedIn profiles and posts through Bright Data datasets."""

    platform = PLATFORM_LINKEDIN

    def __init__(self, api_token=None, api_url=None, webhook_url=None, timeout=None,
                 profile_dataset=None, posts_dataset=None):
        self.api_token = api_token if api_token is not None else BRIGHT_DATA_API_TOKEN
        self.api_url = (api_url or BRIGHT_DATA_API_URL).rstrip('/')
        self.webhook_url = (webhook_url or SCRAP_WEBHOOK_URL).rstrip('/')
        self.timeout = timeout or SCRAP_REQUEST_TIMEOUT
        self.datasets = {
            'profile': profile_dataset or BRIGHT_DATA_PROFILE_DATASET,
            'posts': posts_dataset or BRIGHT_DATA_POSTS_DATASET,
        }
        if not self.api_token:
            logger.warning("BRIGHT_DATA_API_TOKEN not set — LinkedIn scrapes will fail")

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def init_scrap_profile(self, handle: str, job_context: ScrapJobContext) -> None:
        self._init_scrap(handle, job_context, 'profile')

    def init_scrap_posts(self, handle: str, job_context: ScrapJobContext) -> None:
        self._init_scrap(handle, job_context, 'posts')

    def _init_scrap(self, handle, job_context, job_type):
        if not self.api_token:
            logger.error("Cannot scrape LinkedIn %s for %s: API token not configured", job_type, handle)
            raise ScraperConfigError(f"Cannot scrape LinkedIn {job_type}: API token not configured")

        logger.info("Scraping LinkedIn %s for handle: %s", job_type, handle)
        profile_url = self.build_profile_url(handle)

        job_id = self.create_scrap_job(
            handle=handle,
            target_url=profile_url,
            job_type=job_type,
            job_context=job_context,
        )

        try:
            snapshot_id = self._trigger(profile_url, job_id, job_type)
        except ScraperRequestError as e:
            scrap_jobs.mark_failed(job_id, e.message)
            raise

        scrap_jobs.mark_processing(job_id, snapshot_id=snapshot_id)
        logger.info("Initialized LinkedIn %s scrape for %s (job %s, snapshot %s)",
                    job_type, handle, job_id, snapshot_id)

    @staticmethod
    def build_profile_url(handle: str) -> str:
        """Canonical profile URL for a handle; full LinkedIn URLs pass through."""
        clean = handle.strip()
        if clean.startswith('@'):
            clean = clean[1:]
        if 'linkedin.com' in clean:
            return clean
        return f"https://linkedin.com/in/{clean}"

    def job_webhook_url(self, job_id: str) -> str:
        return f"{self.webhook_url}/{job_id}"

    def _trigger(self, profile_url: str, job_id: str, job_type: str) -> str:
        """POST to the dataset trigger endpoint. Returns Bright Data's snapshot id."""
        callback = self.job_webhook_url(job_id)
        params = {
            'dataset_id': self.datasets[job_type],
            'format': 'json',
            'include_errors': 'true',
            'uncompressed_webhook': 'true',
            'endpoint': callback,
            'webhook_endpoint': callback,
            'notify': 'true',
        }
        if job_type == 'posts':
            params['type'] = 'discover_new'
            params['discover_by'] = 'profile_url'

        headers = {
            'Authorization': f'Bearer {self.api_token}',
            'Content-Type': 'application/json',
        }

        logger.debug("Trigger %s scrape for %s (webhook %s)", job_type, profile_url, callback)
        try:
            response = requests.post(
                f"{self.api_url}/trigger",
                params=params,
                headers=headers,
                json=[{'url': profile_url}],
                timeout=self.timeout,
            )
            if not response.ok:
                logger.error("Trigger failed (%s): %s", response.status_code, response.text[:500])
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise ScraperRequestError(f"Bright Data trigger timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            status = e.response.status_code if getattr(e, 'response', None) is not None else None
            raise ScraperRequestError(f"Bright Data trigger failed: {e}", status=status) from e
        except ValueError as e:
            raise ScraperRequestError("Bright Data trigger returned invalid JSON") from e

        return (data or {}).get('snapshot_id', '') if isinstance(data, dict) else ''

    # ------------------------------------------------------------------
    # Parsers
    # ------------------------------------------------------------------

    def parse_profile_data(self, payload: Dict[str, Any]) -> ProfileData:
        if not payload:
            raise ValueError("Empty LinkedIn profile payload")

        followers = first_present(payload, 'followers', 'follower_count', 'connections')
        return ProfileData(
            name=first_of(payload, 'name', 'full_name', 'title', default=''),
            profile_url=first_of(payload, 'url', 'profile_url', 'input_url', default=''),
            avatar_url=first_of(payload, 'avatar', 'profile_picture', 'image_url', 'photo_url'),
            platform_user_id=_as_str(first_of(payload, 'profile_id', 'user_id', 'linkedin_id')),
            bio=first_of(payload, 'headline', 'summary', 'about'),
            follower_count=parse_optional_number(followers),
            verified=bool(payload.get('verified') or False),
            location=first_of(payload, 'city', 'location', default=''),
        )

    def parse_post_data(self, payload: Dict[str, Any]) -> PostData:
        if not payload:
            raise ValueError("Empty LinkedIn post payload")

        return PostData(
            platform_post_id=_as_str(first_of(payload, 'post_id', 'id')) or self.fallback_post_id(payload),
            content=first_of(payload, 'post_text_html', 'post_text', 'text', default=''),
            post_url=first_of(payload, 'url', 'post_url', 'link', default=''),
            likes=parse_number(first_of(payload, 'likes', 'reactions', 'like_count')),
            comments=parse_number(first_of(payload, 'comments', 'num_comments', 'comment_count')),
            shares=parse_number(first_of(payload, 'shares', 'reposts', 'share_count')),
            posted_at=parse_timestamp_ms(first_of(payload, 'posted_at', 'date_posted', 'timestamp')),
            media_urls=self._parse_media_urls(payload),
        )

    @staticmethod
    def fallback_post_id(payload: Dict[str, Any]) -> str:
        """Deterministic id for posts the provider sent without one."""
        source = first_of(payload, 'url', 'post_url') or str(now_ms())
        digest = hashlib.sha256(source.encode('utf-8')).digest()
        encoded = base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')
        return f"linkedin_{encoded[:32]}"

    @staticmethod
    def _parse_media_urls(payload: Dict[str, Any]) -> List[str]:
        urls = []
        media = first_of(payload, 'images', 'media', 'media_urls', 'attachments', default=[])
        if isinstance(media, list):
            for item in media:
                if isinstance(item, str):
                    urls.append(item)
                elif isinstance(item, dict):
                    url = item.get('url') or item.get('image_url')
                    if url:
                        urls.append(url)

        image_url = payload.get('image_url')
        if image_url and isinstance(image_url, str) and image_url not in urls:
            urls.append(image_url)
        return urls


def _as_str(value):
    if value is None or value == '':
        return None
    return str(value)
