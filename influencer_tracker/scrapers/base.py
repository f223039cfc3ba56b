"""
Scraper contracts.

Every platform scraper implements ScraperAdapter: two trigger methods that
start an asynchronous provider job, and two pure parse methods that turn a
raw webhook payload element into ProfileData / PostData. The sync services
and the webhook handler only see this uniform interface.
"""
import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from influencer_tracker.services import scrap_jobs

logger = logging.getLogger('scrapers.base')

# 2000-01-01T00:00:00Z in epoch milliseconds. Numeric timestamps above this
# are taken as milliseconds, anything below as seconds.
EPOCH_MS_THRESHOLD = 946684800000

# 9999-12-31T23:59:59.999Z, the last instant a datetime can hold
MAX_TIMESTAMP_MS = 253402300799999

_NUMBER_RE = re.compile(r'^([\d.]+)([KkMmBb])?$')
_SUFFIX_MULTIPLIERS = {'k': 1_000, 'm': 1_000_000, 'b': 1_000_000_000}


@dataclass
class ScrapJobContext:
    """Who asked for a scrape, carried into the ScrapJob row."""
    organization_id: str
    user_id: str
    influencer_id: int
    job_type: str = ''


@dataclass
class ProfileData:
    """Normalized profile fields. None means "not present in the payload"."""
    name: str = ''
    profile_url: str = ''
    avatar_url: Optional[str] = None
    platform_user_id: Optional[str] = None
    bio: Optional[str] = None
    follower_count: Optional[int] = None
    verified: bool = False
    location: str = ''


@dataclass
class PostData:
    """Normalized post fields; posted_at is epoch milliseconds."""
    platform_post_id: str
    content: str = ''
    post_url: str = ''
    likes: int = 0
    comments: int = 0
    shares: int = 0
    posted_at: int = 0
    media_urls: List[str] = field(default_factory=list)


class ScraperAdapter(ABC):
    """
    Base class for platform scrapers.

    Subclasses set `platform` and implement the trigger and parse methods.
    Trigger methods return as soon as the provider accepts the job; results
    arrive later through the scrap webhook.
    """
    platform: str = ''

    @abstractmethod
    def init_scrap_profile(self, handle: str, job_context: ScrapJobContext) -> None:
        """Start an asynchronous profile scrape for `handle`."""
        ...

    @abstractmethod
    def init_scrap_posts(self, handle: str, job_context: ScrapJobContext) -> None:
        """Start an asynchronous posts scrape for `handle`."""
        ...

    @abstractmethod
    def parse_profile_data(self, payload: Dict[str, Any]) -> ProfileData:
        ...

    @abstractmethod
    def parse_post_data(self, payload: Dict[str, Any]) -> PostData:
        ...

    def create_scrap_job(self, handle: str, target_url: str, job_type: str,
                         job_context: ScrapJobContext, status: str = 'pending') -> str:
        """Record the job in the ledger before the provider is called."""
        return scrap_jobs.create_job(
            handle=handle,
            target_url=target_url,
            job_type=job_type,
            job_context=job_context,
            platform=self.platform,
            status=status,
        )


# ── Parsing helpers ──────────────────────────────────────────────────────────

def first_of(payload: Dict[str, Any], *keys: str, default=None):
    """Return the first truthy value among `keys`, else `default`."""
    for key in keys:
        value = payload.get(key)
        if value:
            return value
    return default


def first_present(payload: Dict[str, Any], *keys: str, default=None):
    """Like first_of, but falsy values such as 0 or False count as present."""
    for key in keys:
        value = payload.get(key)
        if value is not None and value != '':
            return value
    return default


def parse_number(value) -> int:
    """
    Parse counts like 42, "1,234", "1.2K", "5.3M", "2B" into an int.

    Anything unparseable (None, "", "n/a") returns 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return int(round(value))
    if isinstance(value, str):
        match = _NUMBER_RE.match(value.strip().replace(',', ''))
        if match:
            try:
                number = float(match.group(1))
            except ValueError:
                return 0
            suffix = (match.group(2) or '').lower()
            number *= _SUFFIX_MULTIPLIERS.get(suffix, 1)
            return int(round(number)) if math.isfinite(number) else 0
    return 0


def parse_optional_number(value) -> Optional[int]:
    """Like parse_number, but a missing value stays None."""
    if value is None or value == '':
        return None
    return parse_number(value)


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def parse_timestamp_ms(value) -> int:
    """
    Normalize a provider timestamp to epoch milliseconds.

    Accepts datetimes, epoch seconds or milliseconds (numbers or digit
    strings) and ISO-8601 strings. Missing, invalid or out-of-range values
    return now.
    """
    if not value:
        return now_ms()

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)

    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return now_ms()
        ms = int(value) if value > EPOCH_MS_THRESHOLD else int(value * 1000)
        if not 0 <= ms <= MAX_TIMESTAMP_MS:
            logger.debug("Timestamp %r out of range, using now", value)
            return now_ms()
        return ms

    if isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            logger.debug("Unparseable timestamp %r, using now", value)
            return now_ms()
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)

    return now_ms()
