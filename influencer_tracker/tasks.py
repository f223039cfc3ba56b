"""
Background sync tasks — executed by RQ workers from the sync queue.

Each task triggers provider scrapes through the sync services; errors are
logged here because nobody is waiting on the original HTTP request.
"""
import logging
import time

from influencer_tracker.database import get_session
from influencer_tracker.errors import TrackerError
from influencer_tracker.extensions import get_sync_queue
from influencer_tracker.models.influencer import Influencer
from influencer_tracker.scrapers.registry import ScraperRegistry
from influencer_tracker.services.post_sync import PostSyncService
from influencer_tracker.services.profile_sync import ProfileSyncService

logger = logging.getLogger('influencer_tracker.tasks')

# Pause between influencers in a full sweep to stay under provider rate limits
SWEEP_DELAY_SECONDS = 1.0

_registry = None


def _get_registry():
    global _registry
    if _registry is None:
        _registry = ScraperRegistry()
    return _registry


def _context(organization_id, user_id):
    return {'organization_id': organization_id, 'user_id': user_id}


def sync_influencer_profile(influencer_id, organization_id, user_id):
    """Trigger a profile scrape. Returns True if the provider accepted it."""
    try:
        ProfileSyncService(_get_registry()).init_profile_sync(
            influencer_id, _context(organization_id, user_id),
        )
        return True
    except TrackerError as e:
        logger.warning("Profile sync for influencer %s not started: %s", influencer_id, e.message)
    except Exception:
        logger.error("Profile sync failed for influencer %s", influencer_id, exc_info=True)
    return False


def sync_influencer_posts(influencer_id, organization_id, user_id):
    """Trigger a posts scrape. Returns True if the provider accepted it."""
    try:
        PostSyncService(_get_registry()).init_post_sync(
            influencer_id, _context(organization_id, user_id),
        )
        return True
    except TrackerError as e:
        logger.warning("Post sync for influencer %s not started: %s", influencer_id, e.message)
    except Exception:
        logger.error("Post sync failed for influencer %s", influencer_id, exc_info=True)
    return False


def sync_influencer_data(influencer_id, organization_id, user_id):
    """Posts first, then profile."""
    logger.info("Starting complete data sync for influencer: %s", influencer_id)
    posts_started = sync_influencer_posts(influencer_id, organization_id, user_id)
    profile_started = sync_influencer_profile(influencer_id, organization_id, user_id)
    logger.info("Complete sync triggered for influencer %s: posts=%s profile=%s",
                influencer_id, posts_started, profile_started)
    return {'posts': posts_started, 'profile': profile_started}


def sync_all_influencers(delay=SWEEP_DELAY_SECONDS):
    """
    Trigger a complete sync for every influencer.

    Enqueued by enqueue_sweep(), which the `sweep` Procfile process runs on a
    periodic schedule (e.g. a daily scheduler job).
    """
    session = get_session()
    try:
        rows = session.query(Influencer.id, Influencer.organization_id, Influencer.user_id).all()
    finally:
        session.close()

    logger.info("Starting complete data sync for %d influencers", len(rows))
    posts_total = profiles_total = 0
    for influencer_id, organization_id, user_id in rows:
        result = sync_influencer_data(influencer_id, organization_id, user_id)
        posts_total += int(result['posts'])
        profiles_total += int(result['profile'])
        if delay:
            time.sleep(delay)

    logger.info("Complete sync sweep finished. Posts triggered: %d, profiles triggered: %d",
                posts_total, profiles_total)
    return {'influencers': len(rows), 'posts': posts_total, 'profiles': profiles_total}


def enqueue_sweep():
    """Put one sync_all_influencers run on the sync queue. Returns the RQ job id."""
    # A sweep sleeps between influencers, so it gets a longer timeout than single syncs
    queued = get_sync_queue().enqueue(sync_all_influencers, job_timeout=6 * 3600)
    logger.info("Enqueued influencer sync sweep %s", queued.id)
    return queued.id


if __name__ == '__main__':
    from influencer_tracker.logging_config import configure_logging

    # Re-import so RQ records the task under its package path, not __main__
    from influencer_tracker.tasks import enqueue_sweep as _enqueue_sweep

    configure_logging()
    _enqueue_sweep()
