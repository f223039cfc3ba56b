"""
Profile sync — triggers profile scrapes and applies scraped profile payloads.
"""
import logging
from datetime import datetime

from influencer_tracker.database import get_session
from influencer_tracker.errors import NotFoundError
from influencer_tracker.models.influencer import Influencer
from influencer_tracker.scrapers.base import ProfileData, ScrapJobContext
from influencer_tracker.services.sync_flags import claim_sync_flag, release_sync_flag, PROFILE_FLAG

logger = logging.getLogger('services.profile_sync')


class ProfileSyncService:
    """Owns the is_profile_syncing flag and the influencer profile cache."""

    def __init__(self, registry):
        self.registry = registry

    def init_profile_sync(self, influencer_id, job_context):
        """
        Start an asynchronous profile scrape for one influencer.

        The flag only covers the trigger call: it is cleared as soon as the
        provider accepts (or rejects) the job, not when the result arrives.
        Raises NotFoundError, ConflictError, or whatever the scraper raised.
        """
        influencer = claim_sync_flag(influencer_id, PROFILE_FLAG)
        try:
            logger.info("Starting profile sync for %s (%s)", influencer['name'], influencer['platform'])
            scraper = self.registry.get_scraper(influencer['platform'])
            context = ScrapJobContext(
                organization_id=job_context['organization_id'],
                user_id=job_context['user_id'],
                influencer_id=influencer['id'],
                job_type='profile',
            )
            scraper.init_scrap_profile(influencer['handle'], context)
        except Exception:
            logger.error("Error syncing profile for influencer %s", influencer_id, exc_info=True)
            raise
        finally:
            release_sync_flag(influencer_id, PROFILE_FLAG)

    def sync_scraped_profile_data(self, influencer_id, profile_data: ProfileData):
        """Overwrite only the fields present in profile_data; stamp last_profile_sync."""
        updates = {}
        if profile_data.name:
            updates['name'] = profile_data.name
        if profile_data.avatar_url:
            updates['avatar_url'] = profile_data.avatar_url
        if profile_data.platform_user_id:
            updates['platform_user_id'] = profile_data.platform_user_id
        if profile_data.bio:
            updates['bio'] = profile_data.bio
        if profile_data.follower_count is not None:
            updates['follower_count'] = profile_data.follower_count
        if profile_data.verified is not None:
            updates['verified'] = bool(profile_data.verified)
        if profile_data.location:
            updates['location'] = profile_data.location
        updates['last_profile_sync'] = datetime.now()

        session = get_session()
        try:
            matched = session.query(Influencer).filter(Influencer.id == influencer_id).update(
                updates, synchronize_session=False,
            )
            session.commit()
        except Exception:
            session.rollback()
            logger.error("Error updating influencer profile %s", influencer_id, exc_info=True)
            raise
        finally:
            session.close()

        if not matched:
            raise NotFoundError(f"Influencer not found: {influencer_id}")
        logger.info("Updated profile data for influencer %s (%s)", influencer_id, ', '.join(sorted(updates)))
