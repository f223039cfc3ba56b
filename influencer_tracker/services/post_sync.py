"""
Post sync — triggers post scrapes and upserts scraped posts by platform_post_id.

platform_post_id is unique across the whole system, which is what makes a
repeated webhook delivery for the same post safe: the second sighting
updates the row in place instead of inserting a duplicate.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from influencer_tracker.database import get_session
from influencer_tracker.errors import NotFoundError
from influencer_tracker.models.influencer import Influencer
from influencer_tracker.models.post import Post
from influencer_tracker.scrapers.base import PostData, ScrapJobContext
from influencer_tracker.services.sync_flags import claim_sync_flag, release_sync_flag, POSTS_FLAG

logger = logging.getLogger('services.post_sync')


class PostSyncService:
    """Owns the is_post_syncing flag and the posts table."""

    def __init__(self, registry):
        self.registry = registry

    def init_post_sync(self, influencer_id, job_context):
        """Start an asynchronous posts scrape; mirrors ProfileSyncService.init_profile_sync."""
        influencer = claim_sync_flag(influencer_id, POSTS_FLAG)
        try:
            logger.info("Starting post sync for %s (%s)", influencer['name'], influencer['platform'])
            scraper = self.registry.get_scraper(influencer['platform'])
            context = ScrapJobContext(
                organization_id=job_context['organization_id'],
                user_id=job_context['user_id'],
                influencer_id=influencer['id'],
                job_type='posts',
            )
            scraper.init_scrap_posts(influencer['handle'], context)
        except Exception:
            logger.error("Error syncing posts for influencer %s", influencer_id, exc_info=True)
            raise
        finally:
            release_sync_flag(influencer_id, POSTS_FLAG)

    def sync_scraped_post_data(self, influencer_id, post_data: PostData):
        """Insert or update one post. Returns 'created' or 'updated'."""
        try:
            return self._upsert(influencer_id, post_data)
        except IntegrityError:
            # Lost an insert race with another delivery of the same post
            logger.info("Post %s inserted concurrently, retrying as update", post_data.platform_post_id)
            return self._upsert(influencer_id, post_data)

    def _upsert(self, influencer_id, post_data):
        posted_at = datetime.fromtimestamp(post_data.posted_at / 1000, tz=timezone.utc)
        session = get_session()
        try:
            if session.get(Influencer, influencer_id) is None:
                raise NotFoundError(f"Influencer not found: {influencer_id}")

            post = session.query(Post).filter_by(platform_post_id=post_data.platform_post_id).first()
            if post is None:
                session.add(Post(
                    influencer_id=influencer_id,
                    platform_post_id=post_data.platform_post_id,
                    content=post_data.content or '',
                    media_urls=list(post_data.media_urls or []),
                    post_url=post_data.post_url or '',
                    likes=post_data.likes or 0,
                    comments=post_data.comments or 0,
                    shares=post_data.shares or 0,
                    posted_at=posted_at,
                ))
                result = 'created'
            else:
                post.content = post_data.content or ''
                post.media_urls = list(post_data.media_urls or [])
                post.likes = post_data.likes or 0
                post.comments = post_data.comments or 0
                post.shares = post_data.shares or 0
                post.posted_at = posted_at
                if post_data.post_url:
                    post.post_url = post_data.post_url
                result = 'updated'

            session.commit()
        except NotFoundError:
            raise
        except IntegrityError:
            session.rollback()
            raise
        except Exception:
            session.rollback()
            logger.error("Error saving post %s for influencer %s",
                         post_data.platform_post_id, influencer_id, exc_info=True)
            raise
        finally:
            session.close()

        logger.debug("Post %s %s for influencer %s", post_data.platform_post_id, result, influencer_id)
        return result

    def list_posts(self, influencer_id, limit=50, offset=0):
        """Posts for one influencer, newest first."""
        session = get_session()
        try:
            posts = session.query(Post).filter_by(influencer_id=influencer_id).order_by(
                Post.posted_at.desc(),
            ).limit(limit).offset(offset).all()
            return [p.to_dict() for p in posts]
        finally:
            session.close()
