"""
Per-influencer sync guards.

Each flag is claimed with one conditional UPDATE ("set flag where flag is
false") and the affected row count decides the winner, so two overlapping
sync requests for the same influencer cannot both get through.
"""
import logging
from datetime import datetime

from influencer_tracker.database import get_session
from influencer_tracker.errors import NotFoundError, ConflictError
from influencer_tracker.models.influencer import Influencer

logger = logging.getLogger('services.sync_flags')

PROFILE_FLAG = 'is_profile_syncing'
POSTS_FLAG = 'is_post_syncing'

_FLAG_LABELS = {
    PROFILE_FLAG: 'Profile',
    POSTS_FLAG: 'Posts',
}


def claim_sync_flag(influencer_id, flag):
    """
    Set `flag` on the influencer and stamp last_sync_attempt.

    Returns a snapshot dict of the influencer (id, name, platform, handle).
    Raises NotFoundError if the influencer does not exist and ConflictError
    if the flag is already set; in both cases nothing is written.
    """
    column = getattr(Influencer, flag)
    session = get_session()
    try:
        influencer = session.get(Influencer, influencer_id)
        if influencer is None:
            logger.warning("Influencer not found for sync: %s", influencer_id)
            raise NotFoundError(f"Influencer not found: {influencer_id}")

        snapshot = {
            'id': influencer.id,
            'name': influencer.name,
            'platform': influencer.platform,
            'handle': influencer.handle,
        }

        claimed = session.query(Influencer).filter(
            Influencer.id == influencer_id,
            column == False,  # noqa: E712
        ).update({flag: True, 'last_sync_attempt': datetime.now()}, synchronize_session=False)
        session.commit()
    except NotFoundError:
        raise
    except Exception:
        session.rollback()
        logger.error("Failed to claim %s for influencer %s", flag, influencer_id, exc_info=True)
        raise
    finally:
        session.close()

    if not claimed:
        label = _FLAG_LABELS.get(flag, flag)
        logger.warning("%s already being synced for influencer: %s", label, influencer_id)
        raise ConflictError(f"{label} already being synced for influencer: {influencer_id}")
    return snapshot


def release_sync_flag(influencer_id, flag):
    """Clear `flag`. Failures are logged; the caller is usually in a finally block."""
    session = get_session()
    try:
        session.query(Influencer).filter(Influencer.id == influencer_id).update(
            {flag: False}, synchronize_session=False,
        )
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Failed to clear %s for influencer %s", flag, influencer_id, exc_info=True)
    finally:
        session.close()
