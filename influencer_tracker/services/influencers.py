"""
Influencer service — add / list / delete influencers and request background syncs.

Sync requests only enqueue work on the sync queue and return; the outcome is
visible later through the sync flags and the scrap job ledger.
"""
import logging

from sqlalchemy.exc import IntegrityError

from influencer_tracker.config import PLATFORMS
from influencer_tracker.database import get_session
from influencer_tracker.errors import ValidationError, NotFoundError, ConflictError
from influencer_tracker.extensions import get_sync_queue
from influencer_tracker.models.influencer import Influencer
from influencer_tracker.utils.url_parser import extract_handle, is_valid_handle

logger = logging.getLogger('services.influencers')

DUPLICATE_MESSAGE = 'This influencer is already being tracked by your organization.'


def add_influencer(name, platform, profile_url, organization_id, user_id, sync=True):
    """
    Create an influencer and enqueue its initial profile + posts sync.

    Raises ValidationError for bad input and ConflictError when the
    (organization, platform, handle) triple already exists.
    """
    if not platform or not profile_url:
        raise ValidationError('Platform and profile URL are required')
    if platform not in PLATFORMS:
        raise ValidationError('Invalid platform.')
    if not name:
        raise ValidationError('Name is required for the influencer.')

    try:
        handle = extract_handle(platform, profile_url)
    except ValueError as e:
        raise ValidationError('Invalid profile URL format for the selected platform') from e
    if not is_valid_handle(handle):
        raise ValidationError('Invalid profile URL format for the selected platform')

    session = get_session()
    try:
        existing = session.query(Influencer.id).filter_by(
            organization_id=str(organization_id),
            platform=platform,
            handle=handle,
        ).first()
        if existing:
            raise ConflictError(DUPLICATE_MESSAGE)

        influencer = Influencer(
            name=name,
            platform=platform,
            handle=handle,
            organization_id=str(organization_id),
            user_id=str(user_id),
        )
        session.add(influencer)
        session.commit()
        data = influencer.to_dict()
    except IntegrityError as e:
        # Unique constraint caught a concurrent add of the same handle
        session.rollback()
        raise ConflictError(DUPLICATE_MESSAGE) from e
    except ConflictError:
        raise
    except Exception:
        session.rollback()
        logger.error("Failed to add influencer %s (%s)", handle, platform, exc_info=True)
        raise
    finally:
        session.close()

    logger.info("Influencer added: %s (%s)", name, platform)

    if sync:
        _enqueue('sync_influencer_data', data['id'], organization_id, user_id)
    return data


def list_influencers(organization_id):
    session = get_session()
    try:
        influencers = session.query(Influencer).filter_by(
            organization_id=str(organization_id),
        ).order_by(Influencer.created_at.desc(), Influencer.id.desc()).all()
        return [i.to_dict() for i in influencers]
    finally:
        session.close()


def get_influencer(influencer_id, organization_id):
    """Influencer dict scoped to the organization; NotFoundError otherwise."""
    session = get_session()
    try:
        influencer = session.query(Influencer).filter_by(
            id=influencer_id,
            organization_id=str(organization_id),
        ).first()
        if influencer is None:
            raise NotFoundError('Influencer not found')
        return influencer.to_dict()
    finally:
        session.close()


def delete_influencer(influencer_id, organization_id):
    """Delete an influencer and, through the relationship cascade, its posts."""
    session = get_session()
    try:
        influencer = session.query(Influencer).filter_by(
            id=influencer_id,
            organization_id=str(organization_id),
        ).first()
        if influencer is None:
            raise NotFoundError('Influencer not found')
        name = influencer.name
        session.delete(influencer)
        session.commit()
    except NotFoundError:
        raise
    except Exception:
        session.rollback()
        logger.error("Delete influencer %s failed", influencer_id, exc_info=True)
        raise
    finally:
        session.close()

    logger.info("Influencer deleted: %s", name)


def get_sync_status(influencer_id, organization_id):
    influencer = get_influencer(influencer_id, organization_id)
    return {
        'is_post_syncing': influencer['is_post_syncing'],
        'is_profile_syncing': influencer['is_profile_syncing'],
        'last_sync_attempt': influencer['last_sync_attempt'],
        'last_profile_sync': influencer['last_profile_sync'],
    }


# ── Background sync requests ─────────────────────────────────────────────────

def request_post_sync(influencer_id, organization_id, user_id):
    influencer = get_influencer(influencer_id, organization_id)
    if influencer['is_post_syncing']:
        raise ConflictError('Posts are already being synced for this influencer')
    logger.info("Starting post sync for %s (%s)", influencer['name'], influencer['platform'])
    _enqueue('sync_influencer_posts', influencer['id'], organization_id, user_id)
    return _summary(influencer)


def request_profile_sync(influencer_id, organization_id, user_id):
    influencer = get_influencer(influencer_id, organization_id)
    if influencer['is_profile_syncing']:
        raise ConflictError('Profile is already being synced for this influencer')
    logger.info("Starting profile sync for %s (%s)", influencer['name'], influencer['platform'])
    _enqueue('sync_influencer_profile', influencer['id'], organization_id, user_id)
    return _summary(influencer)


def request_data_sync(influencer_id, organization_id, user_id):
    influencer = get_influencer(influencer_id, organization_id)
    if influencer['is_post_syncing'] or influencer['is_profile_syncing']:
        raise ConflictError('Data is already being synced for this influencer')
    logger.info("Starting complete data sync for %s (%s)", influencer['name'], influencer['platform'])
    _enqueue('sync_influencer_data', influencer['id'], organization_id, user_id)
    return _summary(influencer)


def _summary(influencer):
    return {
        'id': influencer['id'],
        'name': influencer['name'],
        'platform': influencer['platform'],
    }


def _enqueue(task_name, influencer_id, organization_id, user_id):
    """Submit a sync task to the worker queue. Enqueue failures are logged, not raised."""
    from influencer_tracker import tasks

    try:
        get_sync_queue().enqueue(
            getattr(tasks, task_name),
            influencer_id,
            str(organization_id),
            str(user_id),
            job_timeout=300,
        )
    except Exception:
        logger.error("Failed to enqueue %s for influencer %s", task_name, influencer_id, exc_info=True)
