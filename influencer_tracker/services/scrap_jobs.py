"""
Scrap job ledger — one row per provider trigger, keyed by a random job_id.

The job_id travels to the provider inside the webhook URL, so the callback can
be matched back to its influencer without any other shared state.

Status transitions:
    pending → processing (provider accepted the trigger)
    pending | processing → completed | failed
Terminal states are never overwritten; all transitions are conditional
UPDATEs so a late writer cannot clobber a finished job.
"""
import logging
import uuid
from datetime import datetime

from sqlalchemy import func

from influencer_tracker.config import JOB_TYPES, JOB_STATUSES, TERMINAL_JOB_STATUSES
from influencer_tracker.database import get_session
from influencer_tracker.models.scrap_job import ScrapJob

logger = logging.getLogger('services.scrap_jobs')

_OPEN_STATUSES = tuple(s for s in JOB_STATUSES if s not in TERMINAL_JOB_STATUSES)


def create_job(handle, target_url, job_type, job_context, platform, status='pending'):
    """Persist a new ScrapJob and return its job_id."""
    if job_type not in JOB_TYPES:
        raise ValueError(f"Unknown job type: {job_type}")
    if status not in JOB_STATUSES:
        raise ValueError(f"Unknown job status: {status}")

    job_id = str(uuid.uuid4())
    session = get_session()
    try:
        session.add(ScrapJob(
            job_id=job_id,
            organization_id=str(job_context.organization_id),
            user_id=str(job_context.user_id),
            influencer_id=job_context.influencer_id,
            platform=platform,
            job_type=job_type,
            status=status,
            target_url=target_url,
            started_at=datetime.now(),
            job_metadata={'handle': handle, 'platform': platform},
        ))
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Error creating scrap job for %s", handle, exc_info=True)
        raise
    finally:
        session.close()

    logger.info("Created scrap job %s for %s scraping of %s", job_id, job_type, handle)
    return job_id


def get_job(job_id):
    """Return the ScrapJob for job_id, or None. The row is detached from its session."""
    session = get_session()
    try:
        job = session.query(ScrapJob).filter_by(job_id=job_id).first()
        if job is not None:
            session.expunge(job)
        return job
    finally:
        session.close()


def mark_processing(job_id, snapshot_id=None):
    """pending → processing once the provider accepted the trigger."""
    session = get_session()
    try:
        updated = session.query(ScrapJob).filter(
            ScrapJob.job_id == job_id,
            ScrapJob.status == 'pending',
        ).update({'status': 'processing'}, synchronize_session=False)

        # The snapshot id is informational; record it even if the webhook won the race.
        if snapshot_id:
            job = session.query(ScrapJob).filter_by(job_id=job_id).first()
            if job is not None:
                job.job_metadata = {**(job.job_metadata or {}), 'snapshot_id': snapshot_id}
        session.commit()

        if not updated:
            logger.info("Scrap job %s already moved past pending", job_id)
        return bool(updated)
    except Exception:
        session.rollback()
        logger.error("Failed to mark scrap job %s processing", job_id, exc_info=True)
        raise
    finally:
        session.close()


def mark_completed(job_id):
    return _finalize(job_id, 'completed', completed_at=datetime.now())


def mark_failed(job_id, error_message):
    return _finalize(job_id, 'failed', error_message=(error_message or 'Unknown error')[:2000])


def _finalize(job_id, status, **fields):
    """Move an open job to a terminal status. Returns False if it was already terminal."""
    session = get_session()
    try:
        updated = session.query(ScrapJob).filter(
            ScrapJob.job_id == job_id,
            ScrapJob.status.in_(_OPEN_STATUSES),
        ).update({'status': status, **fields}, synchronize_session=False)
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Failed to mark scrap job %s %s", job_id, status, exc_info=True)
        raise
    finally:
        session.close()

    if not updated:
        logger.warning("Scrap job %s already finalized, not marking %s", job_id, status)
    return bool(updated)


# ── Read API ─────────────────────────────────────────────────────────────────

def list_jobs(organization_id, status=None, limit=50, offset=0):
    """Jobs for an organization, newest first. Returns (jobs, total)."""
    session = get_session()
    try:
        query = session.query(ScrapJob).filter_by(organization_id=str(organization_id))
        if status and status != 'all':
            query = query.filter_by(status=status)
        total = query.count()
        jobs = query.order_by(ScrapJob.started_at.desc()).limit(limit).offset(offset).all()
        return [job.to_dict() for job in jobs], total
    finally:
        session.close()


def list_jobs_for_influencer(organization_id, influencer_id, limit=20, offset=0):
    session = get_session()
    try:
        query = session.query(ScrapJob).filter_by(
            organization_id=str(organization_id),
            influencer_id=influencer_id,
        )
        total = query.count()
        jobs = query.order_by(ScrapJob.started_at.desc()).limit(limit).offset(offset).all()
        return [job.to_dict() for job in jobs], total
    finally:
        session.close()


def get_job_for_organization(job_id, organization_id):
    session = get_session()
    try:
        job = session.query(ScrapJob).filter_by(
            job_id=job_id,
            organization_id=str(organization_id),
        ).first()
        return job.to_dict() if job else None
    finally:
        session.close()


def job_stats(organization_id):
    """Counts per status and per job type for an organization."""
    session = get_session()
    try:
        base = session.query(ScrapJob).filter_by(organization_id=str(organization_id))

        by_status = {s: 0 for s in JOB_STATUSES}
        rows = base.with_entities(ScrapJob.status, func.count(ScrapJob.id)).group_by(ScrapJob.status).all()
        for status, count in rows:
            by_status[status] = count

        by_type = {t: 0 for t in JOB_TYPES}
        rows = base.with_entities(ScrapJob.job_type, func.count(ScrapJob.id)).group_by(ScrapJob.job_type).all()
        for job_type, count in rows:
            by_type[job_type] = count

        return {
            'total': sum(by_status.values()),
            'by_status': by_status,
            'by_job_type': by_type,
        }
    finally:
        session.close()
