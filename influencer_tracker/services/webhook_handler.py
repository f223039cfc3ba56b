"""
Scrap webhook handler — reconciles a provider callback into domain records.

Looks the job up in the ledger, parses every payload element with the job's
platform scraper, hands the result to the matching sync service, and
finalizes the job. Errors are recorded on the job, never raised.
"""
import logging

from influencer_tracker.services import scrap_jobs
from influencer_tracker.services.post_sync import PostSyncService
from influencer_tracker.services.profile_sync import ProfileSyncService

logger = logging.getLogger('services.webhook_handler')


def flatten_payload(payload):
    """
    Normalize a provider payload into a flat list of records.

    Bright Data sends a bare object, a list of objects, or a list mixing
    objects and nested lists of objects.
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        return [payload]

    items = []
    for item in payload:
        if isinstance(item, list):
            items.extend(item)
        else:
            items.append(item)
    return items


class ScrapWebhookHandler:

    def __init__(self, registry, profile_sync=None, post_sync=None):
        self.registry = registry
        self.profile_sync = profile_sync or ProfileSyncService(registry)
        self.post_sync = post_sync or PostSyncService(registry)

    def handle_webhook(self, job_id, payload):
        log_extra = {'job_id': job_id}
        scrap_job = None
        try:
            scrap_job = scrap_jobs.get_job(job_id)
            if scrap_job is None:
                logger.warning("Scrap job not found for job_id: %s", job_id, extra=log_extra)
                return

            scraper = self.registry.get_scraper(scrap_job.platform)

            if scrap_job.job_type == 'profile':
                count = self._apply_profiles(scraper, scrap_job, payload)
                logger.info("Profile sync completed for influencer %s (%d records)",
                            scrap_job.influencer_id, count, extra=log_extra)
            elif scrap_job.job_type == 'posts':
                if not isinstance(payload, list):
                    logger.warning("Expected list payload for posts job %s, got %s",
                                   job_id, type(payload).__name__, extra=log_extra)
                created, updated = self._apply_posts(scraper, scrap_job, payload)
                logger.info("Processed %d posts (%d new, %d updated) for influencer %s in job %s",
                            created + updated, created, updated, scrap_job.influencer_id, job_id,
                            extra=log_extra)
            else:
                logger.warning("Unknown job type %r for scrap job %s", scrap_job.job_type, job_id,
                               extra=log_extra)

            scrap_jobs.mark_completed(job_id)
            logger.info("Scrap job %s completed successfully", job_id, extra=log_extra)

        except Exception as e:
            logger.error("Error handling webhook for job %s", job_id, exc_info=True, extra=log_extra)
            if scrap_job is not None:
                try:
                    scrap_jobs.mark_failed(job_id, str(e) or e.__class__.__name__)
                except Exception:
                    logger.error("Could not record failure for scrap job %s", job_id,
                                 exc_info=True, extra=log_extra)

    def _records(self, scrap_job, payload, kind):
        """Yield the dict records of a payload; empty and non-object elements are skipped."""
        for index, item in enumerate(flatten_payload(payload)):
            if not item or not isinstance(item, dict):
                logger.warning("%s record %d ignored for job %s (%s)", kind, index, scrap_job.job_id,
                               type(item).__name__, extra={'job_id': scrap_job.job_id})
                continue
            yield item

    def _apply_profiles(self, scraper, scrap_job, payload):
        count = 0
        for item in self._records(scrap_job, payload, 'Profile'):
            profile_data = scraper.parse_profile_data(item)
            self.profile_sync.sync_scraped_profile_data(scrap_job.influencer_id, profile_data)
            count += 1
        return count

    def _apply_posts(self, scraper, scrap_job, payload):
        created = updated = 0
        for item in self._records(scrap_job, payload, 'Post'):
            post_data = scraper.parse_post_data(item)
            result = self.post_sync.sync_scraped_post_data(scrap_job.influencer_id, post_data)
            if result == 'created':
                created += 1
            else:
                updated += 1
        return created, updated
