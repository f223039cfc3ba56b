"""
Scrap webhook consumer — RQ job body for relayed provider callbacks.

Each queued message is the JSON envelope built by webhook_relay. The handler
records per-job failures on the ScrapJob itself, and malformed envelopes are
logged and dropped, so a message never comes back as an RQ failure.
"""
import json
import logging
import time

from influencer_tracker.scrapers.registry import ScraperRegistry
from influencer_tracker.services.webhook_handler import ScrapWebhookHandler

logger = logging.getLogger('consumers.scrap_webhook')

_handler = None


def _get_handler():
    """One handler (and scraper registry) per worker process."""
    global _handler
    if _handler is None:
        _handler = ScrapWebhookHandler(ScraperRegistry())
    return _handler


def parse_envelope(message):
    """Return (job_id, body) from a queue message; raises ValueError if malformed."""
    payload = json.loads(message) if isinstance(message, (str, bytes)) else message
    if not isinstance(payload, dict):
        raise ValueError("Envelope is not a JSON object")
    job_id = (payload.get('params') or {}).get('jobId')
    if not job_id:
        raise ValueError("Envelope has no params.jobId")
    return job_id, payload.get('body')


def handle_message(message, handler=None):
    start = time.monotonic()
    logger.info("New scrap webhook message (%d bytes)", len(message) if isinstance(message, (str, bytes)) else 0)

    try:
        job_id, body = parse_envelope(message)
    except ValueError:
        logger.error("Dropping malformed scrap webhook message: %.500s", message, exc_info=True)
        return

    try:
        (handler or _get_handler()).handle_webhook(job_id, body)
    except Exception:
        logger.error("Error processing scrap webhook message for job %s", job_id,
                     exc_info=True, extra={'job_id': job_id})
        return

    logger.info("Message for job %s processed in %.2f seconds", job_id, time.monotonic() - start,
                extra={'job_id': job_id})
