"""
Webhook relay — pushes raw provider callbacks onto the scrap-webhook queue.

The HTTP endpoint only serializes and enqueues; reconciliation happens in a
worker so a slow database never holds the provider's connection open.
"""
import json
import logging

from influencer_tracker.extensions import get_webhook_queue

logger = logging.getLogger('services.webhook_relay')

# Relayed callbacks wait at most a week in the queue
MESSAGE_TTL = 86400 * 7


def build_envelope(job_id, body):
    """Serialize the queue message: {"params": {"jobId": ...}, "body": ...}."""
    return json.dumps({'params': {'jobId': job_id}, 'body': body})


def publish_webhook(job_id, body):
    """Enqueue one callback. Returns the RQ job id of the queued message."""
    from influencer_tracker.consumers.scrap_webhook import handle_message

    message = build_envelope(job_id, body)
    logger.info("Pushing webhook payload for job %s to queue (%d bytes)", job_id, len(message))
    queued = get_webhook_queue().enqueue(
        handle_message,
        message,
        ttl=MESSAGE_TTL,
        failure_ttl=MESSAGE_TTL,
        description=f'scrap-webhook {job_id}',
    )
    return queued.id
