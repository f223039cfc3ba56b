"""
Shared client instances — Redis connection and RQ queues.

Queues are created lazily so importing this module never opens a connection
(tests and the Flask app factory import it without Redis running).
"""
import logging
import redis

from influencer_tracker.config import REDIS_URL, SCRAP_WEBHOOK_QUEUE, SYNC_QUEUE

logger = logging.getLogger('influencer_tracker.extensions')

# ── Redis ─────────────────────────────────────────────────────────────────────
# RQ stores pickled job payloads, so this connection must not decode responses.
redis_client = redis.from_url(REDIS_URL)

# ── RQ queues ─────────────────────────────────────────────────────────────────
_queues = {}


def get_queue(name):
    """Return the RQ queue with this name, creating it on first use."""
    queue = _queues.get(name)
    if queue is None:
        from rq import Queue
        queue = Queue(name, connection=redis_client)
        _queues[name] = queue
    return queue


def get_webhook_queue():
    """Queue carrying relayed provider callbacks."""
    return get_queue(SCRAP_WEBHOOK_QUEUE)


def get_sync_queue():
    """Queue carrying background sync triggers."""
    return get_queue(SYNC_QUEUE)
