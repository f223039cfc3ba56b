"""
Worker entrypoint — runs RQ workers for the scrap-webhook and sync queues.

    python -m influencer_tracker.consumers.worker            # both queues
    python -m influencer_tracker.consumers.worker sync       # one queue

The scrap-webhook queue is only consumed when SCRAP_WEBHOOK_LISTENER=1, so a
deployment can dedicate processes to it. How many messages are in flight at
once is bounded by how many worker processes are started.
"""
import logging
import sys

from influencer_tracker.config import SCRAP_WEBHOOK_LISTENER, SCRAP_WEBHOOK_QUEUE, SYNC_QUEUE
from influencer_tracker.extensions import redis_client, get_queue
from influencer_tracker.logging_config import configure_logging

logger = logging.getLogger('consumers.worker')


def queue_names(requested=None):
    """Queues this worker should listen on, honouring the listener switch."""
    names = list(requested) if requested else [SCRAP_WEBHOOK_QUEUE, SYNC_QUEUE]
    if SCRAP_WEBHOOK_LISTENER != '1' and SCRAP_WEBHOOK_QUEUE in names:
        logger.info("Scrap webhook listener disabled (SCRAP_WEBHOOK_LISTENER != 1)")
        names.remove(SCRAP_WEBHOOK_QUEUE)
    return names


def main(argv=None):
    from rq import Worker

    configure_logging()
    names = queue_names(argv if argv is not None else sys.argv[1:])
    if not names:
        logger.warning("No queues to consume — exiting")
        return 1

    logger.info("Starting worker on queues: %s", ', '.join(names))
    worker = Worker([get_queue(name) for name in names], connection=redis_client)
    worker.work(with_scheduler=False)
    return 0


if __name__ == '__main__':
    sys.exit(main())
