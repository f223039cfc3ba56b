"""
Scrap webhook relay — the provider's callback endpoint.

Bright Data posts dataset rows to /scrap-webhook/<job_id>. The body is pushed
to the scrap-webhook queue untouched and the provider gets {"status": "ok"}
as soon as the enqueue succeeds; processing errors never reach this response.
"""
import logging
from flask import Blueprint, request, jsonify

from influencer_tracker.services.webhook_relay import publish_webhook

logger = logging.getLogger('routes.webhook')

bp = Blueprint('webhook', __name__)


@bp.route('/scrap-webhook/<job_id>', methods=['POST'])
def scrap_webhook(job_id):
    """Provider callback with the job id as path segment."""
    return _relay(job_id, request.get_json(silent=True))


@bp.route('/scrap-webhook', methods=['POST'])
def scrap_webhook_query():
    """Provider callback with the job id as ?jobId= query parameter."""
    return _relay(request.args.get('jobId'), request.get_json(silent=True))


@bp.route('/scrap-webhook', methods=['GET'])
def scrap_webhook_get():
    """Notification-style callback: the query string is the body."""
    params = request.args.to_dict()
    return _relay(params.pop('jobId', None), params)


def _relay(job_id, body):
    if not job_id:
        return jsonify({'status': 'error', 'error': 'jobId is required'}), 400

    if body is None:
        body = {}
    try:
        publish_webhook(job_id, body)
    except Exception:
        logger.error("Webhook to queue push failed for job %s", job_id, exc_info=True)
        return jsonify({'status': 'error'}), 500

    return jsonify({'status': 'ok'}), 200
