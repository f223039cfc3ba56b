"""
Shared route helpers.
"""
import logging
from flask import jsonify, request

from influencer_tracker.errors import TrackerError

logger = logging.getLogger('routes')


def error_response(error):
    """JSON error body with the status carried by TrackerError, else 500."""
    if isinstance(error, TrackerError):
        return jsonify({'error': error.message}), error.status_code
    logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=error)
    return jsonify({'error': 'Internal server error'}), 500


def caller_identity():
    """(organization_id, user_id) from request headers; either may be None."""
    return request.headers.get('X-Organization-Id'), request.headers.get('X-User-Id')


def int_arg(name, default, maximum=200):
    try:
        value = int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default
    return max(0, min(value, maximum))
