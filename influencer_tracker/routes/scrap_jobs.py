"""
Scrap job routes — read-only view of the job ledger for an organization.
"""
from flask import Blueprint, request, jsonify

from influencer_tracker.routes import error_response, caller_identity, int_arg
from influencer_tracker.services import scrap_jobs

bp = Blueprint('scrap_jobs', __name__, url_prefix='/api/scrap-jobs')


@bp.before_request
def require_caller():
    organization_id, _ = caller_identity()
    if not organization_id:
        return jsonify({'error': 'Unauthorized'}), 401


@bp.route('', methods=['GET'])
def list_jobs():
    organization_id, _ = caller_identity()
    limit = int_arg('limit', 50)
    offset = int_arg('offset', 0, maximum=100000)
    try:
        jobs, total = scrap_jobs.list_jobs(
            organization_id,
            status=request.args.get('status'),
            limit=limit,
            offset=offset,
        )
    except Exception as e:
        return error_response(e)
    return jsonify({'jobs': jobs, 'total': total, 'limit': limit, 'offset': offset})


@bp.route('/stats/summary', methods=['GET'])
def job_stats():
    organization_id, _ = caller_identity()
    try:
        return jsonify(scrap_jobs.job_stats(organization_id))
    except Exception as e:
        return error_response(e)


@bp.route('/influencer/<int:influencer_id>', methods=['GET'])
def jobs_for_influencer(influencer_id):
    organization_id, _ = caller_identity()
    limit = int_arg('limit', 20)
    offset = int_arg('offset', 0, maximum=100000)
    try:
        jobs, total = scrap_jobs.list_jobs_for_influencer(
            organization_id, influencer_id, limit=limit, offset=offset,
        )
    except Exception as e:
        return error_response(e)
    return jsonify({'jobs': jobs, 'total': total, 'limit': limit, 'offset': offset})


@bp.route('/<job_id>', methods=['GET'])
def get_job(job_id):
    organization_id, _ = caller_identity()
    try:
        job = scrap_jobs.get_job_for_organization(job_id, organization_id)
    except Exception as e:
        return error_response(e)
    if job is None:
        return jsonify({'error': 'Scrap job not found'}), 404
    return jsonify(job)
