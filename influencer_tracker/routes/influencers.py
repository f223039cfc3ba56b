"""
Influencer routes — add / list / delete, sync triggers, sync status, posts.

The caller's organization and user come from the X-Organization-Id and
X-User-Id headers set by the gateway in front of this service.
"""
from flask import Blueprint, current_app, request, jsonify

from influencer_tracker.routes import error_response, caller_identity, int_arg
from influencer_tracker.services import influencers as influencer_service
from influencer_tracker.services.post_sync import PostSyncService

bp = Blueprint('influencers', __name__, url_prefix='/api/influencers')


@bp.before_request
def require_caller():
    organization_id, user_id = caller_identity()
    if not organization_id or not user_id:
        return jsonify({'error': 'Unauthorized'}), 401


@bp.route('', methods=['POST'])
def add_influencer():
    organization_id, user_id = caller_identity()
    data = request.get_json(silent=True) or {}
    try:
        influencer = influencer_service.add_influencer(
            name=data.get('name'),
            platform=data.get('platform'),
            profile_url=data.get('profile_url') or data.get('profileUrl'),
            organization_id=organization_id,
            user_id=user_id,
        )
    except Exception as e:
        return error_response(e)
    return jsonify({
        'message': 'Influencer added successfully. Profile data and posts are being synced in the background.',
        'influencer': influencer,
    }), 201


@bp.route('', methods=['GET'])
def list_influencers():
    organization_id, _ = caller_identity()
    try:
        influencers = influencer_service.list_influencers(organization_id)
    except Exception as e:
        return error_response(e)
    return jsonify({'influencers': influencers, 'count': len(influencers)})


@bp.route('/<int:influencer_id>', methods=['DELETE'])
def delete_influencer(influencer_id):
    organization_id, _ = caller_identity()
    try:
        influencer_service.delete_influencer(influencer_id, organization_id)
    except Exception as e:
        return error_response(e)
    return jsonify({'message': 'Influencer deleted successfully'})


@bp.route('/<int:influencer_id>/sync-status', methods=['GET'])
def sync_status(influencer_id):
    organization_id, _ = caller_identity()
    try:
        return jsonify(influencer_service.get_sync_status(influencer_id, organization_id))
    except Exception as e:
        return error_response(e)


@bp.route('/<int:influencer_id>/sync', methods=['POST'])
def sync_posts(influencer_id):
    organization_id, user_id = caller_identity()
    try:
        summary = influencer_service.request_post_sync(influencer_id, organization_id, user_id)
    except Exception as e:
        return error_response(e)
    return jsonify({'message': 'Post sync started successfully', 'influencer': summary}), 202


@bp.route('/<int:influencer_id>/sync-profile', methods=['POST'])
def sync_profile(influencer_id):
    organization_id, user_id = caller_identity()
    try:
        summary = influencer_service.request_profile_sync(influencer_id, organization_id, user_id)
    except Exception as e:
        return error_response(e)
    return jsonify({'message': 'Profile sync started successfully', 'influencer': summary}), 202


@bp.route('/<int:influencer_id>/sync-all', methods=['POST'])
def sync_all(influencer_id):
    organization_id, user_id = caller_identity()
    try:
        summary = influencer_service.request_data_sync(influencer_id, organization_id, user_id)
    except Exception as e:
        return error_response(e)
    return jsonify({'message': 'Complete data sync started successfully', 'influencer': summary}), 202


@bp.route('/<int:influencer_id>/posts', methods=['GET'])
def list_posts(influencer_id):
    organization_id, _ = caller_identity()
    try:
        influencer_service.get_influencer(influencer_id, organization_id)
        posts = PostSyncService(current_app.extensions['scraper_registry']).list_posts(
            influencer_id,
            limit=int_arg('limit', 50),
            offset=int_arg('offset', 0, maximum=100000),
        )
    except Exception as e:
        return error_response(e)
    return jsonify({'posts': posts, 'count': len(posts)})
