from flask import Blueprint, request, jsonify
from models.profile import Profile
from extensions import db
from middleware.auth import require_session
from schemas import parse_body
from schemas.profiles import ProfileRequest
import logging

profiles_bp = Blueprint('profiles', __name__)
logger = logging.getLogger(__name__)


@profiles_bp.route('/<int:user_id>', methods=['GET'])
@require_session()
def get_profile(user_id):
    user = request.current_user
    if user.id != user_id and not user.is_admin:
        return jsonify({'error': 'Forbidden'}), 403

    profile = Profile.query.filter_by(user_id=user_id).first()
    if not profile:
        return jsonify({'error': 'Profile not found'}), 404

    return jsonify({'profile': profile.to_dict()}), 200


@profiles_bp.route('/<int:user_id>', methods=['POST'])
@require_session()
def save_profile(user_id):
    """Create the profile on first save, otherwise update the fields sent"""
    if request.current_user.id != user_id:
        return jsonify({'error': 'You can only edit your own profile'}), 403

    changes = parse_body(ProfileRequest).changes()

    profile = Profile.query.filter_by(user_id=user_id).first()
    created = profile is None
    if created:
        profile = Profile(user_id=user_id)
        db.session.add(profile)

    profile.apply(changes)
    db.session.commit()

    logger.info(f"Profile {'created' if created else 'updated'} for user {user_id}")
    return jsonify({
        'message': 'Profile created' if created else 'Profile updated',
        'profile': profile.to_dict()
    }), 201 if created else 200
