from flask import Blueprint, request, jsonify
from datetime import datetime
from models.application import Application
from extensions import db
from middleware.auth import require_session
from schemas import parse_body
from schemas.applications import ApplyRequest, StatusUpdateRequest
from services.applications import apply_to_job, change_status
from services.credits import credit_summary, timezone_for
from utils.pagination import paginate
import logging

applications_bp = Blueprint('applications', __name__)
logger = logging.getLogger(__name__)


def requester_timezone():
    """Browser timezone sent by the client, used when the user has none saved"""
    return request.headers.get('X-Timezone') or request.args.get('tz')


def get_accessible_application(application_id):
    """The application if the current user owns it or is an admin, else None"""
    application = db.session.get(Application, application_id)
    if not application:
        return None
    user = request.current_user
    if application.user_id != user.id and not user.is_admin:
        return None
    return application


@applications_bp.route('/credits', methods=['GET'])
@require_session()
def get_credits():
    user = request.current_user
    return jsonify({
        'credits': credit_summary(user, tz_name=timezone_for(user, requester_timezone()))
    }), 200


@applications_bp.route('/applications', methods=['GET'])
@require_session()
def get_my_applications():
    """Current user's applications, newest first"""
    user = request.current_user

    query = Application.query.filter_by(user_id=user.id)
    status = request.args.get('status')
    if status:
        query = query.filter_by(status=status)

    result = paginate(query.order_by(Application.applied_at.desc(), Application.id.desc()))

    return jsonify({
        'applications': [a.to_dict(include_job=True) for a in result['items']],
        'pagination': result['pagination']
    }), 200


@applications_bp.route('/applications', methods=['POST'])
@require_session()
def create_application():
    user = request.current_user
    data = parse_body(ApplyRequest)
    tz_name = timezone_for(user, requester_timezone())
    now = datetime.utcnow()

    application = apply_to_job(
        user,
        data.job_id,
        profile_id=data.profile_id,
        application_data=data.application_data,
        cover_letter=data.cover_letter,
        now=now,
        tz_name=tz_name,
    )

    return jsonify({
        'message': 'Application submitted',
        'application': application.to_dict(include_job=True),
        'credits': credit_summary(user, now=now, tz_name=tz_name)
    }), 201


@applications_bp.route('/applications/<int:application_id>', methods=['GET'])
@require_session()
def get_application(application_id):
    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    return jsonify({
        'application': application.to_dict(
            include_admin=request.current_user.is_admin,
            include_job=True
        )
    }), 200


@applications_bp.route('/applications/<int:application_id>/status', methods=['PATCH'])
@require_session()
def update_application_status(application_id):
    """Owners may withdraw; admins may set any status"""
    data = parse_body(StatusUpdateRequest)

    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    user = request.current_user
    change_status(application, data.status, user)

    return jsonify({
        'message': f'Application status updated to {data.status}',
        'application': application.to_dict(include_admin=user.is_admin, include_job=True)
    }), 200
