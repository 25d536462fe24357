from flask import Blueprint, request, jsonify
from datetime import datetime, timedelta
from sqlalchemy import func, or_
from models.user import User
from models.job import Job
from models.application import Application, APPLICATION_STATUSES
from models.reported_job import ReportedJob
from models.feedback import Feedback
from models.audit_log import AuditLog
from extensions import db
from middleware.auth import require_admin
from schemas import parse_body
from schemas.admin import AdminCreateUserRequest, AdminUpdateUserRequest, CreditAdjustmentRequest
from schemas.applications import AdminApplicationUpdateRequest
from schemas.jobs import JobRecord, JobUpdateRequest, JobImportRequest
from services.accounts import register_user
from services.applications import admin_update_application
from services.credits import adjust_banked_credits, credit_summary
from services.job_ingestion import build_job, ingest_job_records
from utils.monitoring import performance_monitor, error_tracker
from utils.pagination import paginate
import logging

admin_bp = Blueprint('admin', __name__)
logger = logging.getLogger(__name__)


def _user_payload(user):
    data = user.to_dict()
    data['credits'] = credit_summary(user)
    return data


# ---------------------------------------------------------------- users

@admin_bp.route('/users', methods=['GET'])
@require_admin()
def list_users():
    query = User.query

    search = request.args.get('q', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(User.username.ilike(pattern), User.email.ilike(pattern)))

    result = paginate(query.order_by(User.created_at.desc(), User.id.desc()))
    return jsonify({
        'users': [_user_payload(u) for u in result['items']],
        'pagination': result['pagination']
    }), 200


@admin_bp.route('/users', methods=['POST'])
@require_admin()
def create_user():
    data = parse_body(AdminCreateUserRequest)

    if User.query.filter_by(username=data.username).first():
        return jsonify({'error': 'Username already taken'}), 409
    if User.query.filter_by(email=data.email).first():
        return jsonify({'error': 'Email already registered'}), 409

    user, _ = register_user(
        username=data.username,
        email=data.email,
        password=data.password,
        timezone=data.timezone,
        is_admin=data.is_admin,
        banked_credits=data.banked_credits,
    )
    AuditLog.log_event(user.id, 'admin_create_user', 'success', request,
                       {'is_admin': user.is_admin}, actor_id=request.current_user.id)

    return jsonify({'message': 'User created', 'user': _user_payload(user)}), 201


@admin_bp.route('/users/<int:user_id>', methods=['PATCH'])
@require_admin()
def update_user(user_id):
    data = parse_body(AdminUpdateUserRequest)
    changes = data.model_dump(exclude_unset=True)

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    if user.id == request.current_user.id and (changes.get('is_admin') is False or changes.get('is_active') is False):
        return jsonify({'error': 'You cannot remove your own admin access'}), 400

    if changes.get('email') and changes['email'] != user.email:
        if User.query.filter(User.email == changes['email'], User.id != user.id).first():
            return jsonify({'error': 'Email already registered'}), 409
        user.email = changes['email']

    for field in ('is_admin', 'is_active'):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])
    if 'timezone' in changes:
        user.timezone = changes['timezone']

    db.session.commit()
    return jsonify({'message': 'User updated', 'user': _user_payload(user)}), 200


@admin_bp.route('/users/<int:user_id>', methods=['DELETE'])
@require_admin()
def delete_user(user_id):
    """Delete a user and everything they own"""
    admin = request.current_user
    if user_id == admin.id:
        return jsonify({'error': 'You cannot delete your own account'}), 400

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    username = user.username
    db.session.delete(user)
    db.session.commit()

    AuditLog.log_event(None, 'admin_delete_user', 'success', request,
                       {'user_id': user_id, 'username': username}, actor_id=admin.id)
    logger.info(f"Admin {admin.id} deleted user {user_id}")

    return jsonify({'message': 'User deleted'}), 200


@admin_bp.route('/users/<int:user_id>/credits', methods=['POST', 'PATCH'])
@require_admin()
def adjust_user_credits(user_id):
    data = parse_body(CreditAdjustmentRequest)

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    adjust_banked_credits(user, data.amount, admin=request.current_user, reason=data.reason)

    return jsonify({
        'message': f'Banked credits adjusted by {data.amount}',
        'user': _user_payload(user)
    }), 200


@admin_bp.route('/users/<int:user_id>/applications', methods=['GET'])
@require_admin()
def get_user_applications(user_id):
    if not db.session.get(User, user_id):
        return jsonify({'error': 'User not found'}), 404

    applications = Application.query.filter_by(user_id=user_id).order_by(
        Application.applied_at.desc()
    ).all()
    return jsonify({
        'applications': [a.to_dict(include_admin=True, include_job=True) for a in applications]
    }), 200


# ---------------------------------------------------------------- jobs

@admin_bp.route('/jobs', methods=['POST'])
@require_admin()
def create_job():
    record = parse_body(JobRecord)

    job = build_job(record)
    db.session.add(job)
    db.session.commit()

    logger.info(f"Admin {request.current_user.id} created job {job.id}")
    return jsonify({'message': 'Job created', 'job': job.to_dict()}), 201


@admin_bp.route('/jobs/import', methods=['POST'])
@require_admin()
def import_jobs():
    data = parse_body(JobImportRequest)
    jobs = ingest_job_records(data.jobs)

    return jsonify({
        'message': f'Imported {len(jobs)} jobs',
        'jobs': [job.to_dict() for job in jobs]
    }), 201


@admin_bp.route('/jobs/<int:job_id>', methods=['PATCH'])
@require_admin()
def update_job(job_id):
    data = parse_body(JobUpdateRequest)
    changes = data.model_dump(exclude_unset=True)

    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({'error': 'Job not found'}), 404

    is_active = changes.pop('is_active', None)
    for field, value in changes.items():
        if value is not None:
            setattr(job, field, value)

    if is_active is True and not job.is_active:
        job.restore()
    elif is_active is False and job.is_active:
        job.archive()

    job.last_checked_at = datetime.utcnow()
    db.session.commit()

    return jsonify({'message': 'Job updated', 'job': job.to_dict()}), 200


@admin_bp.route('/jobs/<int:job_id>', methods=['DELETE'])
@require_admin()
def delete_job(job_id):
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({'error': 'Job not found'}), 404

    db.session.delete(job)
    db.session.commit()

    logger.info(f"Admin {request.current_user.id} deleted job {job_id}")
    return jsonify({'message': 'Job deleted'}), 200


# ---------------------------------------------------------------- applications

@admin_bp.route('/applications', methods=['GET'])
@require_admin()
def list_applications():
    query = Application.query

    status = request.args.get('status')
    if status:
        if status not in APPLICATION_STATUSES:
            return jsonify({'error': f'Invalid status: {status}'}), 400
        query = query.filter_by(status=status)

    user_id = request.args.get('user_id', type=int)
    if user_id:
        query = query.filter_by(user_id=user_id)

    job_id = request.args.get('job_id', type=int)
    if job_id:
        query = query.filter_by(job_id=job_id)

    result = paginate(query.order_by(Application.applied_at.desc(), Application.id.desc()))
    return jsonify({
        'applications': [a.to_dict(include_admin=True, include_job=True) for a in result['items']],
        'pagination': result['pagination']
    }), 200


@admin_bp.route('/applications/<int:application_id>', methods=['PATCH'])
@require_admin()
def update_application(application_id):
    data = parse_body(AdminApplicationUpdateRequest)

    application = db.session.get(Application, application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    admin_update_application(application, data.model_dump(exclude_unset=True), request.current_user)

    return jsonify({
        'message': 'Application updated',
        'application': application.to_dict(include_admin=True, include_job=True)
    }), 200


# ---------------------------------------------------------------- dashboard

@admin_bp.route('/stats', methods=['GET'])
@require_admin()
def get_stats():
    since = datetime.utcnow() - timedelta(days=1)

    by_status = dict(
        db.session.query(Application.status, func.count(Application.id))
        .group_by(Application.status)
        .all()
    )
    average_rating = db.session.query(func.avg(Feedback.rating)).scalar()

    return jsonify({
        'users': {
            'total': User.query.count(),
            'admins': User.query.filter_by(is_admin=True).count(),
            'new_last_24h': User.query.filter(User.created_at >= since).count(),
        },
        'jobs': {
            'total': Job.query.count(),
            'active': Job.query.filter_by(is_active=True).count(),
            'archived': Job.query.filter_by(is_active=False).count(),
        },
        'applications': {
            'total': Application.query.count(),
            'last_24h': Application.query.filter(Application.applied_at >= since).count(),
            'by_status': {status: by_status.get(status, 0) for status in APPLICATION_STATUSES},
        },
        'reported_jobs': {
            'pending': ReportedJob.query.filter_by(status='pending').count(),
            'total': ReportedJob.query.count(),
        },
        'feedback': {
            'total': Feedback.query.count(),
            'average_rating': round(float(average_rating), 2) if average_rating is not None else None,
        },
    }), 200


@admin_bp.route('/metrics', methods=['GET'])
@require_admin()
def get_metrics():
    return jsonify({
        'performance': performance_monitor.get_stats(),
        'errors': error_tracker.get_error_stats(),
    }), 200
