from flask import Blueprint, request, jsonify
from sqlalchemy import or_
from models.job import Job
from extensions import db
from middleware.auth import optional_session
from services.applications import active_application_job_ids
from utils.pagination import paginate

jobs_bp = Blueprint('jobs', __name__)


def _job_payload(job, applied_job_ids):
    data = job.to_dict()
    data['has_applied'] = job.id in applied_job_ids
    data['is_archived'] = not job.is_active
    return data


@jobs_bp.route('', methods=['GET'])
@optional_session()
def get_jobs():
    """Public job listing; admins can include archived jobs"""
    user = request.current_user

    query = Job.query
    include_inactive = request.args.get('include_inactive', 'false').lower() == 'true'
    if not (include_inactive and user and user.is_admin):
        query = query.filter(Job.is_active.is_(True))

    search = request.args.get('q', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(
            Job.title.ilike(pattern),
            Job.company.ilike(pattern),
            Job.description.ilike(pattern),
        ))

    location = request.args.get('location', '').strip()
    if location:
        query = query.filter(Job.location.ilike(f'%{location}%'))

    job_type = request.args.get('type')
    if job_type:
        query = query.filter(Job.type == job_type)

    source = request.args.get('source')
    if source:
        query = query.filter(Job.source == source)

    result = paginate(query.order_by(Job.created_at.desc(), Job.id.desc()))
    jobs = result['items']

    applied = active_application_job_ids(user.id, [job.id for job in jobs]) if user else set()

    return jsonify({
        'jobs': [_job_payload(job, applied) for job in jobs],
        'pagination': result['pagination']
    }), 200


@jobs_bp.route('/<int:job_id>', methods=['GET'])
@optional_session()
def get_job(job_id):
    """Job detail; archived jobs stay readable so existing applications can link to them"""
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({'error': 'Job not found'}), 404

    user = request.current_user
    applied = active_application_job_ids(user.id, [job.id]) if user else set()

    return jsonify({'job': _job_payload(job, applied)}), 200
