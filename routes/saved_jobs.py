from flask import Blueprint, request, jsonify
from models.job import Job
from models.saved_job import SavedJob
from extensions import db
from middleware.auth import require_session
from schemas import parse_body
from schemas.jobs import SaveJobRequest

saved_jobs_bp = Blueprint('saved_jobs', __name__)


@saved_jobs_bp.route('', methods=['GET'])
@require_session()
def get_saved_jobs():
    saved = SavedJob.query.filter_by(
        user_id=request.current_user.id
    ).order_by(SavedJob.created_at.desc()).all()

    return jsonify({'saved_jobs': [s.to_dict() for s in saved]}), 200


@saved_jobs_bp.route('', methods=['POST'])
@require_session()
def save_job():
    data = parse_body(SaveJobRequest)
    user_id = request.current_user.id

    if not db.session.get(Job, data.job_id):
        return jsonify({'error': 'Job not found'}), 404

    existing = SavedJob.query.filter_by(user_id=user_id, job_id=data.job_id).first()
    if existing:
        return jsonify({'message': 'Job already saved', 'saved_job': existing.to_dict()}), 200

    saved = SavedJob(user_id=user_id, job_id=data.job_id)
    db.session.add(saved)
    db.session.commit()

    return jsonify({'message': 'Job saved', 'saved_job': saved.to_dict()}), 201


@saved_jobs_bp.route('/<int:job_id>', methods=['DELETE'])
@require_session()
def unsave_job(job_id):
    saved = SavedJob.query.filter_by(user_id=request.current_user.id, job_id=job_id).first()
    if not saved:
        return jsonify({'error': 'Saved job not found'}), 404

    db.session.delete(saved)
    db.session.commit()

    return jsonify({'message': 'Job removed from saved list'}), 200
