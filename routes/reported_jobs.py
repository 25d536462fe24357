from flask import Blueprint, request, jsonify
from datetime import datetime
from models.job import Job
from models.reported_job import ReportedJob, REPORT_STATUSES
from extensions import db
from middleware.auth import require_session, require_admin
from schemas import parse_body
from schemas.jobs import ReportJobRequest, ReportReviewRequest
from utils.pagination import paginate
import logging

reported_jobs_bp = Blueprint('reported_jobs', __name__)
logger = logging.getLogger(__name__)


@reported_jobs_bp.route('/reported-jobs', methods=['POST'])
@require_session()
def report_job():
    data = parse_body(ReportJobRequest)

    job = db.session.get(Job, data.job_id)
    if not job:
        return jsonify({'error': 'Job not found'}), 404

    report = ReportedJob(
        job_id=job.id,
        user_id=request.current_user.id,
        reason=data.reason,
        comments=data.comments,
        status='pending'
    )
    db.session.add(report)
    db.session.commit()

    logger.info(f"Job {job.id} reported by user {request.current_user.id}: {data.reason}")
    return jsonify({'message': 'Thanks, the listing has been reported', 'report': report.to_dict()}), 201


@reported_jobs_bp.route('/admin/reported-jobs', methods=['GET'])
@require_admin()
def list_reported_jobs():
    query = ReportedJob.query

    status = request.args.get('status')
    if status:
        if status not in REPORT_STATUSES:
            return jsonify({'error': f'Invalid status: {status}'}), 400
        query = query.filter_by(status=status)

    result = paginate(query.order_by(ReportedJob.created_at.desc(), ReportedJob.id.desc()))
    return jsonify({
        'reports': [r.to_dict(include_details=True) for r in result['items']],
        'pagination': result['pagination']
    }), 200


@reported_jobs_bp.route('/admin/reported-jobs/<int:report_id>', methods=['GET'])
@require_admin()
def get_reported_job(report_id):
    report = db.session.get(ReportedJob, report_id)
    if not report:
        return jsonify({'error': 'Report not found'}), 404

    return jsonify({'report': report.to_dict(include_details=True)}), 200


@reported_jobs_bp.route('/admin/reported-jobs/<int:report_id>', methods=['PATCH'])
@require_admin()
def review_reported_job(report_id):
    data = parse_body(ReportReviewRequest)

    report = db.session.get(ReportedJob, report_id)
    if not report:
        return jsonify({'error': 'Report not found'}), 404

    report.status = data.status
    if data.admin_notes is not None:
        report.admin_notes = data.admin_notes
    report.reviewed_by = request.current_user.id
    report.reviewed_at = datetime.utcnow()
    db.session.commit()

    return jsonify({'message': 'Report updated', 'report': report.to_dict(include_details=True)}), 200


@reported_jobs_bp.route('/admin/reported-jobs/<int:report_id>', methods=['DELETE'])
@require_admin()
def delete_reported_job(report_id):
    report = db.session.get(ReportedJob, report_id)
    if not report:
        return jsonify({'error': 'Report not found'}), 404

    db.session.delete(report)
    db.session.commit()

    return jsonify({'message': 'Report deleted'}), 200
