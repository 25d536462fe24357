from flask import Blueprint, request, jsonify
from models.feedback import Feedback
from extensions import db
from middleware.auth import require_session, require_admin
from schemas import parse_body
from schemas.jobs import FeedbackRequest
from utils.pagination import paginate

feedback_bp = Blueprint('feedback', __name__)


@feedback_bp.route('/feedback', methods=['POST'])
@require_session()
def submit_feedback():
    data = parse_body(FeedbackRequest)

    feedback = Feedback(
        user_id=request.current_user.id,
        rating=data.rating,
        category=data.category,
        subject=data.subject,
        comment=data.comment,
        status='received'
    )
    db.session.add(feedback)
    db.session.commit()

    return jsonify({'message': 'Thanks for your feedback', 'feedback': feedback.to_dict()}), 201


@feedback_bp.route('/feedback', methods=['GET'])
@require_session()
def get_my_feedback():
    feedback = Feedback.query.filter_by(
        user_id=request.current_user.id
    ).order_by(Feedback.created_at.desc()).all()

    return jsonify({'feedback': [f.to_dict() for f in feedback]}), 200


@feedback_bp.route('/admin/feedback', methods=['GET'])
@require_admin()
def list_feedback():
    query = Feedback.query

    category = request.args.get('category')
    if category:
        query = query.filter_by(category=category)

    result = paginate(query.order_by(Feedback.created_at.desc(), Feedback.id.desc()))
    return jsonify({
        'feedback': [f.to_dict() for f in result['items']],
        'pagination': result['pagination']
    }), 200
