from flask import Blueprint, request, jsonify
from models.message import Message
from models.notification import MESSAGE_RECEIVED
from models.user import User
from extensions import db
from middleware.auth import require_session
from routes.applications import get_accessible_application
from routes.notifications import create_notification
from schemas import parse_body
from schemas.applications import MessageRequest
from schemas.notifications import application_ref
import logging

messages_bp = Blueprint('messages', __name__)
logger = logging.getLogger(__name__)


def _incoming(application, user):
    """Messages written by the other side of the conversation"""
    return Message.query.filter(
        Message.application_id == application.id,
        Message.is_from_admin == (not user.is_admin),
    )


@messages_bp.route('/<int:application_id>/messages', methods=['GET'])
@require_session()
def get_messages(application_id):
    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    messages = application.messages.order_by(Message.created_at.asc(), Message.id.asc()).all()
    return jsonify({'messages': [m.to_dict() for m in messages]}), 200


@messages_bp.route('/<int:application_id>/messages', methods=['POST'])
@require_session()
def send_message(application_id):
    data = parse_body(MessageRequest)

    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    user = request.current_user
    message = Message(
        application_id=application.id,
        content=data.content,
        is_from_admin=user.is_admin,
        is_read=False,
        sender_username=user.username
    )
    db.session.add(message)
    db.session.commit()

    if user.is_admin:
        recipient_ids = [application.user_id]
    else:
        recipient_ids = [
            admin.id for admin in User.query.filter_by(is_admin=True, is_active=True).all()
            if admin.id != user.id
        ]

    job = application.job
    for recipient_id in recipient_ids:
        create_notification(
            user_id=recipient_id,
            notification_type=MESSAGE_RECEIVED,
            title=f'New message from {user.username}',
            message=f'New message about {job.title} at {job.company}',
            metadata={
                **application_ref(application),
                'message_id': message.id,
                'sender_username': user.username,
            },
        )

    logger.info(f"Message {message.id} on application {application.id} from user {user.id}")
    return jsonify({'message': message.to_dict()}), 201


@messages_bp.route('/<int:application_id>/messages/unread-count', methods=['GET'])
@require_session()
def get_unread_message_count(application_id):
    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    count = _incoming(application, request.current_user).filter(Message.is_read.is_(False)).count()
    return jsonify({'unread_count': count}), 200


@messages_bp.route('/<int:application_id>/messages/<int:message_id>/read', methods=['PATCH'])
@require_session()
def mark_message_read(application_id, message_id):
    """Only the recipient side can mark a message read"""
    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    message = application.messages.filter(Message.id == message_id).first()
    if not message:
        return jsonify({'error': 'Message not found'}), 404

    if message.is_from_admin == request.current_user.is_admin:
        return jsonify({'error': 'Cannot mark your own message as read'}), 403

    if not message.is_read:
        message.is_read = True
        db.session.commit()

    return jsonify({'message': message.to_dict()}), 200


@messages_bp.route('/<int:application_id>/messages/read-all', methods=['POST'])
@require_session()
def mark_all_messages_read(application_id):
    application = get_accessible_application(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    updated = _incoming(application, request.current_user).filter(
        Message.is_read.is_(False)
    ).update({'is_read': True}, synchronize_session=False)
    db.session.commit()

    return jsonify({'message': 'Messages marked as read', 'updated': updated}), 200
