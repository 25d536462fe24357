from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from models.notification import Notification
from extensions import db, cache_get, cache_set, cache_delete, cache_delete_pattern
from middleware.auth import require_session
from schemas.notifications import build_metadata
from utils.pagination import paginate, paginate_response
from datetime import datetime
import logging

notifications_bp = Blueprint('notifications', __name__)
logger = logging.getLogger(__name__)


def invalidate_notification_cache(user_id):
    cache_delete_pattern(f"notifications:{user_id}:*")
    cache_delete(f"notifications:unread_count:{user_id}")


def _owned_notification(notification_id):
    return Notification.query.filter_by(
        id=notification_id,
        user_id=request.current_user.id
    ).first()


@notifications_bp.route('', methods=['GET'])
@require_session()
def get_notifications():
    """Get notifications for the current user, newest first"""
    user_id = request.current_user.id
    unread_only = request.args.get('unread_only', 'false').lower() == 'true'
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', 20, type=int)

    cache_key = f"notifications:{user_id}:{'unread' if unread_only else 'all'}:{page}:{per_page}"
    cached_data = cache_get(cache_key)
    if cached_data:
        return jsonify({**cached_data, 'cached': True}), 200

    query = Notification.query.filter_by(user_id=user_id)
    if unread_only:
        query = query.filter_by(is_read=False)
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc())

    result = paginate_response(paginate(query, page, per_page), key='notifications')
    result['unread_count'] = Notification.query.filter_by(user_id=user_id, is_read=False).count()

    # Cache for 30 seconds
    cache_set(cache_key, result, expire=30)

    return jsonify({**result, 'cached': False}), 200


@notifications_bp.route('/unread-count', methods=['GET'])
@require_session()
def get_unread_count():
    """Get count of unread notifications"""
    user_id = request.current_user.id

    cache_key = f"notifications:unread_count:{user_id}"
    cached_count = cache_get(cache_key)
    if cached_count is not None:
        return jsonify({'unread_count': cached_count, 'cached': True}), 200

    unread_count = Notification.query.filter_by(user_id=user_id, is_read=False).count()

    # Cache for 10 seconds
    cache_set(cache_key, unread_count, expire=10)

    return jsonify({'unread_count': unread_count, 'cached': False}), 200


@notifications_bp.route('/<int:notification_id>/mark-read', methods=['POST', 'PUT'])
@require_session()
def mark_as_read(notification_id):
    """Mark a notification as read"""
    notification = _owned_notification(notification_id)
    if not notification:
        return jsonify({'error': 'Notification not found'}), 404

    if not notification.is_read:
        notification.mark_read()
        db.session.commit()
        invalidate_notification_cache(notification.user_id)

    return jsonify({
        'message': 'Notification marked as read',
        'notification': notification.to_dict()
    }), 200


@notifications_bp.route('/mark-all-read', methods=['POST', 'PUT'])
@require_session()
def mark_all_as_read():
    """Mark all notifications as read"""
    user_id = request.current_user.id

    updated = Notification.query.filter_by(user_id=user_id, is_read=False).update({
        'is_read': True,
        'read_at': datetime.utcnow()
    }, synchronize_session=False)
    db.session.commit()
    invalidate_notification_cache(user_id)

    return jsonify({'message': 'All notifications marked as read', 'updated': updated}), 200


@notifications_bp.route('/<int:notification_id>', methods=['DELETE'])
@require_session()
def delete_notification(notification_id):
    """Delete a notification"""
    notification = _owned_notification(notification_id)
    if not notification:
        return jsonify({'error': 'Notification not found'}), 404

    db.session.delete(notification)
    db.session.commit()
    invalidate_notification_cache(request.current_user.id)

    return jsonify({'message': 'Notification deleted'}), 200


@notifications_bp.route('/clear-all', methods=['DELETE'])
@require_session()
def clear_all_notifications():
    """Clear all notifications for the user"""
    user_id = request.current_user.id

    deleted = Notification.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.commit()
    invalidate_notification_cache(user_id)

    return jsonify({'message': 'All notifications cleared', 'deleted': deleted}), 200


# Called from other routes and services after their own commit
def create_notification(user_id, notification_type, title, message, metadata=None):
    """
    Create a notification for a user.

    Best effort: metadata is validated for the type, the row is committed on
    its own, and any failure is logged and rolled back without raising.
    Returns the notification or None.
    """
    try:
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            meta=build_metadata(notification_type, **(metadata or {}))
        )

        db.session.add(notification)
        db.session.commit()

        invalidate_notification_cache(user_id)

        logger.info(f"Notification created for user {user_id}: {title}")
        return notification

    except (SQLAlchemyError, ValueError) as e:
        db.session.rollback()
        logger.error(f"Create notification error: {str(e)}")
        return None
