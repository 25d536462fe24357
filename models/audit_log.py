from extensions import db
from datetime import datetime
import json
import logging

logger = logging.getLogger(__name__)

class AuditLog(db.Model):
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    actor_id = db.Column(db.Integer, nullable=True)  # admin performing the action, if any
    event_type = db.Column(db.String(50), nullable=False, index=True)  # register, login, logout, credit_adjustment, ...
    ip_address = db.Column(db.String(50))
    user_agent = db.Column(db.String(255))
    status = db.Column(db.String(20))  # success, failure
    details = db.Column(db.Text)  # JSON string with additional details
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'actor_id': self.actor_id,
            'event_type': self.event_type,
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'status': self.status,
            'details': json.loads(self.details) if self.details else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    @staticmethod
    def log_event(user_id, event_type, status, request=None, details=None, actor_id=None):
        """Record an audit event in its own commit; never raises"""
        log = AuditLog(
            user_id=user_id,
            actor_id=actor_id,
            event_type=event_type,
            ip_address=request.remote_addr if request else None,
            user_agent=request.headers.get('User-Agent', 'Unknown')[:255] if request else None,
            status=status,
            details=json.dumps(details) if details is not None else None
        )
        db.session.add(log)
        try:
            db.session.commit()
        except Exception as e:
            # Don't fail the main operation if logging fails
            db.session.rollback()
            logger.error(f"Audit log failed for {event_type}: {e}")
