from extensions import db
from datetime import datetime

MESSAGE_RECEIVED = 'message_received'
STATUS_CHANGE = 'status_change'
NEXT_STEPS_ADDED = 'next_steps_added'
NEXT_STEPS_UPDATED = 'next_steps_updated'
INTERVIEW_SCHEDULED = 'interview_scheduled'
APPLICATION_ACCEPTED = 'application_accepted'
APPLICATION_REJECTED = 'application_rejected'
APPLICATION_SUBMITTED = 'application_submitted'
APPLICATION_CONFIRMATION = 'application_confirmation'

NOTIFICATION_TYPES = (
    MESSAGE_RECEIVED,
    STATUS_CHANGE,
    NEXT_STEPS_ADDED,
    NEXT_STEPS_UPDATED,
    INTERVIEW_SCHEDULED,
    APPLICATION_ACCEPTED,
    APPLICATION_REJECTED,
    APPLICATION_SUBMITTED,
    APPLICATION_CONFIRMATION,
)


class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    # Notification details
    type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)

    # Validated per type, see schemas.notifications
    meta = db.Column('metadata', db.JSON, nullable=False, default=dict)

    is_read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    read_at = db.Column(db.DateTime)

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = datetime.utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'metadata': self.meta or {},
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'read_at': self.read_at.isoformat() if self.read_at else None,
        }

    def __repr__(self):
        return f'<Notification {self.id}: {self.title}>'
