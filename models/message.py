from extensions import db
from datetime import datetime

class Message(db.Model):
    __tablename__ = 'messages'

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey('applications.id', ondelete='CASCADE'),
                               nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    is_from_admin = db.Column(db.Boolean, default=False, nullable=False)
    # Read flag belongs to the non-author party
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    sender_username = db.Column(db.String(80), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'application_id': self.application_id,
            'content': self.content,
            'is_from_admin': self.is_from_admin,
            'is_read': self.is_read,
            'sender_username': self.sender_username,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
