from extensions import db
from datetime import datetime

class EmailLog(db.Model):
    __tablename__ = 'email_logs'

    id = db.Column(db.Integer, primary_key=True)
    to_email = db.Column(db.String(200), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    email_type = db.Column(db.String(50))  # application_confirmation, status_change, password_reset
    related_id = db.Column(db.Integer)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.String(20), default='sent')  # sent, failed, skipped
    error_message = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id,
            'to_email': self.to_email,
            'subject': self.subject,
            'email_type': self.email_type,
            'related_id': self.related_id,
            'sent_at': self.sent_at.isoformat() if self.sent_at else None,
            'status': self.status,
            'error_message': self.error_message
        }
