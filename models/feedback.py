from extensions import db
from datetime import datetime

FEEDBACK_CATEGORIES = ('bug', 'feature', 'general', 'ui', 'other')


class Feedback(db.Model):
    __tablename__ = 'feedback'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    category = db.Column(db.String(20), nullable=False, default='general')
    subject = db.Column(db.String(200))
    comment = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='received')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_feedback_rating_range'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'rating': self.rating,
            'category': self.category,
            'subject': self.subject,
            'comment': self.comment,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
