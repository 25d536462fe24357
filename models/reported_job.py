from extensions import db
from datetime import datetime

REPORT_REASONS = ('ghost_listing', 'duplicate', 'fraudulent', 'inappropriate', 'misleading', 'other')
REPORT_STATUSES = ('pending', 'reviewed', 'resolved', 'dismissed')


class ReportedJob(db.Model):
    __tablename__ = 'reported_jobs'

    id = db.Column(db.Integer, primary_key=True)
    job_id = db.Column(db.Integer, db.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    reason = db.Column(db.String(30), nullable=False)
    comments = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    admin_notes = db.Column(db.Text)
    reviewed_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'))
    reviewed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    reviewer = db.relationship('User', foreign_keys=[reviewed_by])

    def to_dict(self, include_details=False):
        data = {
            'id': self.id,
            'job_id': self.job_id,
            'user_id': self.user_id,
            'reason': self.reason,
            'comments': self.comments,
            'status': self.status,
            'admin_notes': self.admin_notes,
            'reviewed_by': self.reviewed_by,
            'reviewed_at': self.reviewed_at.isoformat() if self.reviewed_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

        if include_details:
            data['job'] = {
                'id': self.job.id,
                'title': self.job.title,
                'company': self.job.company,
                'is_active': self.job.is_active,
            } if self.job else None
            data['reporter_username'] = self.reporter.username if self.reporter else None

        return data
