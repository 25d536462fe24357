from extensions import db
from datetime import datetime

APPLIED = 'Applied'
INTERVIEWING = 'Interviewing'
ACCEPTED = 'Accepted'
REJECTED = 'Rejected'
WITHDRAWN = 'Withdrawn'

APPLICATION_STATUSES = (APPLIED, INTERVIEWING, ACCEPTED, REJECTED, WITHDRAWN)

CREDIT_SOURCE_DAILY = 'daily'
CREDIT_SOURCE_BANKED = 'banked'


class Application(db.Model):
    __tablename__ = 'applications'

    id = db.Column(db.Integer, primary_key=True)
    job_id = db.Column(db.Integer, db.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    profile_id = db.Column(db.Integer, db.ForeignKey('profiles.id', ondelete='SET NULL'))
    status = db.Column(db.String(20), nullable=False, default=APPLIED)
    applied_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)  # authoritative for credits
    credit_source = db.Column(db.String(10), nullable=False, default=CREDIT_SOURCE_DAILY)
    status_history = db.Column(db.JSON, nullable=False, default=list)  # [{status, date}]
    cover_letter = db.Column(db.Text)
    application_data = db.Column(db.JSON, nullable=False, default=dict)

    # Admin-only fields
    notes = db.Column(db.Text)
    next_step = db.Column(db.String(500))
    next_step_due_date = db.Column(db.DateTime)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    messages = db.relationship('Message', backref='application', lazy='dynamic',
                               cascade='all, delete-orphan', order_by='Message.created_at')

    __table_args__ = (
        # Daily credit window query
        db.Index('ix_applications_user_applied_at', 'user_id', 'applied_at'),
        # One live application per (user, job); withdrawn rows do not count
        db.Index(
            'uq_applications_active_user_job', 'user_id', 'job_id',
            unique=True,
            postgresql_where=db.text("status <> 'Withdrawn'"),
            sqlite_where=db.text("status <> 'Withdrawn'"),
        ),
    )

    @property
    def is_active(self):
        return self.status != WITHDRAWN

    def record_status(self, status, when=None):
        """Set the status and append it to the history"""
        when = when or datetime.utcnow()
        self.status = status
        # Reassign so SQLAlchemy sees the JSON change
        self.status_history = list(self.status_history or []) + [
            {'status': status, 'date': when.isoformat()}
        ]

    def to_dict(self, include_admin=False, include_job=False):
        data = {
            'id': self.id,
            'job_id': self.job_id,
            'user_id': self.user_id,
            'profile_id': self.profile_id,
            'status': self.status,
            'applied_at': self.applied_at.isoformat() if self.applied_at else None,
            'credit_source': self.credit_source,
            'status_history': self.status_history or [],
            'cover_letter': self.cover_letter,
            'application_data': self.application_data or {},
            'next_step': self.next_step,
            'next_step_due_date': self.next_step_due_date.isoformat() if self.next_step_due_date else None,
            'job_archived': bool(self.job is not None and not self.job.is_active),
        }

        if include_admin:
            data['notes'] = self.notes
            data['username'] = self.user.username if self.user else None

        if include_job and self.job:
            data['job'] = {
                'id': self.job.id,
                'title': self.job.title,
                'company': self.job.company,
                'location': self.job.location,
                'is_active': self.job.is_active,
            }

        return data
