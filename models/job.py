from extensions import db
from datetime import datetime
import secrets
import string

JOB_IDENTIFIER_ALPHABET = string.ascii_uppercase + string.digits


def generate_job_identifier():
    return 'JOB-' + ''.join(secrets.choice(JOB_IDENTIFIER_ALPHABET) for _ in range(10))


class Job(db.Model):
    __tablename__ = 'jobs'

    id = db.Column(db.Integer, primary_key=True)
    # Business key from the ingestion feed; not unique, admins deduplicate by hand
    job_identifier = db.Column(db.String(100), nullable=False, index=True, default=generate_job_identifier)
    title = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), default='')
    salary = db.Column(db.String(100), default='Not specified')
    type = db.Column(db.String(50), default='Full-time')  # Full-time, Part-time, Contract
    description = db.Column(db.Text, default='')
    requirements = db.Column(db.Text, default='')  # semicolon-delimited
    source = db.Column(db.String(100), default='manual')
    source_url = db.Column(db.String(500), default='')
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    last_checked_at = db.Column(db.DateTime, default=datetime.utcnow)
    deactivated_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    applications = db.relationship('Application', backref='job', lazy='dynamic', cascade='all, delete-orphan')
    reports = db.relationship('ReportedJob', backref='job', lazy='dynamic', cascade='all, delete-orphan')
    saved_by = db.relationship('SavedJob', backref='job', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def requirement_list(self):
        return [r.strip() for r in (self.requirements or '').split(';') if r.strip()]

    def archive(self):
        self.is_active = False
        self.deactivated_at = datetime.utcnow()

    def restore(self):
        self.is_active = True
        self.deactivated_at = None

    def to_dict(self):
        return {
            'id': self.id,
            'job_identifier': self.job_identifier,
            'title': self.title,
            'company': self.company,
            'location': self.location,
            'salary': self.salary,
            'type': self.type,
            'description': self.description,
            'requirements': self.requirements or '',
            'requirement_list': self.requirement_list,
            'source': self.source,
            'source_url': self.source_url,
            'is_active': self.is_active,
            'last_checked_at': self.last_checked_at.isoformat() if self.last_checked_at else None,
            'deactivated_at': self.deactivated_at.isoformat() if self.deactivated_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
