from extensions import db
from datetime import datetime

# Sections stored as JSON lists of records, shapes defined in schemas.profiles
PROFILE_LIST_SECTIONS = (
    'education',
    'experience',
    'skills',
    'certifications',
    'languages',
    'publications',
    'projects',
    'reference_list',
    'preferred_locations',
)


class Profile(db.Model):
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)

    # Contact
    name = db.Column(db.String(200), default='')
    email = db.Column(db.String(120), default='')
    phone = db.Column(db.String(40), default='')
    title = db.Column(db.String(200), default='')
    bio = db.Column(db.Text, default='')

    # Location
    location = db.Column(db.String(200), default='')
    address = db.Column(db.String(255), default='')
    city = db.Column(db.String(120), default='')
    state = db.Column(db.String(120), default='')
    zip_code = db.Column(db.String(20), default='')
    country = db.Column(db.String(120), default='')

    # Career data
    education = db.Column(db.JSON, nullable=False, default=list)
    experience = db.Column(db.JSON, nullable=False, default=list)
    skills = db.Column(db.JSON, nullable=False, default=list)
    certifications = db.Column(db.JSON, nullable=False, default=list)
    languages = db.Column(db.JSON, nullable=False, default=list)
    publications = db.Column(db.JSON, nullable=False, default=list)
    projects = db.Column(db.JSON, nullable=False, default=list)
    reference_list = db.Column(db.JSON, nullable=False, default=list)

    # Documents and links
    resume_url = db.Column(db.String(500))
    transcript_url = db.Column(db.String(500))
    linkedin_url = db.Column(db.String(500))
    portfolio_url = db.Column(db.String(500))
    github_url = db.Column(db.String(500))

    # Work preferences
    availability = db.Column(db.String(50))
    work_authorization = db.Column(db.String(50))
    citizenship_status = db.Column(db.String(100))
    visa_sponsorship = db.Column(db.Boolean, default=False)
    willing_to_relocate = db.Column(db.Boolean, default=False)
    preferred_locations = db.Column(db.JSON, nullable=False, default=list)
    salary_expectation = db.Column(db.String(100))
    veteran_status = db.Column(db.String(100))
    security_clearance = db.Column(db.String(100))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def apply(self, values):
        """Copy validated profile fields onto the row"""
        for key, value in values.items():
            setattr(self, key, value)

    def to_dict(self):
        columns = [c.key for c in self.__table__.columns if c.key not in ('created_at', 'updated_at')]
        data = {key: getattr(self, key) for key in columns}
        for section in PROFILE_LIST_SECTIONS:
            data[section] = data.get(section) or []
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        data['updated_at'] = self.updated_at.isoformat() if self.updated_at else None
        return data
