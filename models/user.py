from extensions import db
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
import secrets

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Credit ledger: daily credits are derived from applications, only banked credits are stored
    banked_credits = db.Column(db.Integer, default=0, nullable=False)
    referral_code = db.Column(db.String(16), unique=True, nullable=False, index=True)
    referred_by = db.Column(db.String(16), index=True)  # referral code of the referrer
    timezone = db.Column(db.String(64))  # IANA name, e.g. America/New_York

    # Password reset
    reset_token = db.Column(db.String(255))  # hashed
    reset_token_expiry = db.Column(db.DateTime)

    last_login = db.Column(db.DateTime)
    last_login_ip = db.Column(db.String(50))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('banked_credits >= 0', name='ck_users_banked_credits_non_negative'),
    )

    # Relationships (owned data is removed with the user)
    profile = db.relationship('Profile', backref='user', uselist=False, cascade='all, delete-orphan')
    applications = db.relationship('Application', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    notifications = db.relationship('Notification', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    saved_jobs = db.relationship('SavedJob', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    feedback = db.relationship('Feedback', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    reported_jobs = db.relationship('ReportedJob', backref='reporter', lazy='dynamic',
                                    cascade='all, delete-orphan', foreign_keys='ReportedJob.user_id')
    sessions = db.relationship('UserSession', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def generate_reset_token(self, ttl):
        """Create a password reset token, store its hash and return the plain value"""
        token = secrets.token_urlsafe(32)
        self.reset_token = generate_password_hash(token)
        self.reset_token_expiry = datetime.utcnow() + ttl
        return token

    def check_reset_token(self, token):
        if not self.reset_token or not self.reset_token_expiry:
            return False
        if self.reset_token_expiry < datetime.utcnow():
            return False
        return check_password_hash(self.reset_token, token)

    def clear_reset_token(self):
        self.reset_token = None
        self.reset_token_expiry = None

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'is_admin': self.is_admin,
            'is_active': self.is_active,
            'banked_credits': self.banked_credits,
            'referral_code': self.referral_code,
            'referred_by': self.referred_by,
            'timezone': self.timezone,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.id}: {self.username}>'


class UserSession(db.Model):
    __tablename__ = 'user_sessions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    session_token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    device_info = db.Column(db.String(255))  # Browser, OS, device type
    ip_address = db.Column(db.String(50))
    is_active = db.Column(db.Boolean, default=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    last_activity = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __init__(self, user_id, expires_at, device_info=None, ip_address=None):
        self.user_id = user_id
        self.session_token = secrets.token_urlsafe(48)
        self.device_info = device_info
        self.ip_address = ip_address
        self.expires_at = expires_at
        self.is_active = True

    def is_valid(self):
        """Check if session is still valid"""
        return bool(self.is_active) and self.expires_at > datetime.utcnow()

    def revoke(self):
        self.is_active = False

    def to_dict(self):
        return {
            'id': self.id,
            'device_info': self.device_info,
            'ip_address': self.ip_address,
            'is_active': self.is_active,
            'last_activity': self.last_activity.isoformat() if self.last_activity else None,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
