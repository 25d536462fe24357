"""
Pytest configuration and fixtures
"""
import pytest
from datetime import datetime
from app import create_app
from extensions import db
from config import Config
from models.application import Application, APPLIED
from models.job import Job
from models.user import User
from services.accounts import generate_referral_code, start_session


class TestConfig(Config):
    """Test configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}  # Override pool settings for SQLite
    JWT_SECRET_KEY = 'test-secret-key-for-testing-only-0123456789abcdef'
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_COOKIE_SECURE = False
    REDIS_ENABLED = False
    SMTP_USERNAME = ''
    DEFAULT_TIMEZONE = 'UTC'
    LOG_LEVEL = 'WARNING'
    DEBUG = False


@pytest.fixture
def app():
    """Create application for testing, with an app context pushed"""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory for users committed to the database"""
    def _make_user(username='jobseeker', email=None, password='secret123', is_admin=False,
                   banked_credits=0, timezone=None):
        user = User(
            username=username,
            email=email or f'{username}@example.com',
            is_admin=is_admin,
            banked_credits=banked_credits,
            timezone=timezone,
            referral_code=generate_referral_code()
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(username='admin', is_admin=True)


@pytest.fixture
def make_job(app):
    """Factory for jobs committed to the database"""
    counter = {'n': 0}

    def _make_job(title=None, company='Acme Corp', is_active=True, **fields):
        counter['n'] += 1
        job = Job(
            title=title or f'Engineer {counter["n"]}',
            company=company,
            location=fields.pop('location', 'Remote'),
            requirements=fields.pop('requirements', 'Python; SQL'),
            is_active=is_active,
            **fields
        )
        db.session.add(job)
        db.session.commit()
        return job
    return _make_job


@pytest.fixture
def job(make_job):
    return make_job(title='Backend Engineer')


@pytest.fixture
def seed_applications(make_job):
    """Insert `count` applications for user at applied_at, each to a fresh job"""
    def _seed(user, count, applied_at=None):
        applied_at = applied_at or datetime.utcnow()
        applications = []
        for _ in range(count):
            job = make_job()
            application = Application(job_id=job.id, user_id=user.id, applied_at=applied_at)
            application.record_status(APPLIED, applied_at)
            db.session.add(application)
            applications.append(application)
        db.session.commit()
        return applications
    return _seed


@pytest.fixture
def auth_headers(app):
    """Bearer headers for a live session of the given user"""
    def _auth_headers(user):
        access_token, _ = start_session(user, device_info='pytest', ip_address='127.0.0.1')
        return {'Authorization': f'Bearer {access_token}'}
    return _auth_headers
