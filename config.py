import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _bool_env(name, default='false'):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///pipeline.db')
    # Heroku-style URLs are rejected by SQLAlchemy 1.4+
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    APP_NAME = 'Pipeline'
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me-in-production')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Postgres connection pool settings
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'pool_recycle': 3600,  # Recycle connections after 1 hour
        'pool_pre_ping': True,  # Verify connections before using
        'max_overflow': 20,
        'pool_timeout': 30,
    } if SQLALCHEMY_DATABASE_URI.startswith('postgresql') else {}

    # Redis Configuration
    REDIS_ENABLED = _bool_env('REDIS_ENABLED', 'true')
    REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
    REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
    REDIS_DB = int(os.getenv('REDIS_DB', 0))
    REDIS_URL = os.getenv('REDIS_URL', '')  # overrides host/port/db when set
    CACHE_KEY_PREFIX = os.getenv('CACHE_KEY_PREFIX', 'pipeline')
    CACHE_TTL = 300  # 5 minutes default cache

    # SMTP for EmailService (disabled while SMTP_USERNAME is empty)
    SMTP_SERVER = os.getenv('SMTP_SERVER', 'smtp.gmail.com')
    SMTP_PORT = int(os.getenv('SMTP_PORT', 587))
    SMTP_USERNAME = os.getenv('SMTP_USERNAME', '')
    SMTP_PASSWORD = os.getenv('SMTP_PASSWORD', '')
    FROM_EMAIL = os.getenv('FROM_EMAIL', 'noreply@pipeline.jobs')
    FROM_NAME = os.getenv('FROM_NAME', 'Pipeline')
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

    # JWT - access token in an HTTP-only cookie, Bearer header also accepted
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'change-this-jwt-secret-in-production-please')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_TOKEN_LOCATION = ['headers', 'cookies']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'
    JWT_ACCESS_COOKIE_NAME = 'pipeline_session'
    JWT_COOKIE_SECURE = _bool_env('JWT_COOKIE_SECURE')
    JWT_COOKIE_SAMESITE = 'Lax'
    JWT_COOKIE_CSRF_PROTECT = True
    SESSION_LIFETIME = timedelta(hours=24)
    MAX_ACTIVE_SESSIONS = 5
    PASSWORD_RESET_TTL = timedelta(hours=1)

    # Credit ledger
    DAILY_CREDIT_LIMIT = 10
    REFERRAL_BONUS_CREDITS = 5
    REFERRAL_CODE_LENGTH = 8
    DEFAULT_TIMEZONE = os.getenv('DEFAULT_TIMEZONE', 'UTC')

    # Pagination
    DEFAULT_PER_PAGE = 20
    MAX_PER_PAGE = 100

    # Bootstrap admin account (init_database.py)
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME', '')
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', '')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', '')


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    JWT_COOKIE_SECURE = True
