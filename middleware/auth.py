from functools import wraps
from flask import request, jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity, get_jwt
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from datetime import datetime, timedelta
from extensions import db
from models.user import User, UserSession

SESSION_CLAIM = 'sid'
ACTIVITY_THROTTLE = timedelta(minutes=5)


def _load_session_user(optional=False):
    """
    Hybrid authentication
    - Validates the JWT (cookie or Bearer header)
    - Validates the session it names in the database (revocable)
    Returns (user, session) or raises the JWT error.
    """
    verify_jwt_in_request(optional=optional)
    identity = get_jwt_identity()
    if identity is None:
        return None, None

    session_token = get_jwt().get(SESSION_CLAIM)
    if not session_token:
        return None, None

    session = UserSession.query.filter_by(
        session_token=session_token,
        user_id=int(identity)
    ).first()
    if not session or not session.is_valid():
        return None, None

    user = db.session.get(User, session.user_id)
    if not user or not user.is_active:
        return None, None

    # Throttle last-activity writes
    now = datetime.utcnow()
    if not session.last_activity or now - session.last_activity > ACTIVITY_THROTTLE:
        session.last_activity = now
        db.session.commit()

    return user, session


def _unauthenticated(message):
    return jsonify({'error': message, 'authenticated': False}), 401


def require_session(admin=False):
    """
    Require a logged-in user; sets request.current_user / request.current_session.
    With admin=True the user must also be an administrator (403 otherwise).
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                user, session = _load_session_user()
            except (JWTExtendedException, PyJWTError):
                return _unauthenticated('Not authenticated')

            if not user:
                return _unauthenticated('Session expired or revoked')

            if admin and not user.is_admin:
                return jsonify({'error': 'Forbidden. Admin access required.'}), 403

            request.current_user = user
            request.current_session = session
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_admin():
    return require_session(admin=True)


def optional_session():
    """
    Optional authentication - doesn't fail if no token
    Useful for public endpoints that show more data when authenticated
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                user, session = _load_session_user(optional=True)
            except (JWTExtendedException, PyJWTError):
                user, session = None, None

            request.current_user = user
            request.current_session = session
            return f(*args, **kwargs)

        return decorated_function
    return decorator
