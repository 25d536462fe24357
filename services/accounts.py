from datetime import datetime
from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
import secrets
import string
import logging

from extensions import db
from middleware.auth import SESSION_CLAIM
from models.user import User, UserSession
from utils.errors import Conflict

logger = logging.getLogger(__name__)

REFERRAL_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code(length=None):
    """Random [A-Z0-9] code not yet used by any user"""
    length = length or current_app.config.get('REFERRAL_CODE_LENGTH', 8)
    while True:
        code = ''.join(secrets.choice(REFERRAL_ALPHABET) for _ in range(length))
        if not User.query.filter_by(referral_code=code).first():
            return code


def find_referrer(code):
    if not code:
        return None
    return User.query.filter_by(referral_code=code.strip().upper()).first()


def register_user(username, email, password, referred_by=None, timezone=None, is_admin=False, banked_credits=0):
    """
    Create a user, crediting the referral bonus to both sides.

    The new user and the referrer's bonus are committed together: if the
    insert fails neither balance changes. Unknown referral codes are ignored.
    Returns (user, referrer).
    """
    bonus = current_app.config.get('REFERRAL_BONUS_CREDITS', 5)

    user = User(
        username=username,
        email=email,
        is_admin=is_admin,
        banked_credits=banked_credits,
        timezone=timezone,
        referral_code=generate_referral_code(),
    )
    user.set_password(password)

    referrer = None
    try:
        if referred_by:
            referrer = User.query.filter_by(
                referral_code=referred_by.strip().upper()
            ).with_for_update().first()
            if referrer:
                user.referred_by = referrer.referral_code
                user.banked_credits += bonus
                referrer.banked_credits += bonus
            else:
                logger.info(f"Ignoring unknown referral code {referred_by!r} for {username}")

        db.session.add(user)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning(f"Registration failed for {username}: {e.orig}")
        raise Conflict('Username or email already registered')

    if referrer:
        logger.info(f"Referral bonus: {referrer.username} referred {user.username} (+{bonus} each)")

    return user, referrer


def start_session(user, device_info=None, ip_address=None):
    """
    Open a revocable session for user and issue the JWT that names it.

    Oldest sessions beyond MAX_ACTIVE_SESSIONS are revoked.
    Returns (access_token, session).
    """
    lifetime = current_app.config['SESSION_LIFETIME']
    max_sessions = current_app.config.get('MAX_ACTIVE_SESSIONS', 5)

    active_sessions = UserSession.query.filter_by(
        user_id=user.id, is_active=True
    ).order_by(UserSession.created_at.desc(), UserSession.id.desc()).all()
    for old_session in active_sessions[max_sessions - 1:]:
        old_session.revoke()

    session = UserSession(
        user_id=user.id,
        expires_at=datetime.utcnow() + lifetime,
        device_info=(device_info or 'Unknown')[:255],
        ip_address=ip_address,
    )
    db.session.add(session)

    user.last_login = datetime.utcnow()
    user.last_login_ip = ip_address
    db.session.commit()

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={SESSION_CLAIM: session.session_token},
        expires_delta=lifetime,
    )
    return access_token, session


def revoke_all_sessions(user):
    UserSession.query.filter_by(user_id=user.id, is_active=True).update(
        {'is_active': False}, synchronize_session=False
    )
