from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies
from sqlalchemy import or_
from models.user import User
from models.audit_log import AuditLog
from extensions import db
from middleware.auth import require_session
from schemas import parse_body
from schemas.auth import (
    RegisterRequest,
    LoginRequest,
    UpdateAccountRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from services.accounts import register_user, start_session, revoke_all_sessions, find_referrer
from services.credits import credit_summary, timezone_for
from services.email_service import EmailService
import logging

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


def _requester_timezone():
    return request.headers.get('X-Timezone') or request.args.get('tz')


def _session_response(user, access_token, session, message, status_code):
    response = jsonify({
        'message': message,
        'user': user.to_dict(),
        'credits': credit_summary(user, tz_name=timezone_for(user, _requester_timezone())),
        'access_token': access_token,
        'expires_at': session.expires_at.isoformat()
    })
    set_access_cookies(response, access_token)
    return response, status_code


@auth_bp.route('/register', methods=['POST'])
def register():
    data = parse_body(RegisterRequest)

    if User.query.filter_by(username=data.username).first():
        return jsonify({'error': 'Username already taken'}), 409
    if User.query.filter_by(email=data.email).first():
        return jsonify({'error': 'Email already registered'}), 409

    user, referrer = register_user(
        username=data.username,
        email=data.email,
        password=data.password,
        referred_by=data.referred_by,
        timezone=data.timezone,
    )

    access_token, session = start_session(
        user,
        device_info=request.headers.get('User-Agent'),
        ip_address=request.remote_addr
    )

    AuditLog.log_event(user.id, 'register', 'success', request, {
        'username': user.username,
        'referred_by': referrer.id if referrer else None,
    })
    if referrer:
        AuditLog.log_event(referrer.id, 'referral_bonus', 'success', request, {'referee_id': user.id})

    return _session_response(user, access_token, session, 'Registration successful', 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    data = parse_body(LoginRequest)
    identifier = data.username.strip()

    user = User.query.filter(
        or_(User.username == identifier, User.email == identifier.lower())
    ).first()

    if not user or not user.check_password(data.password):
        AuditLog.log_event(user.id if user else None, 'login', 'failure', request, {
            'reason': 'invalid_password' if user else 'user_not_found',
            'username': identifier,
        })
        return jsonify({'error': 'Invalid username or password'}), 401

    if not user.is_active:
        AuditLog.log_event(user.id, 'login', 'failure', request, {'reason': 'account_inactive'})
        return jsonify({'error': 'Account is inactive'}), 403

    access_token, session = start_session(
        user,
        device_info=request.headers.get('User-Agent'),
        ip_address=request.remote_addr
    )
    AuditLog.log_event(user.id, 'login', 'success', request)

    return _session_response(user, access_token, session, 'Login successful', 200)


@auth_bp.route('/logout', methods=['POST'])
@require_session()
def logout():
    user = request.current_user
    request.current_session.revoke()
    db.session.commit()

    AuditLog.log_event(user.id, 'logout', 'success', request)

    response = jsonify({'message': 'Logged out successfully'})
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.route('/user', methods=['GET'])
@require_session()
def get_current_user():
    user = request.current_user
    return jsonify({
        'user': user.to_dict(),
        'credits': credit_summary(user, tz_name=timezone_for(user, _requester_timezone()))
    }), 200


@auth_bp.route('/user', methods=['PATCH'])
@require_session()
def update_current_user():
    user = request.current_user
    data = parse_body(UpdateAccountRequest)
    changes = data.model_dump(exclude_unset=True)

    if changes.get('email') and changes['email'] != user.email:
        if User.query.filter(User.email == changes['email'], User.id != user.id).first():
            return jsonify({'error': 'Email already registered'}), 409
        user.email = changes['email']

    if 'timezone' in changes:
        user.timezone = changes['timezone']

    db.session.commit()
    return jsonify({'message': 'Account updated', 'user': user.to_dict()}), 200


@auth_bp.route('/referral/<code>', methods=['GET'])
def lookup_referral(code):
    """Public: who owns a referral code (shown on the signup page)"""
    referrer = find_referrer(code)
    if not referrer:
        return jsonify({'error': 'Referral code not found'}), 404

    return jsonify({
        'referral_code': referrer.referral_code,
        'username': referrer.username
    }), 200


@auth_bp.route('/users/<int:user_id>/referral-code', methods=['GET'])
@require_session()
def get_referral_code(user_id):
    current_user = request.current_user
    if current_user.id != user_id and not current_user.is_admin:
        return jsonify({'error': 'Forbidden'}), 403

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    return jsonify({
        'referral_code': user.referral_code,
        'referral_count': User.query.filter_by(referred_by=user.referral_code).count(),
        'bonus_per_referral': current_app.config.get('REFERRAL_BONUS_CREDITS', 5)
    }), 200


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """Always answers 200 so the endpoint can't be used to probe for accounts"""
    data = parse_body(ForgotPasswordRequest)
    user = User.query.filter_by(email=data.email).first()

    if user and user.is_active:
        token = user.generate_reset_token(current_app.config['PASSWORD_RESET_TTL'])
        db.session.commit()
        EmailService().send_password_reset(user, token)
        AuditLog.log_event(user.id, 'password_reset_request', 'success', request)
        logger.info(f"Password reset requested for user {user.id}")

    return jsonify({
        'message': 'If an account exists for that email, a reset link has been sent'
    }), 200


@auth_bp.route('/reset-password', methods=['POST'])
def reset_password():
    data = parse_body(ResetPasswordRequest)
    user = User.query.filter_by(email=data.email).first()

    if not user or not user.check_reset_token(data.token):
        if user:
            AuditLog.log_event(user.id, 'password_reset', 'failure', request, {'reason': 'invalid_token'})
        return jsonify({'error': 'Invalid or expired reset token'}), 400

    user.set_password(data.password)
    user.clear_reset_token()
    revoke_all_sessions(user)
    db.session.commit()

    AuditLog.log_event(user.id, 'password_reset', 'success', request)
    return jsonify({'message': 'Password has been reset. Please log in again.'}), 200
