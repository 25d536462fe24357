"""
Test accounts, sessions and referrals
"""
import pytest
import json
import re
from extensions import db
from models.user import User, UserSession
from services.accounts import register_user
from utils.errors import Conflict


def register(client, username='newuser', **overrides):
    payload = {
        'username': username,
        'email': f'{username}@example.com',
        'password': 'secret123',
        'confirmPassword': 'secret123',
    }
    payload.update(overrides)
    return client.post('/api/register', json=payload)


class TestRegister:
    """POST /api/register"""

    def test_register_success(self, client):
        response = register(client)

        assert response.status_code == 201
        data = json.loads(response.data)
        assert 'access_token' in data
        assert data['user']['username'] == 'newuser'
        assert data['user']['banked_credits'] == 0
        assert re.fullmatch(r'[A-Z0-9]{8}', data['user']['referral_code'])
        assert data['credits']['daily_remaining'] == 10
        assert any(c.startswith('pipeline_session=') for c in response.headers.getlist('Set-Cookie'))

    def test_password_mismatch(self, client):
        response = register(client, confirmPassword='different1')

        assert response.status_code == 400
        assert User.query.count() == 0

    def test_short_password(self, client):
        response = register(client, password='abc', confirmPassword='abc')

        assert response.status_code == 400
        fields = [d['field'] for d in response.get_json()['details']]
        assert 'password' in fields

    def test_invalid_email(self, client):
        response = register(client, email='notanemail')
        assert response.status_code == 400

    def test_short_username(self, client):
        response = register(client, username='ab')
        assert response.status_code == 400

    def test_duplicate_username(self, client, user):
        response = register(client, username=user.username, email='fresh@example.com')

        assert response.status_code == 409
        assert 'taken' in response.get_json()['error'].lower()

    def test_duplicate_email(self, client, user):
        response = register(client, email=user.email)
        assert response.status_code == 409

    @pytest.mark.parametrize('timezone', ['Mars/Olympus', 'America', 'x' * 300])
    def test_invalid_timezone(self, client, timezone):
        response = register(client, timezone=timezone)
        assert response.status_code == 400

    def test_timezone_saved(self, client):
        response = register(client, timezone='America/Chicago')
        assert response.get_json()['user']['timezone'] == 'America/Chicago'


class TestReferrals:

    def test_referral_bonus_both_sides(self, client, make_user):
        referrer = make_user(username='referrer', banked_credits=2)

        response = register(client, referredBy=referrer.referral_code.lower())

        assert response.status_code == 201
        assert response.get_json()['user']['banked_credits'] == 5
        assert response.get_json()['user']['referred_by'] == referrer.referral_code
        db.session.refresh(referrer)
        assert referrer.banked_credits == 7

    def test_unknown_code_ignored(self, client, user):
        response = register(client, referredBy='NOPE1234')

        assert response.status_code == 201
        assert response.get_json()['user']['banked_credits'] == 0
        assert response.get_json()['user']['referred_by'] is None
        db.session.refresh(user)
        assert user.banked_credits == 0

    def test_failed_registration_leaves_referrer_untouched(self, make_user):
        referrer = make_user(username='referrer')
        make_user(username='taken', email='taken@example.com')

        with pytest.raises(Conflict):
            register_user(
                username='brandnew',
                email='taken@example.com',
                password='secret123',
                referred_by=referrer.referral_code
            )

        db.session.refresh(referrer)
        assert referrer.banked_credits == 0
        assert User.query.filter_by(username='brandnew').first() is None

    def test_referral_lookup(self, client, user):
        response = client.get(f'/api/referral/{user.referral_code}')

        assert response.status_code == 200
        assert response.get_json()['username'] == user.username

    def test_referral_lookup_not_found(self, client):
        response = client.get('/api/referral/ZZZZZZZZ')
        assert response.status_code == 404

    def test_referral_code_with_count(self, client, user, auth_headers):
        register_user('friend1', 'friend1@example.com', 'secret123', referred_by=user.referral_code)
        register_user('friend2', 'friend2@example.com', 'secret123', referred_by=user.referral_code)

        response = client.get(f'/api/users/{user.id}/referral-code', headers=auth_headers(user))

        data = response.get_json()
        assert data['referral_code'] == user.referral_code
        assert data['referral_count'] == 2

    def test_referral_code_of_someone_else(self, client, user, make_user, auth_headers):
        other = make_user(username='other')
        response = client.get(f'/api/users/{other.id}/referral-code', headers=auth_headers(user))
        assert response.status_code == 403


class TestLogin:
    """POST /api/login, /api/logout, GET /api/user"""

    def test_login_with_username(self, client, user):
        response = client.post('/api/login', json={'username': user.username, 'password': 'secret123'})

        assert response.status_code == 200
        data = response.get_json()
        assert 'access_token' in data
        assert data['user']['id'] == user.id

    def test_login_with_email(self, client, user):
        response = client.post('/api/login', json={'username': user.email.upper(), 'password': 'secret123'})
        assert response.status_code == 200

    def test_login_wrong_password(self, client, user):
        response = client.post('/api/login', json={'username': user.username, 'password': 'wrong-pass'})

        assert response.status_code == 401
        assert 'invalid' in response.get_json()['error'].lower()

    def test_login_inactive_account(self, client, user):
        user.is_active = False
        db.session.commit()

        response = client.post('/api/login', json={'username': user.username, 'password': 'secret123'})
        assert response.status_code == 403

    def test_login_missing_fields(self, client):
        response = client.post('/api/login', json={'username': 'someone'})
        assert response.status_code == 400

    def test_current_user_with_bearer(self, client, user, auth_headers):
        response = client.get('/api/user', headers=auth_headers(user))

        assert response.status_code == 200
        assert response.get_json()['user']['username'] == user.username
        assert 'credits' in response.get_json()

    def test_current_user_with_cookie(self, client, user):
        client.post('/api/login', json={'username': user.username, 'password': 'secret123'})

        response = client.get('/api/user')

        assert response.status_code == 200
        assert response.get_json()['user']['id'] == user.id

    def test_current_user_unauthenticated(self, client):
        response = client.get('/api/user')

        assert response.status_code == 401
        assert response.get_json()['authenticated'] is False

    def test_logout_revokes_session(self, client, user, auth_headers):
        headers = auth_headers(user)

        response = client.post('/api/logout', headers=headers)
        assert response.status_code == 200

        response = client.get('/api/user', headers=headers)
        assert response.status_code == 401

    def test_session_limit(self, user, auth_headers, app):
        for _ in range(app.config['MAX_ACTIVE_SESSIONS'] + 2):
            auth_headers(user)

        active = UserSession.query.filter_by(user_id=user.id, is_active=True).count()
        assert active == app.config['MAX_ACTIVE_SESSIONS']

    def test_update_account(self, client, user, auth_headers):
        response = client.patch('/api/user', json={'timezone': 'Europe/London', 'email': 'new@example.com'},
                                headers=auth_headers(user))

        assert response.status_code == 200
        data = response.get_json()['user']
        assert data['timezone'] == 'Europe/London'
        assert data['email'] == 'new@example.com'


class TestPasswordReset:

    def test_forgot_password_always_ok(self, client):
        response = client.post('/api/forgot-password', json={'email': 'nobody@example.com'})
        assert response.status_code == 200

    def test_forgot_password_sets_token(self, client, user):
        client.post('/api/forgot-password', json={'email': user.email})

        db.session.refresh(user)
        assert user.reset_token is not None
        assert user.reset_token_expiry is not None

    def test_reset_password(self, client, user, app):
        token = user.generate_reset_token(app.config['PASSWORD_RESET_TTL'])
        db.session.commit()

        response = client.post('/api/reset-password', json={
            'email': user.email,
            'token': token,
            'password': 'newsecret1',
            'confirmPassword': 'newsecret1'
        })

        assert response.status_code == 200
        db.session.refresh(user)
        assert user.check_password('newsecret1')
        assert user.reset_token is None

    def test_reset_password_bad_token(self, client, user, app):
        user.generate_reset_token(app.config['PASSWORD_RESET_TTL'])
        db.session.commit()

        response = client.post('/api/reset-password', json={
            'email': user.email,
            'token': 'not-the-token',
            'password': 'newsecret1',
            'confirmPassword': 'newsecret1'
        })

        assert response.status_code == 400
        db.session.refresh(user)
        assert user.check_password('secret123')
