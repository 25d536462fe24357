"""
Test admin endpoints
"""
import pytest
from extensions import db
from models.application import Application
from models.audit_log import AuditLog
from models.notification import Notification
from models.user import User
from services.applications import apply_to_job


class TestAdminAccess:

    @pytest.mark.parametrize('method,url', [
        ('get', '/api/admin/users'),
        ('get', '/api/admin/applications'),
        ('get', '/api/admin/stats'),
        ('get', '/api/admin/metrics'),
        ('get', '/api/admin/reported-jobs'),
        ('get', '/api/admin/feedback'),
    ])
    def test_non_admin_forbidden(self, client, user, auth_headers, method, url):
        response = getattr(client, method)(url, headers=auth_headers(user))
        assert response.status_code == 403

    def test_anonymous_unauthorized(self, client):
        assert client.get('/api/admin/users').status_code == 401


class TestAdminUsers:

    def test_list_users_with_credits(self, client, admin, user, auth_headers):
        response = client.get('/api/admin/users', headers=auth_headers(admin))

        assert response.status_code == 200
        users = {u['username']: u for u in response.get_json()['users']}
        assert set(users) == {'admin', 'jobseeker'}
        assert users['jobseeker']['credits']['daily_remaining'] == 10

    def test_create_user(self, client, admin, auth_headers):
        response = client.post('/api/admin/users', json={
            'username': 'recruiter',
            'email': 'recruiter@example.com',
            'password': 'secret123',
            'isAdmin': True,
            'bankedCredits': 3
        }, headers=auth_headers(admin))

        assert response.status_code == 201
        data = response.get_json()['user']
        assert data['is_admin'] is True
        assert data['banked_credits'] == 3
        assert len(data['referral_code']) == 8

    def test_create_duplicate_user(self, client, admin, user, auth_headers):
        response = client.post('/api/admin/users', json={
            'username': user.username,
            'email': 'another@example.com',
            'password': 'secret123'
        }, headers=auth_headers(admin))
        assert response.status_code == 409

    def test_update_user(self, client, admin, user, auth_headers):
        response = client.patch(f'/api/admin/users/{user.id}', json={'isAdmin': True, 'timezone': 'Asia/Kolkata'},
                                headers=auth_headers(admin))

        assert response.status_code == 200
        db.session.refresh(user)
        assert user.is_admin is True
        assert user.timezone == 'Asia/Kolkata'

    def test_cannot_demote_self(self, client, admin, auth_headers):
        response = client.patch(f'/api/admin/users/{admin.id}', json={'isAdmin': False},
                                headers=auth_headers(admin))
        assert response.status_code == 400

    def test_delete_user_cascades(self, client, admin, user, job, auth_headers):
        application = apply_to_job(user, job.id)
        application_id = application.id

        response = client.delete(f'/api/admin/users/{user.id}', headers=auth_headers(admin))

        assert response.status_code == 200
        db.session.expire_all()
        assert User.query.filter_by(username='jobseeker').first() is None
        assert db.session.get(Application, application_id) is None
        assert Notification.query.count() == 0

    def test_cannot_delete_self(self, client, admin, auth_headers):
        response = client.delete(f'/api/admin/users/{admin.id}', headers=auth_headers(admin))
        assert response.status_code == 400

    def test_delete_missing_user(self, client, admin, auth_headers):
        response = client.delete('/api/admin/users/9999', headers=auth_headers(admin))
        assert response.status_code == 404

    def test_user_applications(self, client, admin, user, make_job, auth_headers):
        apply_to_job(user, make_job().id)
        apply_to_job(user, make_job().id)

        response = client.get(f'/api/admin/users/{user.id}/applications', headers=auth_headers(admin))

        assert len(response.get_json()['applications']) == 2


class TestAdminCredits:

    def test_add_credits(self, client, admin, user, auth_headers):
        response = client.post(f'/api/admin/users/{user.id}/credits', json={'amount': 5},
                               headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.get_json()['user']['banked_credits'] == 5
        log = AuditLog.query.filter_by(event_type='credit_adjustment').one()
        assert log.actor_id == admin.id

    def test_remove_credits_patch(self, client, admin, make_user, auth_headers):
        user = make_user(username='rich', banked_credits=10)

        response = client.patch(f'/api/admin/users/{user.id}/credits', json={'amount': -4},
                                headers=auth_headers(admin))

        assert response.get_json()['user']['banked_credits'] == 6

    def test_cannot_go_negative(self, client, admin, user, auth_headers):
        response = client.post(f'/api/admin/users/{user.id}/credits', json={'amount': -1},
                               headers=auth_headers(admin))

        assert response.status_code == 400
        db.session.refresh(user)
        assert user.banked_credits == 0

    def test_zero_amount(self, client, admin, user, auth_headers):
        response = client.post(f'/api/admin/users/{user.id}/credits', json={'amount': 0},
                               headers=auth_headers(admin))
        assert response.status_code == 400


class TestAdminJobs:

    def test_create_job(self, client, admin, auth_headers):
        response = client.post('/api/admin/jobs', json={
            'title': 'Data Engineer',
            'company': 'Initech',
            'requirements': ['Python', 'Airflow', ' '],
            'sourceUrl': 'https://example.com/jobs/1'
        }, headers=auth_headers(admin))

        assert response.status_code == 201
        job = response.get_json()['job']
        assert job['requirements'] == 'Python; Airflow'
        assert job['job_identifier'].startswith('JOB-')
        assert job['is_active'] is True

    def test_archive_and_restore(self, client, admin, job, auth_headers):
        headers = auth_headers(admin)

        archived = client.patch(f'/api/admin/jobs/{job.id}', json={'isActive': False}, headers=headers)
        assert archived.get_json()['job']['is_active'] is False
        assert archived.get_json()['job']['deactivated_at'] is not None

        restored = client.patch(f'/api/admin/jobs/{job.id}', json={'isActive': True}, headers=headers)
        assert restored.get_json()['job']['is_active'] is True
        assert restored.get_json()['job']['deactivated_at'] is None

    def test_update_fields(self, client, admin, job, auth_headers):
        response = client.patch(f'/api/admin/jobs/{job.id}', json={'salary': '$120k', 'requirements': 'Go;Rust'},
                                headers=auth_headers(admin))

        data = response.get_json()['job']
        assert data['salary'] == '$120k'
        assert data['requirement_list'] == ['Go', 'Rust']

    def test_delete_job(self, client, admin, job, auth_headers):
        response = client.delete(f'/api/admin/jobs/{job.id}', headers=auth_headers(admin))
        assert response.status_code == 200
        assert client.get(f'/api/jobs/{job.id}').status_code == 404

    def test_import_jobs(self, client, admin, auth_headers):
        response = client.post('/api/admin/jobs/import', json={'jobs': [
            {'title': 'A', 'company': 'X', 'source': 'feed', 'jobIdentifier': 'EXT-1'},
            {'title': 'B', 'company': 'Y', 'source': 'feed'},
        ]}, headers=auth_headers(admin))

        assert response.status_code == 201
        jobs = response.get_json()['jobs']
        assert len(jobs) == 2
        assert jobs[0]['job_identifier'] == 'EXT-1'

    def test_import_rejects_invalid_batch(self, client, admin, auth_headers):
        response = client.post('/api/admin/jobs/import', json={'jobs': [
            {'title': 'A', 'company': 'X'},
            {'title': '', 'company': 'Y'},
        ]}, headers=auth_headers(admin))

        assert response.status_code == 400


class TestAdminApplications:

    def test_filter_by_status(self, client, admin, user, make_job, auth_headers):
        from services.applications import change_status
        first = apply_to_job(user, make_job().id)
        apply_to_job(user, make_job().id)
        change_status(first, 'Rejected', admin)

        response = client.get('/api/admin/applications?status=Rejected', headers=auth_headers(admin))

        data = response.get_json()
        assert [a['id'] for a in data['applications']] == [first.id]
        assert data['applications'][0]['username'] == user.username

    def test_invalid_status_filter(self, client, admin, auth_headers):
        response = client.get('/api/admin/applications?status=Hired', headers=auth_headers(admin))
        assert response.status_code == 400


class TestDashboard:

    def test_stats(self, client, admin, user, job, auth_headers):
        apply_to_job(user, job.id)

        response = client.get('/api/admin/stats', headers=auth_headers(admin))

        data = response.get_json()
        assert data['users']['total'] == 2
        assert data['users']['admins'] == 1
        assert data['jobs']['active'] == 1
        assert data['applications']['by_status']['Applied'] == 1
        assert data['feedback']['average_rating'] is None

    def test_metrics(self, client, admin, auth_headers):
        response = client.get('/api/admin/metrics', headers=auth_headers(admin))

        data = response.get_json()
        assert 'total_requests' in data['performance']
        assert 'total_errors' in data['errors']

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'
