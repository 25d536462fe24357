"""
Test notification endpoints and metadata validation
"""
import pytest
from pydantic import ValidationError
from models.notification import Notification
from routes.notifications import create_notification
from schemas.notifications import build_metadata

APPLICATION_META = {'application_id': 1, 'job_id': 2, 'company': 'Acme Corp', 'job_title': 'Engineer'}


def notify(user, title='Status update'):
    return create_notification(
        user_id=user.id,
        notification_type='status_change',
        title=title,
        message='Your application moved forward',
        metadata={**APPLICATION_META, 'new_status': 'Interviewing'}
    )


class TestMetadata:
    """Per-type metadata shapes"""

    def test_status_change(self):
        meta = build_metadata('status_change', **APPLICATION_META, new_status='Accepted')
        assert meta['new_status'] == 'Accepted'
        assert meta['previous_status'] is None

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            build_metadata('message_received', **APPLICATION_META)

    def test_unexpected_field(self):
        with pytest.raises(ValidationError):
            build_metadata('status_change', **APPLICATION_META, new_status='Accepted', color='red')

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            build_metadata('birthday', **APPLICATION_META)

    def test_invalid_metadata_is_not_stored(self, user):
        result = create_notification(user.id, 'status_change', 'Broken', 'No metadata', metadata={})

        assert result is None
        assert Notification.query.filter_by(user_id=user.id).count() == 0


class TestNotificationEndpoints:

    def test_list(self, client, user, auth_headers):
        notify(user, 'first')
        notify(user, 'second')

        response = client.get('/api/notifications', headers=auth_headers(user))

        assert response.status_code == 200
        data = response.get_json()
        assert [n['title'] for n in data['notifications']] == ['second', 'first']
        assert data['unread_count'] == 2
        assert data['notifications'][0]['metadata']['company'] == 'Acme Corp'

    def test_only_own_notifications(self, client, user, make_user, auth_headers):
        other = make_user(username='other')
        notify(other)

        response = client.get('/api/notifications', headers=auth_headers(user))
        assert response.get_json()['notifications'] == []

    def test_unread_only_and_count(self, client, user, auth_headers):
        first = notify(user, 'first')
        notify(user, 'second')
        headers = auth_headers(user)
        client.post(f'/api/notifications/{first.id}/mark-read', headers=headers)

        unread = client.get('/api/notifications?unread_only=true', headers=headers).get_json()
        count = client.get('/api/notifications/unread-count', headers=headers).get_json()

        assert [n['title'] for n in unread['notifications']] == ['second']
        assert count['unread_count'] == 1

    def test_mark_read_put(self, client, user, auth_headers):
        notification = notify(user)

        response = client.put(f'/api/notifications/{notification.id}/mark-read', headers=auth_headers(user))

        assert response.status_code == 200
        assert response.get_json()['notification']['is_read'] is True
        assert response.get_json()['notification']['read_at'] is not None

    def test_mark_other_users_notification(self, client, user, make_user, auth_headers):
        other = make_user(username='other')
        notification = notify(other)

        response = client.post(f'/api/notifications/{notification.id}/mark-read', headers=auth_headers(user))
        assert response.status_code == 404

    def test_mark_all_read(self, client, user, auth_headers):
        for _ in range(3):
            notify(user)
        headers = auth_headers(user)

        response = client.post('/api/notifications/mark-all-read', headers=headers)

        assert response.get_json()['updated'] == 3
        assert client.get('/api/notifications/unread-count', headers=headers).get_json()['unread_count'] == 0

    def test_delete(self, client, user, auth_headers):
        notification = notify(user)

        response = client.delete(f'/api/notifications/{notification.id}', headers=auth_headers(user))

        assert response.status_code == 200
        assert Notification.query.filter_by(user_id=user.id).count() == 0

    def test_clear_all(self, client, user, make_user, auth_headers):
        other = make_user(username='other')
        notify(user)
        notify(user)
        notify(other)

        response = client.delete('/api/notifications/clear-all', headers=auth_headers(user))

        assert response.get_json()['deleted'] == 2
        assert Notification.query.filter_by(user_id=user.id).count() == 0
        assert Notification.query.filter_by(user_id=other.id).count() == 1

    def test_pagination(self, client, user, auth_headers):
        for i in range(5):
            notify(user, f'n{i}')

        response = client.get('/api/notifications?per_page=2&page=2', headers=auth_headers(user))

        data = response.get_json()
        assert [n['title'] for n in data['notifications']] == ['n2', 'n1']
        assert data['pagination']['total'] == 5
        assert data['pagination']['total_pages'] == 3
