"""
Test profile endpoints
"""
import pytest
from extensions import db
from models.profile import Profile


def profile_url(user):
    return f'/api/profiles/{user.id}'


PROFILE = {
    'name': 'Jamie Rivera',
    'title': 'Backend Developer',
    'city': 'Austin',
    'skills': ['Python', 'PostgreSQL'],
    'education': [{'school': 'UT Austin', 'degree': 'BSc', 'majorCourses': ['Algorithms']}],
    'experience': [{'company': 'Initech', 'title': 'Developer', 'current': True}],
    'languages': [{'name': 'Spanish', 'proficiency': 'Native'}],
    'workAuthorization': 'US Citizen',
    'willingToRelocate': True,
}


class TestSaveProfile:

    def test_first_save_creates(self, client, user, auth_headers):
        response = client.post(profile_url(user), json=PROFILE, headers=auth_headers(user))

        assert response.status_code == 201
        profile = response.get_json()['profile']
        assert profile['user_id'] == user.id
        assert profile['skills'] == ['Python', 'PostgreSQL']
        assert profile['education'][0]['major_courses'] == ['Algorithms']
        assert profile['experience'][0]['current'] is True
        assert profile['certifications'] == []
        assert profile['willing_to_relocate'] is True

    def test_second_save_updates_sent_fields(self, client, user, auth_headers):
        headers = auth_headers(user)
        client.post(profile_url(user), json=PROFILE, headers=headers)

        response = client.post(profile_url(user), json={'title': 'Staff Engineer', 'bio': None},
                               headers=headers)

        assert response.status_code == 200
        profile = response.get_json()['profile']
        assert profile['title'] == 'Staff Engineer'
        assert profile['name'] == 'Jamie Rivera'
        assert profile['skills'] == ['Python', 'PostgreSQL']
        assert Profile.query.filter_by(user_id=user.id).count() == 1

    @pytest.mark.parametrize('payload', [
        {'languages': [{'name': 'French', 'proficiency': 'Fluent'}]},
        {'experience': [{'company': 'Initech'}]},
        {'availability': 'Someday'},
        {'skills': 'Python'},
    ])
    def test_invalid_payload(self, client, user, auth_headers, payload):
        response = client.post(profile_url(user), json=payload, headers=auth_headers(user))

        assert response.status_code == 400
        assert Profile.query.count() == 0

    def test_cannot_edit_someone_else(self, client, user, make_user, auth_headers):
        other = make_user(username='other')
        response = client.post(profile_url(other), json=PROFILE, headers=auth_headers(user))
        assert response.status_code == 403

    def test_admin_cannot_edit_either(self, client, user, admin, auth_headers):
        response = client.post(profile_url(user), json=PROFILE, headers=auth_headers(admin))
        assert response.status_code == 403


class TestGetProfile:

    @pytest.fixture
    def profile(self, user):
        profile = Profile(user_id=user.id, name='Jamie Rivera', skills=['Go'])
        db.session.add(profile)
        db.session.commit()
        return profile

    def test_owner_reads(self, client, user, profile, auth_headers):
        response = client.get(profile_url(user), headers=auth_headers(user))

        assert response.status_code == 200
        assert response.get_json()['profile']['skills'] == ['Go']

    def test_admin_reads(self, client, user, admin, profile, auth_headers):
        response = client.get(profile_url(user), headers=auth_headers(admin))
        assert response.status_code == 200

    def test_stranger_forbidden(self, client, user, make_user, profile, auth_headers):
        stranger = make_user(username='stranger')
        response = client.get(profile_url(user), headers=auth_headers(stranger))
        assert response.status_code == 403

    def test_missing_profile(self, client, user, auth_headers):
        response = client.get(profile_url(user), headers=auth_headers(user))
        assert response.status_code == 404

    def test_requires_session(self, client, user):
        assert client.get(profile_url(user)).status_code == 401
