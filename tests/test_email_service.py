"""
Test transactional email content
"""
import html
import re
from urllib.parse import urlparse, parse_qs
import pytest
from services.applications import apply_to_job, change_status
from services.email_service import EmailService


@pytest.fixture
def outbox(monkeypatch):
    """Capture emails instead of talking to SMTP"""
    sent = []

    def fake_send(self, to_email, subject, html_content, email_type=None, related_id=None):
        sent.append({'to': to_email, 'subject': subject, 'html': html_content, 'type': email_type})
        return True

    monkeypatch.setattr(EmailService, 'send_email', fake_send)
    return sent


def reset_link(message):
    href = re.search(r'href="([^"]+)"', message['html']).group(1)
    return parse_qs(urlparse(html.unescape(href)).query)


class TestPasswordResetEmail:

    def test_plus_address_survives_the_link(self, client, make_user, outbox):
        make_user(username='jane', email='jane+jobs@example.com')

        client.post('/api/forgot-password', json={'email': 'jane+jobs@example.com'})

        assert len(outbox) == 1
        params = reset_link(outbox[0])
        assert params['email'] == ['jane+jobs@example.com']

        response = client.post('/api/reset-password', json={
            'email': params['email'][0],
            'token': params['token'][0],
            'password': 'newsecret1',
            'confirmPassword': 'newsecret1'
        })
        assert response.status_code == 200

    def test_no_email_for_unknown_address(self, client, outbox):
        client.post('/api/forgot-password', json={'email': 'nobody@example.com'})
        assert outbox == []


class TestEscaping:

    def test_feed_values_are_escaped(self, user, make_job, outbox):
        job = make_job(title='<script>alert(1)</script> Engineer', company='Smith & Sons')

        apply_to_job(user, job.id)

        body = outbox[-1]['html']
        assert '<script>' not in body
        assert '&lt;script&gt;alert(1)&lt;/script&gt; Engineer' in body
        assert 'Smith &amp; Sons' in body

    def test_status_email_escaped(self, user, admin, make_job, outbox):
        application = apply_to_job(user, make_job(title='<b>Lead</b>').id)

        change_status(application, 'Accepted', admin)

        body = outbox[-1]['html']
        assert outbox[-1]['type'] == 'status_change'
        assert '<b>Lead</b>' not in body
        assert '&lt;b&gt;Lead&lt;/b&gt;' in body
