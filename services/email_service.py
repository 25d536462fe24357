import html
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from urllib.parse import urlencode
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from models.email_log import EmailLog
from extensions import db
import logging

logger = logging.getLogger(__name__)

LAYOUT = '''
<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9; }}
        .header {{ background: #1F3A5F; color: white; padding: 24px; text-align: center; border-radius: 10px 10px 0 0; }}
        .content {{ background: white; padding: 30px; border-radius: 0 0 10px 10px; }}
        .button {{ display: inline-block; padding: 10px 24px; background: #1F3A5F; color: white; text-decoration: none; border-radius: 6px; }}
        .footer {{ text-align: center; margin-top: 20px; color: #666; font-size: 12px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1 style="margin: 0; font-size: 26px;">{app_name}</h1>
        </div>
        <div class="content">
            {body}
        </div>
        <div class="footer">
            <p>This is an automated message from {app_name}.</p>
        </div>
    </div>
</body>
</html>
'''


class EmailService:
    """Transactional email to job seekers (skipped when SMTP is not configured)"""

    def __init__(self, smtp_server=None, smtp_port=None, smtp_username=None, smtp_password=None, from_email=None, from_name=None):
        config = current_app.config
        self.smtp_server = smtp_server or config.get('SMTP_SERVER')
        self.smtp_port = smtp_port or config.get('SMTP_PORT')
        self.smtp_username = smtp_username or config.get('SMTP_USERNAME')
        self.smtp_password = smtp_password or config.get('SMTP_PASSWORD')
        self.from_email = from_email or config.get('FROM_EMAIL')
        self.from_name = from_name or config.get('FROM_NAME')
        self.app_name = config.get('APP_NAME', 'Pipeline')
        self.frontend_url = config.get('FRONTEND_URL', '')

    @property
    def enabled(self):
        return bool(self.smtp_server and self.smtp_username)

    def send_email(self, to_email, subject, html_content, email_type=None, related_id=None):
        """Send email and log the attempt"""
        if not self.enabled:
            logger.debug(f"SMTP not configured, skipping {email_type} email to {to_email}")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{self.from_name} <{self.from_email}>"
            msg['To'] = to_email
            msg.attach(MIMEText(html_content, 'html'))

            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            self._log_email(to_email, subject, email_type, related_id, 'sent')
            logger.info(f"Email sent successfully to {to_email}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            self._log_email(to_email, subject, email_type, related_id, 'failed', str(e))
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

    def _log_email(self, to_email, subject, email_type, related_id, status, error_message=None):
        """Log email sending attempt"""
        try:
            email_log = EmailLog(
                to_email=to_email,
                subject=subject,
                email_type=email_type,
                related_id=related_id,
                status=status,
                error_message=error_message
            )
            db.session.add(email_log)
            db.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to log email: {str(e)}")
            db.session.rollback()

    def _render(self, body):
        return LAYOUT.format(app_name=self.app_name, body=body)

    def send_application_confirmation(self, user, application):
        job = application.job
        body = f'''
            <p>Hi {html.escape(user.username)},</p>
            <p>Your application for <strong>{html.escape(job.title)}</strong> at {html.escape(job.company)} was submitted.</p>
            <p>You can follow its status and message the hiring team from your dashboard.</p>
            <p><a class="button" href="{self.frontend_url}/applications/{application.id}">View application</a></p>
        '''
        return self.send_email(
            to_email=user.email,
            subject=f'Application submitted: {job.title} at {job.company}',
            html_content=self._render(body),
            email_type='application_confirmation',
            related_id=application.id,
        )

    def send_status_change_email(self, user, application, old_status, new_status):
        """Send email when an application's status changes"""
        job = application.job
        title, company = html.escape(job.title), html.escape(job.company)
        status_messages = {
            'Interviewing': (
                f'Interview stage: {job.title}',
                f'<p>Good news! Your application for <strong>{title}</strong> at {company} '
                'has moved to the interview stage. Watch your messages for next steps.</p>'
            ),
            'Accepted': (
                f'Congratulations! Offer for {job.title}',
                f'<p><strong>Congratulations!</strong> Your application for <strong>{title}</strong> '
                f'at {company} has been accepted.</p>'
            ),
            'Rejected': (
                f'Update on your application for {job.title}',
                f'<p>Thank you for your interest in <strong>{title}</strong> at {company}. '
                'After careful consideration the company has decided not to move forward.</p>'
            ),
        }

        if new_status not in status_messages:
            return False

        subject, message = status_messages[new_status]
        body = f'<p>Hi {html.escape(user.username)},</p>{message}<p>Previous status: {html.escape(old_status or "")}</p>'
        return self.send_email(
            to_email=user.email,
            subject=subject,
            html_content=self._render(body),
            email_type='status_change',
            related_id=application.id,
        )

    def send_password_reset(self, user, token):
        query = urlencode({'token': token, 'email': user.email})
        link = html.escape(f"{self.frontend_url}/reset-password?{query}")
        body = f'''
            <p>Hi {html.escape(user.username)},</p>
            <p>We received a request to reset your password. The link below is valid for one hour.</p>
            <p><a class="button" href="{link}">Reset password</a></p>
            <p>If you didn't ask for this, you can ignore this email.</p>
        '''
        return self.send_email(
            to_email=user.email,
            subject=f'Reset your {self.app_name} password',
            html_content=self._render(body),
            email_type='password_reset',
            related_id=user.id,
        )
