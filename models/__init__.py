from models.user import User, UserSession
from models.job import Job
from models.profile import Profile
from models.application import Application
from models.message import Message
from models.notification import Notification
from models.reported_job import ReportedJob
from models.feedback import Feedback
from models.saved_job import SavedJob
from models.audit_log import AuditLog
from models.email_log import EmailLog

__all__ = [
    'User', 'UserSession', 'Job', 'Profile', 'Application', 'Message',
    'Notification', 'ReportedJob', 'Feedback', 'SavedJob', 'AuditLog', 'EmailLog',
]
