"""
Notification metadata

Each notification type carries a fixed metadata shape. build_metadata()
validates the payload for its type before it is stored.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from models.notification import (
    MESSAGE_RECEIVED,
    STATUS_CHANGE,
    NEXT_STEPS_ADDED,
    NEXT_STEPS_UPDATED,
    INTERVIEW_SCHEDULED,
    APPLICATION_ACCEPTED,
    APPLICATION_REJECTED,
    APPLICATION_SUBMITTED,
    APPLICATION_CONFIRMATION,
)


class ApplicationRef(BaseModel):
    model_config = ConfigDict(extra='forbid')

    application_id: int
    job_id: int
    company: str
    job_title: str


class MessageReceivedMeta(ApplicationRef):
    message_id: int
    sender_username: str


class StatusChangeMeta(ApplicationRef):
    new_status: str
    previous_status: Optional[str] = None


class NextStepsMeta(ApplicationRef):
    next_step: str
    next_step_due_date: Optional[str] = None


class SubmittedMeta(ApplicationRef):
    credit_source: str


METADATA_TYPES = {
    MESSAGE_RECEIVED: MessageReceivedMeta,
    STATUS_CHANGE: StatusChangeMeta,
    INTERVIEW_SCHEDULED: StatusChangeMeta,
    APPLICATION_ACCEPTED: StatusChangeMeta,
    APPLICATION_REJECTED: StatusChangeMeta,
    NEXT_STEPS_ADDED: NextStepsMeta,
    NEXT_STEPS_UPDATED: NextStepsMeta,
    APPLICATION_SUBMITTED: SubmittedMeta,
    APPLICATION_CONFIRMATION: SubmittedMeta,
}


def build_metadata(notification_type, **fields):
    """Validate metadata for a notification type and return it as a JSON-ready dict"""
    try:
        schema = METADATA_TYPES[notification_type]
    except KeyError:
        raise ValueError(f'Unknown notification type: {notification_type}')
    return schema(**fields).model_dump()


def application_ref(application):
    job = application.job
    return {
        'application_id': application.id,
        'job_id': application.job_id,
        'company': job.company if job else '',
        'job_title': job.title if job else '',
    }
