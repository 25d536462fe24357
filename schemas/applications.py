from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import Field, field_validator, model_validator

from schemas import RequestSchema

StatusValue = Literal['Applied', 'Interviewing', 'Accepted', 'Rejected', 'Withdrawn']


class ApplyRequest(RequestSchema):
    job_id: int
    profile_id: Optional[int] = None
    cover_letter: Optional[str] = None
    application_data: Dict[str, Any] = Field(default_factory=dict)
    # Sent by the web client; the server always starts at Applied/now
    status: Optional[str] = None
    applied_at: Optional[str] = None


class StatusUpdateRequest(RequestSchema):
    status: StatusValue


class AdminApplicationUpdateRequest(RequestSchema):
    status: Optional[StatusValue] = None
    notes: Optional[str] = None
    next_step: Optional[str] = Field(default=None, max_length=500)
    next_step_due_date: Optional[datetime] = None

    @field_validator('next_step_due_date')
    @classmethod
    def to_naive_utc(cls, value):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @model_validator(mode='after')
    def has_changes(self):
        if not self.model_fields_set:
            raise ValueError('Nothing to update')
        return self


class MessageRequest(RequestSchema):
    content: str = Field(min_length=1, max_length=5000)
