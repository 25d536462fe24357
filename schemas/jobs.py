from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from schemas import RequestSchema


def join_requirements(value):
    """Requirements arrive as a list or a semicolon string; stored semicolon-delimited"""
    if value is None:
        return ''
    if isinstance(value, str):
        items = value.split(';')
    else:
        items = value
    return '; '.join(item.strip() for item in items if item and item.strip())


class JobRecord(RequestSchema):
    """A normalized posting, as produced by the ingestion feed or entered by an admin"""
    job_identifier: Optional[str] = Field(default=None, max_length=100)
    title: str = Field(min_length=1, max_length=200)
    company: str = Field(min_length=1, max_length=200)
    location: str = ''
    salary: str = 'Not specified'
    type: str = 'Full-time'
    description: str = ''
    requirements: Union[str, List[str], None] = ''
    source: str = 'manual'
    source_url: str = ''

    @field_validator('requirements')
    @classmethod
    def normalize_requirements(cls, value):
        return join_requirements(value)


class JobImportRequest(RequestSchema):
    jobs: List[JobRecord] = Field(min_length=1)


class JobUpdateRequest(RequestSchema):
    job_identifier: Optional[str] = Field(default=None, max_length=100)
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    company: Optional[str] = Field(default=None, min_length=1, max_length=200)
    location: Optional[str] = None
    salary: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    requirements: Union[str, List[str], None] = None
    source: Optional[str] = None
    source_url: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('requirements')
    @classmethod
    def normalize_requirements(cls, value):
        return join_requirements(value) if value is not None else None


class ReportJobRequest(RequestSchema):
    job_id: int
    reason: Literal['ghost_listing', 'duplicate', 'fraudulent', 'inappropriate', 'misleading', 'other']
    comments: str = Field(min_length=5, max_length=500)


class ReportReviewRequest(RequestSchema):
    status: Literal['pending', 'reviewed', 'resolved', 'dismissed']
    admin_notes: Optional[str] = None


class SaveJobRequest(RequestSchema):
    job_id: int


class FeedbackRequest(RequestSchema):
    rating: int = Field(ge=1, le=5)
    category: Literal['bug', 'feature', 'general', 'ui', 'other'] = 'general'
    subject: Optional[str] = Field(default=None, max_length=200)
    comment: Optional[str] = Field(default=None, max_length=2000)
