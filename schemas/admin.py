from typing import Optional

from pydantic import Field, field_validator

from schemas import RequestSchema
from schemas.auth import _email, _timezone
from utils.validators import validate_password, validate_username, MIN_PASSWORD_LENGTH


class AdminCreateUserRequest(RequestSchema):
    username: str
    email: str
    password: str
    is_admin: bool = False
    banked_credits: int = Field(default=0, ge=0)
    timezone: Optional[str] = None

    @field_validator('username')
    @classmethod
    def check_username(cls, value):
        if not validate_username(value):
            raise ValueError('Invalid username')
        return value

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        return _email(value)

    @field_validator('password')
    @classmethod
    def check_password(cls, value):
        if not validate_password(value):
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return value

    @field_validator('timezone')
    @classmethod
    def check_timezone(cls, value):
        return _timezone(value)


class AdminUpdateUserRequest(RequestSchema):
    email: Optional[str] = None
    is_admin: Optional[bool] = None
    is_active: Optional[bool] = None
    timezone: Optional[str] = None

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        return _email(value) if value is not None else None

    @field_validator('timezone')
    @classmethod
    def check_timezone(cls, value):
        return _timezone(value)


class CreditAdjustmentRequest(RequestSchema):
    # Positive adds banked credits, negative removes them
    amount: int
    reason: Optional[str] = Field(default=None, max_length=255)

    @field_validator('amount')
    @classmethod
    def non_zero(cls, value):
        if value == 0:
            raise ValueError('Amount must be non-zero')
        return value
