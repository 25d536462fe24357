from typing import Optional

from pydantic import field_validator, model_validator

from schemas import RequestSchema
from utils.validators import (
    validate_email,
    validate_password,
    validate_username,
    validate_timezone,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
)


def _email(value):
    value = value.strip().lower()
    if not validate_email(value):
        raise ValueError('Invalid email format')
    return value


def _timezone(value):
    if value and not validate_timezone(value):
        raise ValueError('Unknown timezone')
    return value or None


class RegisterRequest(RequestSchema):
    username: str
    email: str
    password: str
    confirm_password: str
    referred_by: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator('username')
    @classmethod
    def check_username(cls, value):
        if not validate_username(value):
            raise ValueError(
                f'Username must be at least {MIN_USERNAME_LENGTH} characters '
                '(letters, digits, dot, dash, underscore)'
            )
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

    @field_validator('referred_by')
    @classmethod
    def normalize_referral(cls, value):
        return value.strip().upper() if value else None

    @field_validator('timezone')
    @classmethod
    def check_timezone(cls, value):
        return _timezone(value)

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class LoginRequest(RequestSchema):
    # Accepts a username or an email address
    username: str
    password: str


class UpdateAccountRequest(RequestSchema):
    email: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        return _email(value) if value is not None else None

    @field_validator('timezone')
    @classmethod
    def check_timezone(cls, value):
        return _timezone(value)


class ForgotPasswordRequest(RequestSchema):
    email: str

    @field_validator('email')
    @classmethod
    def normalize(cls, value):
        return value.strip().lower()


class ResetPasswordRequest(RequestSchema):
    email: str
    token: str
    password: str
    confirm_password: str

    @field_validator('email')
    @classmethod
    def normalize(cls, value):
        return value.strip().lower()

    @field_validator('password')
    @classmethod
    def check_password(cls, value):
        if not validate_password(value):
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return value

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self
