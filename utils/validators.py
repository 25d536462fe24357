import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')
USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')

MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 3


def validate_email(email):
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_password(password):
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def validate_username(username):
    return (
        bool(username)
        and len(username) >= MIN_USERNAME_LENGTH
        and USERNAME_PATTERN.match(username) is not None
    )


def validate_timezone(name):
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # directory names such as "America" and over-long names raise OSError
        return False
    return True
