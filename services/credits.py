"""
Credit ledger

Daily credits are never stored: they are derived from how many applications
a user created inside the current local day. Banked credits live on the user
row and only change through referrals, admin adjustments, or spending once
the daily allowance is used up.
"""
from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo
from flask import current_app
import logging

from extensions import db
from models.application import Application, CREDIT_SOURCE_DAILY, CREDIT_SOURCE_BANKED
from models.audit_log import AuditLog
from utils.errors import NoCreditsAvailable, ValidationError
from utils.validators import validate_timezone

logger = logging.getLogger(__name__)

DEFAULT_DAILY_CREDIT_LIMIT = 10


def _daily_limit():
    return current_app.config.get('DAILY_CREDIT_LIMIT', DEFAULT_DAILY_CREDIT_LIMIT)


def local_day_bounds(now_utc, tz_name):
    """
    Return (start, end) of the local calendar day containing now_utc.

    Both bounds are naive UTC datetimes, matching how timestamps are stored.
    """
    zone = ZoneInfo(tz_name)
    local_now = now_utc.replace(tzinfo=timezone.utc).astimezone(zone)
    today = local_now.date()
    start_local = datetime.combine(today, time.min, tzinfo=zone)
    end_local = datetime.combine(today + timedelta(days=1), time.min, tzinfo=zone)
    return (
        start_local.astimezone(timezone.utc).replace(tzinfo=None),
        end_local.astimezone(timezone.utc).replace(tzinfo=None),
    )


def resolve_timezone(user_tz=None, requester_tz=None, default='UTC'):
    """First valid IANA name wins: the user's setting, then the requester's, then the default"""
    for candidate in (user_tz, requester_tz, default):
        if candidate and validate_timezone(candidate):
            return candidate
        if candidate:
            logger.debug(f"Ignoring unknown timezone {candidate!r}")
    return 'UTC'


def timezone_for(user, requester_tz=None):
    return resolve_timezone(
        user.timezone if user else None,
        requester_tz,
        current_app.config.get('DEFAULT_TIMEZONE', 'UTC'),
    )


def daily_credits_remaining(applied_at_values, now, tz_name, limit=DEFAULT_DAILY_CREDIT_LIMIT):
    """max(0, limit - applications whose applied_at falls in today's local window)"""
    start, end = local_day_bounds(now, tz_name)
    used = sum(1 for applied_at in applied_at_values if start <= applied_at < end)
    return max(0, limit - used)


def daily_credits_used(user_id, now, tz_name):
    start, end = local_day_bounds(now, tz_name)
    return Application.query.filter(
        Application.user_id == user_id,
        Application.applied_at >= start,
        Application.applied_at < end,
    ).count()


def credit_summary(user, now=None, tz_name=None):
    """Everything the client shows about a user's credits"""
    now = now or datetime.utcnow()
    tz_name = tz_name or timezone_for(user)
    limit = _daily_limit()
    used = daily_credits_used(user.id, now, tz_name)
    remaining = max(0, limit - used)
    _, next_reset = local_day_bounds(now, tz_name)

    return {
        'daily_limit': limit,
        'daily_used': used,
        'daily_remaining': remaining,
        'banked_credits': user.banked_credits,
        'total_credits': remaining + user.banked_credits,
        'next_reset_at': next_reset.isoformat(),
        'timezone': tz_name,
    }


def spend_credit(user, now, tz_name):
    """
    Consume one credit, daily allowance first.

    Returns the credit source used. Raises NoCreditsAvailable without touching
    the user when both pools are empty. The caller owns the transaction and
    should hold a row lock on the user.
    """
    used = daily_credits_used(user.id, now, tz_name)
    if _daily_limit() - used > 0:
        return CREDIT_SOURCE_DAILY

    if user.banked_credits > 0:
        user.banked_credits -= 1
        return CREDIT_SOURCE_BANKED

    raise NoCreditsAvailable()


def adjust_banked_credits(user, amount, admin=None, reason=None):
    """Add (or with a negative amount remove) banked credits on behalf of an admin"""
    if not amount:
        raise ValidationError('Amount must be non-zero')

    previous = user.banked_credits
    new_balance = previous + amount
    if new_balance < 0:
        raise ValidationError(
            'Banked credits cannot go below zero',
            details={'banked_credits': previous, 'amount': amount},
        )

    user.banked_credits = new_balance
    db.session.commit()

    logger.info(f"Banked credits for user {user.id}: {previous} -> {new_balance}")
    AuditLog.log_event(
        user.id, 'credit_adjustment', 'success',
        details={'amount': amount, 'previous': previous, 'new_balance': new_balance, 'reason': reason},
        actor_id=admin.id if admin else None,
    )
    return user
