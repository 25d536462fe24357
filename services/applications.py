"""
Application lifecycle

Applied -> Interviewing -> Accepted | Rejected, and Withdrawn from anywhere.
Transitions are not validated against the previous status: admins may move
an application to any status, owners may only withdraw. Every transition
appends one history entry and sends one notification to the owner.
"""
from datetime import datetime
from sqlalchemy.exc import IntegrityError
import logging

from extensions import db
from models.application import (
    Application,
    APPLIED,
    ACCEPTED,
    REJECTED,
    WITHDRAWN,
    APPLICATION_STATUSES,
)
from models.job import Job
from models.notification import (
    STATUS_CHANGE,
    APPLICATION_ACCEPTED,
    APPLICATION_REJECTED,
    APPLICATION_SUBMITTED,
    NEXT_STEPS_ADDED,
    NEXT_STEPS_UPDATED,
)
from models.profile import Profile
from models.user import User
from routes.notifications import create_notification
from schemas.notifications import application_ref
from services.credits import spend_credit
from services.email_service import EmailService
from utils.errors import APIError, Conflict, DuplicateApplication, Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)

STATUS_NOTIFICATION_TYPES = {
    ACCEPTED: APPLICATION_ACCEPTED,
    REJECTED: APPLICATION_REJECTED,
}


def has_active_application(user_id, job_id):
    """True if the user has a non-withdrawn application for the job"""
    return Application.query.filter(
        Application.user_id == user_id,
        Application.job_id == job_id,
        Application.status != WITHDRAWN,
    ).first() is not None


def active_application_job_ids(user_id, job_ids):
    """Subset of job_ids the user currently has a live application for"""
    if not job_ids:
        return set()
    rows = db.session.query(Application.job_id).filter(
        Application.user_id == user_id,
        Application.job_id.in_(job_ids),
        Application.status != WITHDRAWN,
    ).all()
    return {row.job_id for row in rows}


def _resolve_profile_id(user, profile_id):
    if profile_id is None:
        return user.profile.id if user.profile else None
    profile = db.session.get(Profile, profile_id)
    if not profile or profile.user_id != user.id:
        raise ValidationError('Profile does not belong to this user')
    return profile.id


def apply_to_job(user, job_id, profile_id=None, application_data=None, cover_letter=None, now=None, tz_name='UTC'):
    """
    Create an Applied application and spend one credit, in one transaction.

    The user row is locked while credits are counted so concurrent applies
    cannot both spend the last credit. Returns the new application.
    """
    now = now or datetime.utcnow()

    job = db.session.get(Job, job_id)
    if not job:
        raise NotFound('Job not found')
    if not job.is_active:
        raise Conflict('This job is no longer accepting applications')

    try:
        resolved_profile_id = _resolve_profile_id(user, profile_id)

        locked_user = User.query.filter_by(id=user.id).with_for_update().populate_existing().one()

        if has_active_application(locked_user.id, job.id):
            raise DuplicateApplication()

        credit_source = spend_credit(locked_user, now, tz_name)

        application = Application(
            job_id=job.id,
            user_id=locked_user.id,
            profile_id=resolved_profile_id,
            applied_at=now,
            credit_source=credit_source,
            cover_letter=cover_letter,
            application_data=application_data or {},
        )
        application.record_status(APPLIED, now)
        db.session.add(application)
        db.session.commit()

    except APIError:
        db.session.rollback()
        raise
    except IntegrityError:
        # Lost a race against a concurrent apply for the same job
        db.session.rollback()
        raise DuplicateApplication()

    logger.info(f"User {user.id} applied to job {job.id} using a {credit_source} credit")

    create_notification(
        user_id=application.user_id,
        notification_type=APPLICATION_SUBMITTED,
        title='Application submitted',
        message=f'Your application for {job.title} at {job.company} was submitted.',
        metadata={**application_ref(application), 'credit_source': credit_source},
    )
    EmailService().send_application_confirmation(application.user, application)

    return application


def change_status(application, new_status, actor, now=None):
    """Move an application to new_status on behalf of actor (owner or admin)"""
    if new_status not in APPLICATION_STATUSES:
        raise ValidationError(f'Invalid status: {new_status}')

    if not actor.is_admin:
        if application.user_id != actor.id:
            raise NotFound('Application not found')
        if new_status != WITHDRAWN:
            raise Forbidden('Only administrators can set this status')

    previous_status = application.status
    application.record_status(new_status, now)
    db.session.commit()

    logger.info(f"Application {application.id}: {previous_status} -> {new_status} by user {actor.id}")

    job = application.job
    create_notification(
        user_id=application.user_id,
        notification_type=STATUS_NOTIFICATION_TYPES.get(new_status, STATUS_CHANGE),
        title='Application status updated',
        message=f'Your application for {job.title} at {job.company} is now {new_status}.',
        metadata={
            **application_ref(application),
            'new_status': new_status,
            'previous_status': previous_status,
        },
    )
    if actor.is_admin:
        EmailService().send_status_change_email(application.user, application, previous_status, new_status)

    return application


def admin_update_application(application, changes, admin):
    """
    Apply an admin edit: notes, next step, due date, and optionally status.

    changes holds only the fields the admin sent. A status change goes
    through change_status(); a next-step change notifies the owner.
    """
    previous_next_step = application.next_step
    next_step_changed = False

    if 'notes' in changes:
        application.notes = changes['notes']
    if 'next_step' in changes and changes['next_step'] != previous_next_step:
        application.next_step = changes['next_step']
        next_step_changed = bool(changes['next_step'])
    if 'next_step_due_date' in changes and changes['next_step_due_date'] != application.next_step_due_date:
        application.next_step_due_date = changes['next_step_due_date']
        next_step_changed = next_step_changed or bool(application.next_step)

    new_status = changes.get('status')
    if new_status and new_status != application.status:
        # change_status commits the pending field edits with the transition
        change_status(application, new_status, admin)
    else:
        db.session.commit()

    if next_step_changed:
        due = application.next_step_due_date
        create_notification(
            user_id=application.user_id,
            notification_type=NEXT_STEPS_UPDATED if previous_next_step else NEXT_STEPS_ADDED,
            title='Next steps updated' if previous_next_step else 'Next steps added',
            message=f'Next step for {application.job.title}: {application.next_step}',
            metadata={
                **application_ref(application),
                'next_step': application.next_step,
                'next_step_due_date': due.isoformat() if due else None,
            },
        )

    return application
