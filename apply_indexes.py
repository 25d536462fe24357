"""
Apply the credit-ledger and application uniqueness indexes

Safe to run repeatedly. Tables created by db.create_all() already have them;
this is for databases created before the indexes existed.
"""
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app import create_app
from extensions import db

INDEXES = [
    (
        'ix_applications_user_applied_at',
        "CREATE INDEX IF NOT EXISTS ix_applications_user_applied_at "
        "ON applications (user_id, applied_at)"
    ),
    (
        'uq_applications_active_user_job',
        "CREATE UNIQUE INDEX IF NOT EXISTS uq_applications_active_user_job "
        "ON applications (user_id, job_id) WHERE status <> 'Withdrawn'"
    ),
    (
        'ix_jobs_is_active',
        "CREATE INDEX IF NOT EXISTS ix_jobs_is_active ON jobs (is_active)"
    ),
    (
        'ix_notifications_user_id',
        "CREATE INDEX IF NOT EXISTS ix_notifications_user_id ON notifications (user_id)"
    ),
]


def apply_indexes():
    failed = 0
    for name, statement in INDEXES:
        try:
            db.session.execute(text(statement))
            db.session.commit()
            print(f"✓ {name}")
        except SQLAlchemyError as e:
            # Usually duplicate active applications blocking the unique index
            db.session.rollback()
            failed += 1
            print(f"✗ {name}: {str(e)[:120]}")
    return failed


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        print("Applying indexes...")
        failed = apply_indexes()
        print("Done." if not failed else f"Done with {failed} failure(s).")
