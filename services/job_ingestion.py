"""
Job ingestion

Boundary for the external scraping/normalization feed. Records arrive already
normalized; this module validates them and stores them as active jobs. No
deduplication happens here: admins resolve duplicates by job identifier.
"""
from datetime import datetime
import json
import logging

import click
from flask.cli import with_appcontext

from extensions import db
from models.job import Job, generate_job_identifier
from schemas.jobs import JobRecord

logger = logging.getLogger(__name__)


def build_job(record, now=None):
    """Job row from a validated JobRecord"""
    now = now or datetime.utcnow()
    values = record.model_dump()
    values['job_identifier'] = values.get('job_identifier') or generate_job_identifier()
    return Job(**values, is_active=True, last_checked_at=now)


def ingest_job_records(records, now=None):
    """
    Validate and store a batch of normalized job records in one commit.

    records may be JobRecord instances or plain dicts. A pydantic
    ValidationError for any record rejects the whole batch.
    """
    now = now or datetime.utcnow()
    validated = [
        record if isinstance(record, JobRecord) else JobRecord.model_validate(record)
        for record in records
    ]

    jobs = [build_job(record, now) for record in validated]
    db.session.add_all(jobs)
    db.session.commit()

    logger.info(f"Ingested {len(jobs)} job records")
    return jobs


@click.command('ingest-jobs')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def ingest_jobs_command(path):
    """Load normalized job records from a JSON file (a list, or {"jobs": [...]})."""
    with open(path, encoding='utf-8') as fh:
        payload = json.load(fh)

    records = payload.get('jobs', []) if isinstance(payload, dict) else payload
    jobs = ingest_job_records(records)
    click.echo(f"Imported {len(jobs)} jobs from {path}")
