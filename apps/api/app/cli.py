"""CLI tools for commission administration."""

import click

from app.core.config import get_settings
from app.db.base import Base
from app.db.enums import CommissionStatus
from app.db.session import build_session_factory, create_engine_with_settings
from app.services import commission_service, settings_service

SAMPLE_COMMISSIONS = [
    {
        "client_name": "Alice Chen",
        "email": "alice@example.com",
        "description": "Full-body character portrait, fantasy armor, sunset background.",
    },
    {
        "client_name": "Marcus Webb",
        "email": "marcus@example.com",
        "description": "Pet portrait of two cats, watercolor style.",
    },
    {
        "client_name": "Priya Patel",
        "email": "priya@example.com",
        "description": "Book cover concept: lighthouse in a storm.",
    },
]


def _session():
    settings = get_settings()
    engine = create_engine_with_settings(settings)
    return engine, build_session_factory(engine)()


@click.group()
def cli():
    """Commission API CLI tools."""
    pass


@cli.command("init-db")
@click.option("--queue-limit", type=int, default=None, help="Initial queue limit")
def init_db(queue_limit: int | None):
    """
    Create tables (if missing) and the singleton settings row.

    Production databases should use `alembic upgrade head`; this is for
    local development and tests.
    """
    engine, db = _session()
    try:
        Base.metadata.create_all(engine)
        row = settings_service.init_default_settings(db, queue_limit=queue_limit)
        db.commit()
        click.echo(f"✓ Database ready (queue_limit={row.queue_limit})")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--count", type=int, default=len(SAMPLE_COMMISSIONS), help="Number to create")
def seed(count: int):
    """Insert sample pending commissions (bypasses the intake gate)."""
    _, db = _session()
    try:
        for i in range(count):
            sample = SAMPLE_COMMISSIONS[i % len(SAMPLE_COMMISSIONS)]
            commission_service.create_commission(db, **sample)
        db.commit()
        click.echo(f"✓ Created {count} pending commissions")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
def status():
    """Show the intake gate, queue limit and pending count."""
    _, db = _session()
    try:
        intake = settings_service.get_intake_settings(db)
        pending = commission_service.count_commissions_by_status(db, CommissionStatus.PENDING)
        click.echo(f"Intake: {'open' if intake.is_commissions_open else 'closed'}")
        click.echo(f"Queue: {pending}/{intake.queue_limit} pending")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
