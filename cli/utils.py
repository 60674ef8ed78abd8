import click
import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Iterator, Optional, Tuple
from sqlalchemy.orm import Session
from lending.config import LendingSettings
from lending.errors import LendingError
from lending.sa.database import Database
from lending.services.desk import LendingDesk

def configure_logging(verbose: bool = False) -> None:
    """Route library logging to stderr; DEBUG with --verbose"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

@contextmanager
def open_desk() -> Iterator[Tuple[Session, LendingDesk]]:
    """Open a session on DATABASE_URL and wire a LendingDesk onto it"""
    settings = LendingSettings.from_env()
    db = Database(lock_timeout=settings.lock_timeout)
    session = db.get_session()
    try:
        yield session, LendingDesk(session, settings=settings)
    finally:
        session.close()

@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn a rejected operation into a red message and exit code 1"""
    try:
        yield
    except LendingError as e:
        click.echo(click.style(f"\n{e}", fg='red'), err=True)
        raise SystemExit(1)

def format_when(value: Optional[datetime]) -> str:
    return value.strftime("%d-%b-%Y %H:%M") if value else "Not Returned"

def format_money(amount: Decimal) -> str:
    return f"${Decimal(amount):.2f}"

def print_heading(title: str) -> None:
    click.echo(click.style("=" * 40, fg='blue'))
    click.echo(click.style(title, fg='blue'))
    click.echo(click.style("=" * 40, fg='blue'))

def print_field(label: str, value, color: str = 'cyan') -> None:
    click.echo(click.style(f"  {label}: ", fg='blue') + click.style(str(value), fg=color))
