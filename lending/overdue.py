# lending/overdue.py
from datetime import datetime, timedelta

from lending.config import DEFAULT_GRACE_DAYS
from lending.sa.models import BorrowingRecord

def overdue_days(borrowed_at: datetime, reference_at: datetime, grace_days: int = DEFAULT_GRACE_DAYS) -> int:
    """Whole calendar days a loan is past its grace period.

    Both instants are truncated to their calendar day, so a loan that is
    a few hours past due on the due date itself counts as 0.

    Args:
        borrowed_at: When the loan started
        reference_at: Return time for a closed loan, otherwise the current time
        grace_days: Days allowed before the loan is overdue

    Returns:
        Overdue day count, never negative

    Raises:
        ValueError: If grace_days is negative
    """
    if grace_days < 0:
        raise ValueError(f"grace_days must be >= 0, got {grace_days}")
    due_day = (borrowed_at + timedelta(days=grace_days)).date()
    return max(0, (reference_at.date() - due_day).days)

def is_past_grace(borrowed_at: datetime, now: datetime, grace_days: int = DEFAULT_GRACE_DAYS) -> bool:
    """True once the grace period has fully elapsed (instant comparison)"""
    if grace_days < 0:
        raise ValueError(f"grace_days must be >= 0, got {grace_days}")
    return borrowed_at + timedelta(days=grace_days) < now

def reference_instant(record: BorrowingRecord, now: datetime) -> datetime:
    """Return time for a closed loan, otherwise ``now``"""
    return record.returned_at if record.returned_at is not None else now
