# lending/services/penalty.py
from decimal import Decimal
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.errors import NotFoundError
from lending.overdue import overdue_days, reference_instant
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from lending.sa.repositories.penalty import PenaltyRepository

logger = logging.getLogger(__name__)

class PenaltyEngine:
    """Computes late fees and records at most one Penalty per borrowing record."""

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.records = BorrowingRecordRepository(session)
        self.books = BookRepository(session)
        self.penalties = PenaltyRepository(session)

    def settle(self, borrowing_id: int) -> Decimal:
        """Compute the late fee for a loan and record it once.

        Runs inside the caller's transaction and never commits. The record
        row is locked first so concurrent settlements of the same loan queue
        up behind each other.

        Args:
            borrowing_id: The ID of the borrowing record

        Returns:
            The fee amount; 0 if the loan is not overdue. When a penalty
            already exists its stored amount is returned unchanged.

        Raises:
            NotFoundError: If the borrowing record does not exist. Nothing
                has been written at that point, so the caller decides whether
                the transaction goes on.
        """
        record = self.records.get_for_update(borrowing_id)
        if record is None:
            logger.warning(f"Cannot settle penalty: borrowing record {borrowing_id} not found")
            raise NotFoundError("BorrowingRecord", borrowing_id)

        days = overdue_days(
            record.borrowed_at,
            reference_instant(record, self.clock.now()),
            self.settings.grace_days
        )
        if days == 0:
            return Decimal("0")

        existing = self.penalties.get_by_borrowing_id(borrowing_id)
        if existing:
            logger.debug(f"Penalty for borrowing record {borrowing_id} already recorded")
            return existing.amount

        book = self.books.get_with_category(record.book_id)
        amount = Decimal(days) * book.category.fee_rate

        savepoint = self.session.begin_nested()
        try:
            self.penalties.create_penalty(record.student_id, borrowing_id, amount, days)
            savepoint.commit()
        except IntegrityError:
            # Another settlement got there first
            savepoint.rollback()
            existing = self.penalties.get_by_borrowing_id(borrowing_id)
            if existing is None:
                raise
            return existing.amount

        logger.info(f"Penalty of {amount} recorded for borrowing record {borrowing_id} ({days} days overdue)")
        return amount
