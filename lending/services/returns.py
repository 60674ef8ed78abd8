# lending/services/returns.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Sequence
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.errors import (
    BatchError, ContentionError, LendingError, NotFoundError, OwnershipMismatchError
)
from lending.sa.database import is_lock_error, transaction
from lending.sa.models import Availability, BorrowingRecord, BorrowingStatus
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from lending.sa.repositories.penalty import PenaltyRepository
from .audit import AuditRecorder, snapshot
from .penalty import PenaltyEngine

logger = logging.getLogger(__name__)

@dataclass
class ReturnResult:
    student_id: int
    returned_ids: List[int] = field(default_factory=list)
    skipped_ids: List[int] = field(default_factory=list)
    penalties: Dict[int, Decimal] = field(default_factory=dict)
    unpaid_before: Decimal = Decimal("0")

    @property
    def returned_count(self) -> int:
        return len(self.returned_ids)

    @property
    def total_penalty(self) -> Decimal:
        return sum(self.penalties.values(), Decimal("0"))

class ReturnCoordinator:
    """Returns a batch of loans as one unit: every item or none of them."""

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.records = BorrowingRecordRepository(session)
        self.books = BookRepository(session)
        self.penalties = PenaltyRepository(session)
        self.penalty_engine = PenaltyEngine(session, self.clock, self.settings)
        self.auditor = AuditRecorder(session, self.clock)

    def return_books(self, student_id: int, borrowing_ids: Sequence[int]) -> ReturnResult:
        """Return several loans of one student.

        Items are handled in the given order. Loans that are already
        returned are skipped. If any item fails, everything written by this
        call (returns, penalties, audit entries) is rolled back.

        Args:
            student_id: The returning student
            borrowing_ids: Borrowing record IDs to close

        Returns:
            ReturnResult describing what was returned and charged

        Raises:
            BatchError: Wrapping the first failing item's cause
            ContentionError: If the lock timeout could not be set up
        """
        result = ReturnResult(student_id=student_id)

        with transaction(self.session, self.settings.lock_timeout):
            result.unpaid_before = self.penalties.total_unpaid_for_student(student_id)
            if result.unpaid_before > 0:
                logger.warning(f"Student {student_id} has unpaid penalties totaling {result.unpaid_before}")

            savepoint = self.session.begin_nested()
            for borrowing_id in borrowing_ids:
                try:
                    self._return_one(student_id, borrowing_id, result)
                except (LendingError, SQLAlchemyError) as e:
                    savepoint.rollback()
                    cause = e
                    if isinstance(e, SQLAlchemyError) and is_lock_error(e):
                        cause = ContentionError(f"Could not lock borrowing record {borrowing_id}")
                    logger.error(f"Return batch for student {student_id} rolled back at record {borrowing_id}: {str(cause)}")
                    raise BatchError(borrowing_id, cause) from e
            savepoint.commit()

        logger.info(
            f"Student {student_id} returned {result.returned_count} book(s), "
            f"skipped {len(result.skipped_ids)}, penalties {result.total_penalty}"
        )
        return result

    def _return_one(self, student_id: int, borrowing_id: int, result: ReturnResult) -> None:
        record = self.records.get_for_update(borrowing_id)
        if record is None:
            raise NotFoundError("BorrowingRecord", borrowing_id)
        if record.student_id != student_id:
            raise OwnershipMismatchError(borrowing_id, student_id, record.student_id)
        if record.status == BorrowingStatus.RETURNED:
            logger.info(f"Borrowing record {borrowing_id} already returned, skipping")
            result.skipped_ids.append(borrowing_id)
            return

        amount = self.penalty_engine.settle(borrowing_id)
        if amount > 0:
            result.penalties[borrowing_id] = amount

        self._close(record)
        result.returned_ids.append(borrowing_id)

    def _close(self, record: BorrowingRecord) -> None:
        """Mark the loan returned, free its book and audit the change"""
        before = snapshot(record)
        record.status = BorrowingStatus.RETURNED.value
        record.returned_at = self.clock.now()
        self.session.flush()

        book = self.books.get_for_update(record.book_id)
        self.books.set_availability(book, Availability.AVAILABLE)

        self.auditor.record_update(record, before)
