# lending/services/records.py
import logging

from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.errors import NotFoundError, RecordInUseError
from lending.sa.database import transaction
from lending.sa.models import Availability
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from lending.sa.repositories.penalty import PenaltyRepository
from .audit import AuditRecorder

logger = logging.getLogger(__name__)

class RecordAdministration:
    """Administrative corrections to borrowing records."""

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.records = BorrowingRecordRepository(session)
        self.books = BookRepository(session)
        self.penalties = PenaltyRepository(session)
        self.auditor = AuditRecorder(session, self.clock)

    def delete_record(self, borrowing_id: int) -> None:
        """Delete a borrowing record, leaving a DELETE entry in the audit trail.

        Deleting an open loan makes its book available again.

        Raises:
            NotFoundError: If the record does not exist
            RecordInUseError: If a penalty was charged for the record
        """
        with transaction(self.session, self.settings.lock_timeout):
            record = self.records.get_for_update(borrowing_id)
            if record is None:
                raise NotFoundError("BorrowingRecord", borrowing_id)
            if self.penalties.get_by_borrowing_id(borrowing_id):
                raise RecordInUseError(borrowing_id, "a penalty was charged for it")

            self.auditor.record_delete(record)
            if record.is_open:
                book = self.books.get_for_update(record.book_id)
                self.books.set_availability(book, Availability.AVAILABLE)
            self.records.delete_record(record)

        logger.info(f"Deleted borrowing record {borrowing_id}")
