# lending/services/borrow.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.errors import ValidationError, ValidationKind
from lending.sa.database import transaction
from lending.sa.models import Availability, BorrowingRecord
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from .validation import ValidationGate

logger = logging.getLogger(__name__)

class BorrowCoordinator:
    """Validates and opens a loan in a single transaction."""

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.gate = ValidationGate(session, self.clock, self.settings)
        self.books = BookRepository(session)
        self.records = BorrowingRecordRepository(session)

    def borrow(self, student_id: int, book_id: int) -> BorrowingRecord:
        """Lend a book to a student.

        Args:
            student_id: The borrowing student
            book_id: The book to lend

        Returns:
            The committed BorrowingRecord

        Raises:
            NotFoundError: If the student or book does not exist
            ValidationError: If a borrow-time check fails; nothing is changed
            ContentionError: If the rows could not be locked in time
        """
        with transaction(self.session, self.settings.lock_timeout):
            student, book = self.gate.validate(student_id, book_id)
            try:
                record = self.records.create_record(student.id, book.id, self.clock.now())
            except IntegrityError as e:
                # The open-loan index caught a concurrent borrow of the same book
                raise ValidationError(ValidationKind.BOOK_UNAVAILABLE, student_id, book_id) from e
            self.books.set_availability(book, Availability.BORROWED)
            record_id = record.id

        logger.info(f"Student {student_id} borrowed book {book_id} (borrowing record {record_id})")
        return record
