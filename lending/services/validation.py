# lending/services/validation.py
from datetime import timedelta
from typing import Tuple
import logging

from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.errors import NotFoundError, ValidationError, ValidationKind
from lending.sa.models import Book, Student
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from lending.sa.repositories.student import StudentRepository

logger = logging.getLogger(__name__)

class ValidationGate:
    """Borrow-time checks, run in the same transaction as the insert they guard.

    The student and book rows are locked so that two borrows cannot both
    pass the checks for the same book or the same loan limit.
    """

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.students = StudentRepository(session)
        self.books = BookRepository(session)
        self.records = BorrowingRecordRepository(session)

    def validate(self, student_id: int, book_id: int) -> Tuple[Student, Book]:
        """Check that ``student_id`` may borrow ``book_id`` right now.

        Checks run in order and stop at the first failure: membership,
        book availability, open-loan limit, overdue loans.

        Returns:
            The locked (Student, Book) pair

        Raises:
            NotFoundError: If the student or the book does not exist
            ValidationError: With the kind of the first failed check
        """
        student = self.students.get_for_update(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        if not student.is_active:
            raise ValidationError(ValidationKind.STUDENT_SUSPENDED, student_id, book_id)

        book = self.books.get_for_update(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        if not book.is_available:
            raise ValidationError(ValidationKind.BOOK_UNAVAILABLE, student_id, book_id)

        open_count = self.records.count_open_for_student(student_id)
        if open_count >= self.settings.borrow_limit:
            raise ValidationError(
                ValidationKind.BORROW_LIMIT_REACHED, student_id, book_id,
                f"{open_count} of {self.settings.borrow_limit} loans open"
            )

        cutoff = self.clock.now() - timedelta(days=self.settings.grace_days)
        overdue = [r for r in self.records.list_open_for_student(student_id) if r.borrowed_at < cutoff]
        if overdue:
            raise ValidationError(
                ValidationKind.HAS_OVERDUE_BOOKS, student_id, book_id,
                f"{len(overdue)} overdue loan(s): {', '.join(str(r.id) for r in overdue)}"
            )

        return student, book
