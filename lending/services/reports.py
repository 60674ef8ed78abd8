# lending/services/reports.py
"""Read-only projections over lending state.

Nothing here writes; formatting for people is left to the caller.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.errors import NotFoundError
from lending.overdue import is_past_grace, overdue_days, reference_instant
from lending.sa.models import BorrowingRecord
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from lending.sa.repositories.student import StudentRepository

RETURN_STATUS_OVERDUE = "Overdue"
RETURN_STATUS_LATE = "Returned Late"
RETURN_STATUS_RETURNED_ON_TIME = "Returned On Time"
RETURN_STATUS_ON_TIME = "On Time"

@dataclass
class HistoryLine:
    borrowing_id: int
    book_title: str
    borrowed_at: datetime
    returned_at: Optional[datetime]
    status: str
    return_status: str
    penalty_total: Decimal

@dataclass
class AvailabilityLine:
    book_id: int
    title: str
    author: Optional[str]
    availability: str
    borrower_id: Optional[int] = None
    borrower_name: Optional[str] = None
    borrowed_at: Optional[datetime] = None
    overdue_days: int = 0

    @property
    def is_overdue(self) -> bool:
        return self.overdue_days > 0

@dataclass
class AvailabilityReport:
    generated_at: datetime
    lines: List[AvailabilityLine] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.lines)

    @property
    def available_count(self) -> int:
        return sum(1 for line in self.lines if line.borrower_id is None)

    @property
    def borrowed_on_time_count(self) -> int:
        return sum(1 for line in self.lines if line.borrower_id is not None and not line.is_overdue)

    @property
    def overdue_count(self) -> int:
        return sum(1 for line in self.lines if line.is_overdue)

class LendingReports:
    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.books = BookRepository(session)
        self.students = StudentRepository(session)
        self.records = BorrowingRecordRepository(session)

    def currently_borrowed_count(self) -> int:
        return self.records.count_currently_borrowed()

    def return_status(self, record: BorrowingRecord, now: datetime) -> str:
        """Derived return status of a loan as seen at ``now``"""
        if record.returned_at is None:
            if is_past_grace(record.borrowed_at, now, self.settings.grace_days):
                return RETURN_STATUS_OVERDUE
            return RETURN_STATUS_ON_TIME
        if overdue_days(record.borrowed_at, record.returned_at, self.settings.grace_days) > 0:
            return RETURN_STATUS_LATE
        return RETURN_STATUS_RETURNED_ON_TIME

    def borrowing_history(self, student_id: int) -> List[HistoryLine]:
        """A student's loans, newest first, with derived status and penalties.

        Raises:
            NotFoundError: If the student does not exist
        """
        if self.students.get_by_id(student_id) is None:
            raise NotFoundError("Student", student_id)

        now = self.clock.now()
        lines = []
        for record in self.records.list_history_for_student(student_id):
            lines.append(HistoryLine(
                borrowing_id=record.id,
                book_title=record.book.title,
                borrowed_at=record.borrowed_at,
                returned_at=record.returned_at,
                status=record.status,
                return_status=self.return_status(record, now),
                penalty_total=record.penalty.amount if record.penalty else Decimal("0"),
            ))
        return lines

    def availability_report(self) -> AvailabilityReport:
        """Every book with its current borrower and overdue days, if any"""
        now = self.clock.now()
        report = AvailabilityReport(generated_at=now)
        for book in self.books.list_all():
            line = AvailabilityLine(
                book_id=book.id,
                title=book.title,
                author=book.author,
                availability=book.availability,
            )
            record = self.records.get_open_for_book(book.id)
            if record is not None:
                line.borrower_id = record.student_id
                line.borrower_name = record.student.name
                line.borrowed_at = record.borrowed_at
                line.overdue_days = overdue_days(
                    record.borrowed_at, reference_instant(record, now), self.settings.grace_days
                )
            report.lines.append(line)
        return report
