# lending/services/desk.py
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.sa.database import transaction
from lending.sa.models import BorrowingRecord
from .borrow import BorrowCoordinator
from .penalty import PenaltyEngine
from .records import RecordAdministration
from .reports import AvailabilityReport, HistoryLine, LendingReports
from .returns import ReturnCoordinator, ReturnResult
from .sweepers import (
    NotificationResult, NotificationSweeper, OverdueMarker,
    SuspensionResult, SuspensionSweeper
)

class LendingDesk:
    """
    Facade that wires the coordinators, sweepers and reports onto one session.
    """

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()

        self.borrowing = BorrowCoordinator(session, self.clock, self.settings)
        self.returns = ReturnCoordinator(session, self.clock, self.settings)
        self.penalty_engine = PenaltyEngine(session, self.clock, self.settings)
        self.administration = RecordAdministration(session, self.clock, self.settings)
        self.suspensions = SuspensionSweeper(session, self.settings)
        self.notifications = NotificationSweeper(session, self.clock, self.settings)
        self.overdue_marker = OverdueMarker(session, self.clock, self.settings)
        self.reports = LendingReports(session, self.clock, self.settings)

    # ---- lifecycle
    def borrow(self, student_id: int, book_id: int) -> BorrowingRecord:
        return self.borrowing.borrow(student_id, book_id)

    def return_books(self, student_id: int, borrowing_ids: Sequence[int]) -> ReturnResult:
        return self.returns.return_books(student_id, borrowing_ids)

    def settle_penalty(self, borrowing_id: int) -> Decimal:
        """Settle one loan's late fee in its own transaction"""
        with transaction(self.session, self.settings.lock_timeout):
            return self.penalty_engine.settle(borrowing_id)

    def delete_record(self, borrowing_id: int) -> None:
        self.administration.delete_record(borrowing_id)

    # ---- sweeps
    def suspend_over_threshold(self, threshold: Optional[Decimal] = None) -> SuspensionResult:
        return self.suspensions.suspend_over_threshold(threshold)

    def send_overdue_notifications(self) -> NotificationResult:
        return self.notifications.send_overdue_notifications()

    def mark_overdue(self) -> List[int]:
        return self.overdue_marker.mark_overdue()

    # ---- read-only
    def currently_borrowed_count(self) -> int:
        return self.reports.currently_borrowed_count()

    def borrowing_history(self, student_id: int) -> List[HistoryLine]:
        return self.reports.borrowing_history(student_id)

    def availability_report(self) -> AvailabilityReport:
        return self.reports.availability_report()
