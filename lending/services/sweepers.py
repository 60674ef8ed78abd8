# lending/services/sweepers.py
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.config import LendingSettings
from lending.overdue import overdue_days
from lending.sa.database import transaction
from lending.sa.models import BorrowingStatus, MembershipStatus, NotificationLog
from lending.sa.repositories.borrowing import BorrowingRecordRepository
from lending.sa.repositories.notification import NotificationRepository
from lending.sa.repositories.penalty import PenaltyRepository
from lending.sa.repositories.student import StudentRepository
from .audit import AuditRecorder, snapshot

logger = logging.getLogger(__name__)

@dataclass
class SuspensionResult:
    threshold: Decimal
    suspended_ids: List[int] = field(default_factory=list)
    already_suspended_ids: List[int] = field(default_factory=list)
    unpaid_totals: Dict[int, Decimal] = field(default_factory=dict)

@dataclass
class NotificationResult:
    entries: List[NotificationLog] = field(default_factory=list)

    @property
    def notified_count(self) -> int:
        return len(self.entries)

class SuspensionSweeper:
    """Suspends active students whose unpaid penalties exceed a threshold."""

    def __init__(self, session: Session, settings: LendingSettings = None):
        self.session = session
        self.settings = settings or LendingSettings()
        self.students = StudentRepository(session)
        self.penalties = PenaltyRepository(session)

    def suspend_over_threshold(self, threshold: Optional[Decimal] = None) -> SuspensionResult:
        """Suspend every active student owing more than ``threshold``.

        Runs in one transaction; a failure leaves no student suspended.
        Students who are already suspended are reported, not touched.
        """
        threshold = Decimal(str(threshold)) if threshold is not None else self.settings.suspension_threshold
        result = SuspensionResult(threshold=threshold)

        with transaction(self.session, self.settings.lock_timeout):
            candidates = [student_id for student_id, _ in self.penalties.unpaid_totals_over(threshold)]
            totals = result.unpaid_totals
            for student in self.students.lock_many(candidates):
                # Payments may have landed before the lock was taken
                totals[student.id] = self.penalties.total_unpaid_for_student(student.id)
                if totals[student.id] <= threshold:
                    del totals[student.id]
                    logger.debug(f"Student {student.id} no longer over threshold after locking")
                    continue
                if student.is_active:
                    self.students.set_membership_status(student, MembershipStatus.SUSPENDED)
                    result.suspended_ids.append(student.id)
                    logger.info(f"Suspended student {student.id} ({student.name}), unpaid penalties {totals[student.id]}")
                else:
                    result.already_suspended_ids.append(student.id)
                    logger.info(f"Student {student.id} ({student.name}) already suspended, unpaid penalties {totals[student.id]}")

        logger.info(f"Suspension sweep at threshold {threshold}: {len(result.suspended_ids)} student(s) suspended")
        return result

class NotificationSweeper:
    """Logs one overdue notice per student, book and calendar day."""

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.records = BorrowingRecordRepository(session)
        self.notifications = NotificationRepository(session)

    def send_overdue_notifications(self) -> NotificationResult:
        """Notify about open loans past their grace period and loans returned late today.

        Pairs already notified today are skipped, so running the sweep
        again on the same day adds nothing.
        """
        now = self.clock.now()
        today = now.date()
        start_of_day = datetime.combine(today, time.min, tzinfo=now.tzinfo)
        result = NotificationResult()

        with transaction(self.session, self.settings.lock_timeout):
            notified = self.notifications.pairs_notified_on(today)

            cutoff = now - timedelta(days=self.settings.grace_days)
            candidates = self.records.list_open_borrowed_before(cutoff)
            candidates += self.records.list_returned_between(start_of_day, start_of_day + timedelta(days=1))

            for record in candidates:
                pair = (record.student_id, record.book_id)
                if pair in notified:
                    continue
                reference = record.returned_at if record.returned_at is not None else now
                days = overdue_days(record.borrowed_at, reference, self.settings.grace_days)
                if record.returned_at is not None and days == 0:
                    continue
                savepoint = self.session.begin_nested()
                try:
                    entry = self.notifications.create_log(
                        record.student_id, record.book_id, days, now, borrowing_id=record.id
                    )
                    savepoint.commit()
                except IntegrityError:
                    # A concurrent sweep logged this pair first
                    savepoint.rollback()
                    notified.add(pair)
                    logger.info(f"Overdue notice for student {record.student_id}, book {record.book_id} already logged today")
                    continue
                notified.add(pair)
                result.entries.append(entry)
                logger.debug(f"Overdue notice for student {record.student_id}, book {record.book_id}: {days} day(s)")

        logger.info(f"Overdue notifications sent: {result.notified_count}")
        return result

class OverdueMarker:
    """Flips open loans past their grace period from Borrowed to Overdue."""

    def __init__(self, session: Session, clock=None, settings: LendingSettings = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or LendingSettings()
        self.records = BorrowingRecordRepository(session)
        self.auditor = AuditRecorder(session, self.clock)

    def mark_overdue(self) -> List[int]:
        """Mark overdue loans, auditing each change. Returns the marked record IDs."""
        marked: List[int] = []
        cutoff = self.clock.now() - timedelta(days=self.settings.grace_days)

        with transaction(self.session, self.settings.lock_timeout):
            for record in self.records.list_open_borrowed_before(cutoff, status=BorrowingStatus.BORROWED):
                locked = self.records.get_for_update(record.id)
                if locked is None or locked.status != BorrowingStatus.BORROWED:
                    continue
                before = snapshot(locked)
                locked.status = BorrowingStatus.OVERDUE.value
                self.session.flush()
                self.auditor.record_update(locked, before)
                marked.append(locked.id)

        logger.info(f"Marked {len(marked)} loan(s) overdue")
        return marked
