from datetime import date, datetime
from typing import Optional, Set, Tuple
from sqlalchemy.orm import Session
from lending.sa.models import NotificationLog

class NotificationRepository:
    """Repository for the overdue notification log."""

    def __init__(self, session: Session):
        self.session = session

    def pairs_notified_on(self, day: date) -> Set[Tuple[int, int]]:
        """Get the (student_id, book_id) pairs already notified on ``day``"""
        rows = (
            self.session.query(NotificationLog.student_id, NotificationLog.book_id)
            .filter(NotificationLog.notified_on == day)
            .all()
        )
        return {(student_id, book_id) for student_id, book_id in rows}

    def create_log(
        self,
        student_id: int,
        book_id: int,
        overdue_days: int,
        sent_at: datetime,
        borrowing_id: Optional[int] = None
    ) -> NotificationLog:
        """Log one overdue notice.

        Args:
            student_id: The notified student
            book_id: The overdue book
            overdue_days: Days overdue at the time of the notice
            sent_at: When the notice was sent; its UTC date is the notice day
            borrowing_id: The loan the notice is about

        Returns:
            The created NotificationLog
        """
        log = NotificationLog(
            student_id=student_id,
            book_id=book_id,
            borrowing_record_id=borrowing_id,
            overdue_days=overdue_days,
            notified_on=sent_at.date(),
            sent_at=sent_at
        )
        self.session.add(log)
        self.session.flush()
        return log
