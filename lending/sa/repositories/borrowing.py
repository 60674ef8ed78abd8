from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from lending.sa.models import BorrowingRecord, BorrowingStatus, OPEN_STATUSES

class BorrowingRecordRepository:
    """Repository for managing BorrowingRecord entities.

    Changes are flushed, never committed; the caller owns the transaction.
    """

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, borrowing_id: int) -> Optional[BorrowingRecord]:
        return self.session.query(BorrowingRecord).filter(BorrowingRecord.id == borrowing_id).first()

    def get_for_update(self, borrowing_id: int) -> Optional[BorrowingRecord]:
        """Get a borrowing record and lock its row until the transaction ends.

        Args:
            borrowing_id: The ID of the borrowing record

        Returns:
            The locked BorrowingRecord if found, None otherwise
        """
        return (
            self.session.query(BorrowingRecord)
            .filter(BorrowingRecord.id == borrowing_id)
            .with_for_update()
            .first()
        )

    def create_record(self, student_id: int, book_id: int, borrowed_at: datetime) -> BorrowingRecord:
        """Create a new open borrowing record.

        Args:
            student_id: The borrowing student
            book_id: The borrowed book
            borrowed_at: When the loan starts

        Returns:
            The created BorrowingRecord
        """
        record = BorrowingRecord(
            student_id=student_id,
            book_id=book_id,
            borrowed_at=borrowed_at,
            status=BorrowingStatus.BORROWED.value
        )
        self.session.add(record)
        self.session.flush()
        return record

    def delete_record(self, record: BorrowingRecord) -> None:
        self.session.delete(record)
        self.session.flush()

    def list_open_for_student(self, student_id: int) -> List[BorrowingRecord]:
        """Get a student's open loans, oldest first.

        Args:
            student_id: The ID of the student

        Returns:
            List of BorrowingRecord objects whose status is not Returned
        """
        return (
            self.session.query(BorrowingRecord)
            .filter(
                BorrowingRecord.student_id == student_id,
                BorrowingRecord.status.in_(OPEN_STATUSES)
            )
            .order_by(BorrowingRecord.borrowed_at)
            .all()
        )

    def count_open_for_student(self, student_id: int) -> int:
        return (
            self.session.query(func.count(BorrowingRecord.id))
            .filter(
                BorrowingRecord.student_id == student_id,
                BorrowingRecord.status.in_(OPEN_STATUSES)
            )
            .scalar()
        )

    def get_open_for_book(self, book_id: int) -> Optional[BorrowingRecord]:
        return (
            self.session.query(BorrowingRecord)
            .options(joinedload(BorrowingRecord.student))
            .filter(
                BorrowingRecord.book_id == book_id,
                BorrowingRecord.status.in_(OPEN_STATUSES)
            )
            .first()
        )

    def count_currently_borrowed(self) -> int:
        """Count open loans across all students"""
        return (
            self.session.query(func.count(BorrowingRecord.id))
            .filter(BorrowingRecord.status.in_(OPEN_STATUSES))
            .scalar()
        )

    def list_open_borrowed_before(self, cutoff: datetime, status: Optional[BorrowingStatus] = None) -> List[BorrowingRecord]:
        """Get open loans that started before ``cutoff``.

        Args:
            cutoff: Loans with borrowed_at strictly before this instant are returned
            status: Optionally restrict to one open status

        Returns:
            List of BorrowingRecord objects ordered by ID
        """
        query = self.session.query(BorrowingRecord).filter(BorrowingRecord.borrowed_at < cutoff)
        if status is not None:
            query = query.filter(BorrowingRecord.status == status.value)
        else:
            query = query.filter(BorrowingRecord.status.in_(OPEN_STATUSES))
        return query.order_by(BorrowingRecord.id).all()

    def list_returned_between(self, start: datetime, end: datetime) -> List[BorrowingRecord]:
        """Get loans closed in the half-open window [start, end)"""
        return (
            self.session.query(BorrowingRecord)
            .filter(
                BorrowingRecord.status == BorrowingStatus.RETURNED.value,
                BorrowingRecord.returned_at >= start,
                BorrowingRecord.returned_at < end
            )
            .order_by(BorrowingRecord.id)
            .all()
        )

    def list_history_for_student(self, student_id: int) -> List[BorrowingRecord]:
        """Get every loan of a student with book and penalty loaded, newest first"""
        return (
            self.session.query(BorrowingRecord)
            .options(
                joinedload(BorrowingRecord.book),
                joinedload(BorrowingRecord.penalty)
            )
            .filter(BorrowingRecord.student_id == student_id)
            .order_by(BorrowingRecord.borrowed_at.desc(), BorrowingRecord.id.desc())
            .all()
        )
