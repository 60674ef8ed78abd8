from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from lending.sa.models import Penalty, PaidStatus, Student

class PenaltyRepository:
    """Repository for managing Penalty entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, penalty_id: int) -> Optional[Penalty]:
        return self.session.query(Penalty).filter(Penalty.id == penalty_id).first()

    def get_by_borrowing_id(self, borrowing_id: int) -> Optional[Penalty]:
        """Get the penalty charged for a borrowing record.

        Args:
            borrowing_id: The ID of the borrowing record

        Returns:
            The Penalty if one was charged, None otherwise
        """
        return (
            self.session.query(Penalty)
            .filter(Penalty.borrowing_record_id == borrowing_id)
            .first()
        )

    def create_penalty(self, student_id: int, borrowing_id: int, amount: Decimal, overdue_days: int) -> Penalty:
        """Create an unpaid penalty for a borrowing record.

        Args:
            student_id: The student charged
            borrowing_id: The borrowing record the fee is for
            amount: Fee amount, not negative
            overdue_days: Days overdue the fee was computed from

        Returns:
            The created Penalty

        Raises:
            sqlalchemy.exc.IntegrityError: If the record already has a penalty
        """
        penalty = Penalty(
            student_id=student_id,
            borrowing_record_id=borrowing_id,
            amount=amount,
            overdue_days=overdue_days,
            reason=f"Late fee for borrow id {borrowing_id} ({overdue_days} days overdue)",
            paid_status=PaidStatus.UNPAID.value
        )
        self.session.add(penalty)
        self.session.flush()
        return penalty

    def total_unpaid_for_student(self, student_id: int) -> Decimal:
        total = (
            self.session.query(func.coalesce(func.sum(Penalty.amount), 0))
            .filter(
                Penalty.student_id == student_id,
                Penalty.paid_status == PaidStatus.UNPAID.value
            )
            .scalar()
        )
        return Decimal(str(total))

    def unpaid_totals_over(self, threshold: Decimal) -> List[Tuple[int, Decimal]]:
        """Get students whose unpaid penalties sum to more than ``threshold``.

        Args:
            threshold: Exclusive lower bound on the unpaid total

        Returns:
            List of (student_id, unpaid_total) tuples ordered by student ID
        """
        total = func.sum(Penalty.amount)
        rows = (
            self.session.query(Student.id, total)
            .join(Penalty, Penalty.student_id == Student.id)
            .filter(Penalty.paid_status == PaidStatus.UNPAID.value)
            .group_by(Student.id)
            .having(total > threshold)
            .order_by(Student.id)
            .all()
        )
        return [(student_id, Decimal(str(amount))) for student_id, amount in rows]

    def mark_paid(self, penalty_id: int) -> Optional[Penalty]:
        """Mark a penalty as paid.

        Args:
            penalty_id: The ID of the penalty

        Returns:
            The updated Penalty if found, None otherwise
        """
        penalty = self.get_by_id(penalty_id)
        if not penalty:
            return None
        penalty.paid_status = PaidStatus.PAID.value
        self.session.flush()
        return penalty
