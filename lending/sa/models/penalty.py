# lending/sa/models/penalty.py
from decimal import Decimal
from enum import Enum
from sqlalchemy import Integer, String, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class PaidStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"

class Penalty(Base, TimestampMixin):
    """Late fee for one borrowing record. The amount never changes once written."""
    __tablename__ = 'penalty'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(ForeignKey('student.id'), nullable=False)
    borrowing_record_id: Mapped[int] = mapped_column(ForeignKey('borrowing_record.id'), nullable=False, unique=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    overdue_days: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(200), nullable=True)
    paid_status: Mapped[str] = mapped_column(String(10), nullable=False, default=PaidStatus.UNPAID.value)

    # Relationships
    student = relationship('Student', back_populates='penalties')
    borrowing_record = relationship('BorrowingRecord', back_populates='penalty')

    __table_args__ = (
        CheckConstraint('amount >= 0', name='ck_penalty_amount'),
        CheckConstraint("paid_status IN ('unpaid', 'paid')", name='ck_penalty_paid_status'),
        Index('idx_penalty_student_id', 'student_id'),
        Index('idx_penalty_paid_status', 'paid_status'),
    )

    @property
    def is_paid(self) -> bool:
        return self.paid_status == PaidStatus.PAID
