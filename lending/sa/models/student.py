# lending/sa/models/student.py
from enum import Enum
from sqlalchemy import String, Integer, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class MembershipStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"

class Student(Base, TimestampMixin):
    __tablename__ = 'student'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    membership_status: Mapped[str] = mapped_column(String(20), nullable=False, default=MembershipStatus.ACTIVE.value)

    # Relationships
    borrowing_records = relationship('BorrowingRecord', back_populates='student')
    penalties = relationship('Penalty', back_populates='student')
    notifications = relationship('NotificationLog', back_populates='student')

    __table_args__ = (
        CheckConstraint("membership_status IN ('active', 'suspended')", name='ck_student_membership_status'),
    )

    @property
    def is_active(self) -> bool:
        return self.membership_status == MembershipStatus.ACTIVE
