# lending/sa/models/borrowing.py
from datetime import datetime
from enum import Enum
from sqlalchemy import Integer, String, ForeignKey, CheckConstraint, Index, text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, UTCDateTime

class BorrowingStatus(str, Enum):
    BORROWED = "Borrowed"
    OVERDUE = "Overdue"
    RETURNED = "Returned"

# Statuses that count as an open loan
OPEN_STATUSES = (BorrowingStatus.BORROWED.value, BorrowingStatus.OVERDUE.value)

class BorrowingRecord(Base, TimestampMixin):
    __tablename__ = 'borrowing_record'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('book.id'), nullable=False)
    student_id: Mapped[int] = mapped_column(ForeignKey('student.id'), nullable=False)
    borrowed_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    returned_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=BorrowingStatus.BORROWED.value)

    # Relationships
    book = relationship('Book', back_populates='borrowing_records')
    student = relationship('Student', back_populates='borrowing_records')
    penalty = relationship('Penalty', back_populates='borrowing_record', uselist=False)

    __table_args__ = (
        CheckConstraint("status IN ('Borrowed', 'Overdue', 'Returned')", name='ck_borrowing_status'),
        CheckConstraint(
            "(status = 'Returned' AND returned_at IS NOT NULL) OR (status <> 'Returned' AND returned_at IS NULL)",
            name='ck_borrowing_returned_at'
        ),
        # At most one open loan per book
        Index(
            'uix_borrowing_open_book', 'book_id',
            unique=True,
            sqlite_where=text("status <> 'Returned'"),
            postgresql_where=text("status <> 'Returned'")
        ),
        Index('idx_borrowing_student_id', 'student_id'),
        Index('idx_borrowing_status', 'status'),
        Index('idx_borrowing_dates', 'borrowed_at', 'returned_at'),
    )

    @property
    def is_open(self) -> bool:
        return self.status != BorrowingStatus.RETURNED
