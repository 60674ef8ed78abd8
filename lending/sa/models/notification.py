# lending/sa/models/notification.py
from datetime import date, datetime
from sqlalchemy import Integer, Date, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, UTCDateTime

class NotificationLog(Base):
    """Overdue notice sent to a student; one per student, book and day."""
    __tablename__ = 'notification_log'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(ForeignKey('student.id'), nullable=False)
    book_id: Mapped[int] = mapped_column(ForeignKey('book.id'), nullable=False)
    borrowing_record_id: Mapped[int | None] = mapped_column(ForeignKey('borrowing_record.id', ondelete='SET NULL'), nullable=True)
    overdue_days: Mapped[int] = mapped_column(Integer, nullable=False)
    notified_on: Mapped[date] = mapped_column(Date, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Relationships
    student = relationship('Student', back_populates='notifications')
    book = relationship('Book', back_populates='notifications')

    __table_args__ = (
        CheckConstraint('overdue_days >= 0', name='ck_notification_overdue_days'),
        UniqueConstraint('student_id', 'book_id', 'notified_on', name='uix_notification_student_book_day'),
    )
