# lending/sa/models/book.py
from decimal import Decimal
from enum import Enum
from sqlalchemy import String, Integer, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class Availability(str, Enum):
    AVAILABLE = "Available"
    BORROWED = "Borrowed"

class BookCategory(Base, TimestampMixin):
    """Fee class of a book; fee_rate is charged per overdue day"""
    __tablename__ = 'book_category'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    fee_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Relationships
    books = relationship('Book', back_populates='category')

    __table_args__ = (
        CheckConstraint('fee_rate > 0', name='ck_book_category_fee_rate'),
    )

class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author: Mapped[str | None] = mapped_column(String(100), nullable=True)
    availability: Mapped[str] = mapped_column(String(20), nullable=False, default=Availability.AVAILABLE.value)
    category_id: Mapped[int] = mapped_column(ForeignKey('book_category.id'), nullable=False)

    # Relationships
    category = relationship('BookCategory', back_populates='books')
    borrowing_records = relationship('BorrowingRecord', back_populates='book')
    notifications = relationship('NotificationLog', back_populates='book')

    __table_args__ = (
        CheckConstraint("availability IN ('Available', 'Borrowed')", name='ck_book_availability'),
        Index('idx_book_category_id', 'category_id'),
    )

    @property
    def is_available(self) -> bool:
        return self.availability == Availability.AVAILABLE
