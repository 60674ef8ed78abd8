# tests/test_sa/conftest.py
import os
import pytest
from decimal import Decimal
from datetime import datetime, UTC, timedelta
from sqlalchemy.sql import text
from sqlalchemy.orm import Session

from lending.clock import FixedClock
from lending.config import LendingSettings
from lending.sa.database import Database
from lending.sa.models import (
    Base, Book, BookCategory, Student, BorrowingRecord, Penalty,
    Availability, BorrowingStatus, MembershipStatus, PaidStatus
)
from lending.services import LendingDesk

# Noon keeps "N days ago" on a predictable calendar day
NOW = datetime(2026, 3, 16, 12, 0, tzinfo=UTC)

@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_lending.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}", lock_timeout=1.0)

    # Drop all tables and recreate schema
    Base.metadata.drop_all(db.engine)
    Base.metadata.create_all(db.engine)

    yield db

    db.engine.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass

@pytest.fixture(autouse=True)
def cleanup_db(db_session):
    """Clean up database tables before each test"""
    # Delete all data from tables in reverse order of dependencies
    db_session.execute(text("DELETE FROM notification_log"))
    db_session.execute(text("DELETE FROM audit_trail"))
    db_session.execute(text("DELETE FROM penalty"))
    db_session.execute(text("DELETE FROM borrowing_record"))
    db_session.execute(text("DELETE FROM book"))
    db_session.execute(text("DELETE FROM book_category"))
    db_session.execute(text("DELETE FROM student"))
    db_session.commit()
    yield
    # Clean up after test as well
    db_session.rollback()

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database._SessionFactory()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def clock():
    return FixedClock(NOW)

@pytest.fixture
def settings():
    return LendingSettings()

@pytest.fixture
def desk(db_session, clock, settings):
    """LendingDesk on the test session with a fixed clock"""
    return LendingDesk(db_session, clock=clock, settings=settings)

@pytest.fixture
def regular_category(db_session):
    """Create the regular fee category (1 per overdue day)."""
    category = BookCategory(name="Regular Book", fee_rate=Decimal("1.00"))
    db_session.add(category)
    db_session.commit()
    return category

@pytest.fixture
def reference_category(db_session):
    """Create the reference fee category (2 per overdue day)."""
    category = BookCategory(name="Reference Book", fee_rate=Decimal("2.00"))
    db_session.add(category)
    db_session.commit()
    return category

@pytest.fixture
def sample_book(db_session, regular_category):
    """Create a sample available book for testing."""
    book = Book(
        title="Test Book",
        author="Test Author",
        category_id=regular_category.id,
        availability=Availability.AVAILABLE.value
    )
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def reference_book(db_session, reference_category):
    book = Book(
        title="Test Reference",
        author="Reference Author",
        category_id=reference_category.id,
        availability=Availability.AVAILABLE.value
    )
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def multiple_books(db_session, regular_category):
    """Create five available regular books for testing."""
    books = []
    for i in range(1, 6):
        book = Book(
            title=f"Test Book {i}",
            author=f"Test Author {i}",
            category_id=regular_category.id,
            availability=Availability.AVAILABLE.value
        )
        db_session.add(book)
        books.append(book)
    db_session.commit()
    return books

@pytest.fixture
def sample_student(db_session):
    """Create a sample active student for testing."""
    student = Student(name="Test Student", membership_status=MembershipStatus.ACTIVE.value)
    db_session.add(student)
    db_session.commit()
    return student

@pytest.fixture
def other_student(db_session):
    student = Student(name="Other Student", membership_status=MembershipStatus.ACTIVE.value)
    db_session.add(student)
    db_session.commit()
    return student

@pytest.fixture
def suspended_student(db_session):
    student = Student(name="Suspended Student", membership_status=MembershipStatus.SUSPENDED.value)
    db_session.add(student)
    db_session.commit()
    return student

@pytest.fixture
def open_loan(db_session, clock):
    """Factory that opens a loan borrowed ``days_ago`` days before the test clock."""
    def _open_loan(student, book, days_ago=0):
        record = BorrowingRecord(
            student_id=student.id,
            book_id=book.id,
            borrowed_at=clock.now() - timedelta(days=days_ago),
            status=BorrowingStatus.BORROWED.value
        )
        db_session.add(record)
        book.availability = Availability.BORROWED.value
        db_session.commit()
        return record
    return _open_loan

@pytest.fixture
def returned_loan(db_session, clock):
    """Factory for a closed loan, borrowed ``days_ago`` days ago and returned ``returned_days_ago`` days ago."""
    def _returned_loan(student, book, days_ago, returned_days_ago=0):
        record = BorrowingRecord(
            student_id=student.id,
            book_id=book.id,
            borrowed_at=clock.now() - timedelta(days=days_ago),
            returned_at=clock.now() - timedelta(days=returned_days_ago),
            status=BorrowingStatus.RETURNED.value
        )
        db_session.add(record)
        db_session.commit()
        return record
    return _returned_loan

@pytest.fixture
def unpaid_penalty(db_session, returned_loan):
    """Factory for a penalty of ``amount`` on a fresh closed loan of ``book``."""
    def _unpaid_penalty(student, book, amount, paid=False):
        record = returned_loan(student, book, days_ago=20, returned_days_ago=1)
        penalty = Penalty(
            student_id=student.id,
            borrowing_record_id=record.id,
            amount=Decimal(amount),
            overdue_days=12,
            paid_status=PaidStatus.PAID.value if paid else PaidStatus.UNPAID.value
        )
        db_session.add(penalty)
        db_session.commit()
        return penalty
    return _unpaid_penalty
