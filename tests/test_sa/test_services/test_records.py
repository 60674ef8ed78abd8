import pytest
from lending.errors import NotFoundError, RecordInUseError
from lending.sa.models import AuditEntry, Book, BorrowingRecord
from lending.sa.repositories.audit import AuditRepository
from lending.services.audit import BORROWING_TABLE

def test_delete_open_record(desk, db_session, sample_student, sample_book, open_loan):
    """Test deleting an open loan frees the book and leaves a DELETE audit entry"""
    record = open_loan(sample_student, sample_book, days_ago=2)
    record_id = record.id

    desk.delete_record(record_id)

    assert db_session.get(BorrowingRecord, record_id) is None
    assert db_session.get(Book, sample_book.id).is_available
    entry = AuditRepository(db_session).list_for_record(BORROWING_TABLE, record_id)[0]
    assert entry.operation == "DELETE"
    assert entry.old_data["id"] == record_id
    assert entry.old_data["status"] == "Borrowed"
    assert entry.new_data is None

def test_delete_returned_record(desk, db_session, sample_student, other_student, sample_book, returned_loan, open_loan):
    """Test deleting a closed loan does not touch the book's current loan"""
    old = returned_loan(sample_student, sample_book, days_ago=5, returned_days_ago=3)
    open_loan(other_student, sample_book)

    desk.delete_record(old.id)

    assert not db_session.get(Book, sample_book.id).is_available

def test_delete_record_with_penalty(desk, db_session, sample_student, sample_book, unpaid_penalty):
    penalty = unpaid_penalty(sample_student, sample_book, "3")

    with pytest.raises(RecordInUseError):
        desk.delete_record(penalty.borrowing_record_id)

    assert db_session.get(BorrowingRecord, penalty.borrowing_record_id) is not None
    assert db_session.query(AuditEntry).count() == 0

def test_delete_unknown_record(desk):
    with pytest.raises(NotFoundError):
        desk.delete_record(99999)
