# tests/test_sa/test_schema.py
import pytest
from lending.sa.models import (
    Book, BookCategory, Student, BorrowingRecord, Penalty, AuditEntry, NotificationLog
)
from tests.test_sa.utils import DBInspector, print_table_schema, compare_model_to_db, index_names


@pytest.mark.parametrize("model_class", [
    BookCategory, Book, Student, BorrowingRecord, Penalty, AuditEntry, NotificationLog
])
def test_model_matches_schema(db_session, model_class):
    """Test each model matches its database table"""
    print_table_schema(db_session, model_class.__tablename__)

    differences = compare_model_to_db(db_session, model_class)
    assert not differences, f"Schema differences found: {differences}"

def test_all_tables_created(db_session):
    """Test every lending table exists"""
    tables = set(DBInspector(db_session).get_all_tables())
    assert {
        'book_category', 'book', 'student', 'borrowing_record',
        'penalty', 'audit_trail', 'notification_log'
    } <= tables

def test_open_loan_index_exists(db_session):
    """Test the one-open-loan-per-book index is created"""
    assert 'uix_borrowing_open_book' in index_names(db_session, 'borrowing_record')

def test_penalty_borrowing_record_is_unique(db_session):
    """Test a borrowing record can carry only one penalty"""
    info = DBInspector(db_session).get_table_info('penalty')
    unique_columns = [c['column_names'] for c in info['unique_constraints']]
    unique_columns += [i['column_names'] for i in info['indexes'] if i['unique']]
    assert ['borrowing_record_id'] in unique_columns
