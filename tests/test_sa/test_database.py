# tests/test_sa/test_database.py
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from lending.errors import ContentionError
from lending.sa.database import Database, is_lock_error, transaction
from lending.sa.models import Student

def _locked_error():
    return OperationalError("UPDATE student SET name=?", {}, Exception("database is locked"))

def test_is_lock_error():
    """Test lock waits are told apart from other database errors"""
    assert is_lock_error(_locked_error())
    assert not is_lock_error(OperationalError("SELECT 1", {}, Exception("no such table: student")))
    assert not is_lock_error(ValueError("database is locked"))

def test_transaction_commits(db_session):
    with transaction(db_session):
        db_session.add(Student(name="Committed Student"))

    db_session.expire_all()
    assert db_session.query(Student).filter(Student.name == "Committed Student").count() == 1

def test_transaction_rolls_back_on_error(db_session):
    """Test an exception inside the block discards its writes"""
    with pytest.raises(ValueError):
        with transaction(db_session):
            db_session.add(Student(name="Discarded Student"))
            db_session.flush()
            raise ValueError("boom")

    assert db_session.query(Student).count() == 0

def test_transaction_translates_lock_errors(db_session):
    with pytest.raises(ContentionError):
        with transaction(db_session, lock_timeout=1.0):
            raise _locked_error()

def test_transaction_keeps_other_database_errors(db_session):
    with pytest.raises(IntegrityError):
        with transaction(db_session):
            db_session.add(Student(name="Bad Status", membership_status="banned"))
            db_session.flush()

def test_foreign_keys_enforced(database):
    """Test SQLite connections have foreign keys switched on"""
    with database.engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1

def test_get_db_commits(database):
    with database.get_db() as session:
        session.add(Student(name="Context Student"))

    with database.get_db() as session:
        assert session.query(Student).filter(Student.name == "Context Student").count() == 1

def test_connection_string_from_environment(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'env.db'}"
    monkeypatch.setenv("DATABASE_URL", url)

    db = Database()
    assert db.connection_string == url
    assert db.is_sqlite
