# lending/sa/__init__.py
from .database import Database, transaction
from .models import (
    Base, Book, BookCategory, Student, BorrowingRecord,
    Penalty, AuditEntry, NotificationLog
)

__all__ = [
    'Database',
    'transaction',
    'Base',
    'Book',
    'BookCategory',
    'Student',
    'BorrowingRecord',
    'Penalty',
    'AuditEntry',
    'NotificationLog'
]
