# lending/sa/models/__init__.py
from .base import Base, TimestampMixin, UTCDateTime
from .book import Book, BookCategory, Availability
from .student import Student, MembershipStatus
from .borrowing import BorrowingRecord, BorrowingStatus, OPEN_STATUSES
from .penalty import Penalty, PaidStatus
from .audit import AuditEntry, AuditOperation
from .notification import NotificationLog

__all__ = [
    'Base',
    'TimestampMixin',
    'UTCDateTime',
    'Book',
    'BookCategory',
    'Availability',
    'Student',
    'MembershipStatus',
    'BorrowingRecord',
    'BorrowingStatus',
    'OPEN_STATUSES',
    'Penalty',
    'PaidStatus',
    'AuditEntry',
    'AuditOperation',
    'NotificationLog'
]
