from .book import BookRepository
from .student import StudentRepository
from .borrowing import BorrowingRecordRepository
from .penalty import PenaltyRepository
from .audit import AuditRepository
from .notification import NotificationRepository

__all__ = [
    'BookRepository',
    'StudentRepository',
    'BorrowingRecordRepository',
    'PenaltyRepository',
    'AuditRepository',
    'NotificationRepository'
]
