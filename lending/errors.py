# lending/errors.py
from enum import Enum
from typing import Optional

class LendingError(Exception):
    """Base class for every rejected lending operation"""
    pass

class NotFoundError(LendingError):
    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")

class ValidationKind(str, Enum):
    STUDENT_SUSPENDED = "student_suspended"
    BOOK_UNAVAILABLE = "book_unavailable"
    BORROW_LIMIT_REACHED = "borrow_limit_reached"
    HAS_OVERDUE_BOOKS = "has_overdue_books"

class ValidationError(LendingError):
    """A borrow request failed one of the borrow-time checks."""

    def __init__(self, kind: ValidationKind, student_id: int, book_id: int, detail: Optional[str] = None):
        self.kind = kind
        self.student_id = student_id
        self.book_id = book_id
        message = f"Cannot borrow book {book_id} for student {student_id}: {kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

class OwnershipMismatchError(LendingError):
    def __init__(self, borrowing_id: int, student_id: int, owner_id: int):
        self.borrowing_id = borrowing_id
        self.student_id = student_id
        self.owner_id = owner_id
        super().__init__(
            f"Borrowing record {borrowing_id} belongs to student {owner_id}, not student {student_id}"
        )

class ContentionError(LendingError):
    """A required lock could not be acquired in time. Safe to retry."""
    pass

class BatchError(LendingError):
    """A batch return failed; nothing from the batch was kept."""

    def __init__(self, borrowing_id: int, cause: Exception):
        self.borrowing_id = borrowing_id
        self.cause = cause
        super().__init__(
            f"Return of borrowing record {borrowing_id} failed, all changes rolled back: {cause}"
        )

class AuditWriteError(LendingError):
    pass

class RecordInUseError(LendingError):
    def __init__(self, borrowing_id: int, reason: str):
        self.borrowing_id = borrowing_id
        super().__init__(f"Borrowing record {borrowing_id} cannot be deleted: {reason}")
