# lending/services/audit.py
from datetime import datetime
from typing import Any, Dict, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lending.clock import SystemClock
from lending.errors import AuditWriteError
from lending.sa.models import AuditEntry, AuditOperation, BorrowingRecord
from lending.sa.repositories.audit import AuditRepository

logger = logging.getLogger(__name__)

BORROWING_TABLE = BorrowingRecord.__tablename__

def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None

def snapshot(record: BorrowingRecord) -> Dict[str, Any]:
    """JSON-safe image of a borrowing record's lifecycle fields"""
    return {
        'id': record.id,
        'book_id': record.book_id,
        'student_id': record.student_id,
        'borrowed_at': _isoformat(record.borrowed_at),
        'returned_at': _isoformat(record.returned_at),
        'status': record.status,
    }

class AuditRecorder:
    """Writes audit entries inside the caller's transaction.

    A failed write raises AuditWriteError so the enclosing transaction rolls
    back instead of committing a change with no trail.
    """

    def __init__(self, session: Session, clock=None):
        self.session = session
        self.clock = clock or SystemClock()
        self.audit = AuditRepository(session)

    def record(
        self,
        table_name: str,
        operation: AuditOperation,
        record_id: int,
        before: Dict[str, Any],
        after: Optional[Dict[str, Any]] = None
    ) -> AuditEntry:
        """Append one audit entry.

        Args:
            table_name: Table of the changed row
            operation: UPDATE or DELETE
            record_id: Primary key of the changed row
            before: Snapshot before the change
            after: Snapshot after the change, None for DELETE

        Returns:
            The flushed AuditEntry

        Raises:
            AuditWriteError: If the entry could not be written
        """
        if operation == AuditOperation.DELETE and after is not None:
            raise AuditWriteError(f"DELETE audit for {table_name} {record_id} cannot carry an after image")
        try:
            entry = self.audit.add_entry(
                table_name=table_name,
                operation=operation,
                record_id=record_id,
                old_data=before,
                new_data=after,
                created_at=self.clock.now()
            )
        except SQLAlchemyError as e:
            logger.error(f"Audit write failed for {table_name} {record_id}: {str(e)}")
            raise AuditWriteError(f"Could not write {operation.value} audit for {table_name} {record_id}") from e
        logger.debug(f"Audited {operation.value} on {table_name} {record_id}")
        return entry

    def record_update(self, record: BorrowingRecord, before: Dict[str, Any]) -> AuditEntry:
        """Audit an update of ``record`` whose pre-change image is ``before``"""
        return self.record(BORROWING_TABLE, AuditOperation.UPDATE, record.id, before, snapshot(record))

    def record_delete(self, record: BorrowingRecord) -> AuditEntry:
        return self.record(BORROWING_TABLE, AuditOperation.DELETE, record.id, snapshot(record), None)
