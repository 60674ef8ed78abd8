from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from lending.sa.models import AuditEntry, AuditOperation

class AuditRepository:
    """Append-only access to the audit trail. There is no update or delete."""

    def __init__(self, session: Session):
        self.session = session

    def add_entry(
        self,
        table_name: str,
        operation: AuditOperation,
        record_id: int,
        old_data: Dict[str, Any],
        new_data: Optional[Dict[str, Any]],
        created_at: datetime
    ) -> AuditEntry:
        entry = AuditEntry(
            table_name=table_name,
            operation=operation.value,
            record_id=record_id,
            old_data=old_data,
            new_data=new_data,
            created_at=created_at
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def list_for_record(self, table_name: str, record_id: int) -> List[AuditEntry]:
        return (
            self.session.query(AuditEntry)
            .filter(
                AuditEntry.table_name == table_name,
                AuditEntry.record_id == record_id
            )
            .order_by(AuditEntry.id)
            .all()
        )

    def count(self) -> int:
        return self.session.query(AuditEntry).count()
