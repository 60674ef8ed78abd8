# lending/sa/models/audit.py
from datetime import datetime, UTC
from enum import Enum
from typing import Any
from sqlalchemy import Integer, String, JSON, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, UTCDateTime

class AuditOperation(str, Enum):
    UPDATE = "UPDATE"
    DELETE = "DELETE"

class AuditEntry(Base):
    """Append-only before/after image of a change to a borrowing record."""
    __tablename__ = 'audit_trail'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    table_name: Mapped[str] = mapped_column(String(100), nullable=False)
    operation: Mapped[str] = mapped_column(String(20), nullable=False)
    record_id: Mapped[int] = mapped_column(Integer, nullable=False)
    old_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    new_data: Mapped[dict[str, Any] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=lambda: datetime.now(UTC))

    __table_args__ = (
        CheckConstraint("operation IN ('UPDATE', 'DELETE')", name='ck_audit_operation'),
        CheckConstraint("operation = 'UPDATE' OR new_data IS NULL", name='ck_audit_delete_new_data'),
        Index('idx_audit_table_name', 'table_name'),
        Index('idx_audit_record_id', 'record_id'),
        Index('idx_audit_created_at', 'created_at'),
    )
