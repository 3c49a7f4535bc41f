from __future__ import annotations

from ..extensions import db
from eightbit.time_utils import to_utc_z


class AuditLog(db.Model):
    """
    Audit trail for catalog mutations.

    IMMUTABLE: Never update or delete. Append-only for audit integrity.
    Rows are written only by services.audit_service.append_audit_entry,
    inside the same transaction as the mutation they record.
    """
    __tablename__ = "Audit_log"
    __table_args__ = (
        db.Index("ix_audit_log_table_record", "Table_name", "Record_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("Log_id", db.Integer, primary_key=True)
    table_name = db.Column("Table_name", db.String(50), nullable=False)
    action_type = db.Column("Action_type", db.String(10), nullable=False)  # INSERT, UPDATE, DELETE
    record_id = db.Column("Record_id", db.Integer, nullable=False)
    changed_at = db.Column("Changed_at", db.DateTime, nullable=False, server_default=db.func.now())
    changed_by = db.Column("Changed_by", db.String(100), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "table_name": self.table_name,
            "action_type": self.action_type,
            "record_id": self.record_id,
            "changed_at": to_utc_z(self.changed_at),
            "changed_by": self.changed_by,
        }
