# Overview: Service-layer operations for the audit log; append path, read path, and the flush guard.

from __future__ import annotations

from contextlib import contextmanager

from flask import current_app, g, has_request_context
from sqlalchemy import event
from sqlalchemy.orm import Session

from ..errors import AuditBypassError
from ..extensions import db
from ..models import AuditLog, GameItem

"""
Audit Log Invariants (authoritative)

- Exactly one Audit_log row per committed Game_item INSERT / UPDATE / DELETE.
- The row is flushed in the same transaction as the mutation it records, so
  a failed audit append fails the mutation.
- Record_id is the id of the row as it existed at the logged action (the old
  id for DELETE).
- Rows are never updated or deleted by application code.
"""

AUDITED_TABLE = GameItem.__tablename__
ACTION_TYPES = ("INSERT", "UPDATE", "DELETE")
CHANGED_BY_MAX = AuditLog.__table__.c.Changed_by.type.length

# session.info key set while services.catalog_service holds the gateway
GATEWAY_KEY = "eightbit.catalog_gateway"


def current_principal() -> str:
    """Acting principal: the authenticated caller, else the configured default."""
    if has_request_context():
        principal = g.get("principal")
        if principal:
            return principal[:CHANGED_BY_MAX]
    return current_app.config.get("DEFAULT_PRINCIPAL", "system@localhost")[:CHANGED_BY_MAX]


@contextmanager
def gateway_scope(session):
    """Mark the session as inside the audited catalog gateway."""
    session.info[GATEWAY_KEY] = session.info.get(GATEWAY_KEY, 0) + 1
    try:
        yield session
    finally:
        session.info[GATEWAY_KEY] -= 1


def append_audit_entry(
    *,
    table_name: str,
    action_type: str,
    record_id: int,
    changed_by: str,
) -> AuditLog:
    """
    Append one audit row to the current transaction.

    - No commit here; the caller's transaction owns it.
    - Changed_at comes from the database default.
    """
    if action_type not in ACTION_TYPES:
        raise ValueError(f"Unknown audit action: {action_type}")
    entry = AuditLog(
        table_name=table_name,
        action_type=action_type,
        record_id=record_id,
        changed_by=changed_by,
    )
    db.session.add(entry)
    db.session.flush()
    return entry


def list_audit_entries(
    *,
    table_name: str | None = None,
    record_id: int | None = None,
    action_type: str | None = None,
    limit: int | None = 100,
) -> list[dict]:
    """
    Matching entries in log order. With a limit, the most recent `limit`
    entries are returned, still oldest first.
    """
    query = db.session.query(AuditLog)
    if table_name is not None:
        query = query.filter(AuditLog.table_name == table_name)
    if record_id is not None:
        query = query.filter(AuditLog.record_id == record_id)
    if action_type is not None:
        query = query.filter(AuditLog.action_type == action_type.upper())
    if limit is None:
        entries = query.order_by(AuditLog.id.asc()).all()
    else:
        entries = query.order_by(AuditLog.id.desc()).limit(limit).all()
        entries.reverse()
    return [entry.to_dict() for entry in entries]


@event.listens_for(Session, "before_flush")
def _guard_audited_tables(session, flush_context, instances):
    in_gateway = session.info.get(GATEWAY_KEY, 0) > 0

    for obj in session.deleted:
        if isinstance(obj, AuditLog):
            raise AuditBypassError("Audit_log rows are append-only")
        if isinstance(obj, GameItem) and not in_gateway:
            raise AuditBypassError("Game_item deletes must go through the catalog service")

    for obj in session.dirty:
        if not session.is_modified(obj, include_collections=False):
            continue
        if isinstance(obj, AuditLog):
            raise AuditBypassError("Audit_log rows are append-only")
        if isinstance(obj, GameItem) and not in_gateway:
            raise AuditBypassError("Game_item updates must go through the catalog service")

    if not in_gateway:
        for obj in session.new:
            if isinstance(obj, GameItem):
                raise AuditBypassError("Game_item inserts must go through the catalog service")


@event.listens_for(Session, "do_orm_execute")
def _guard_audited_statements(orm_execute_state):
    # bulk INSERT/UPDATE/DELETE never reaches before_flush
    if not (orm_execute_state.is_insert or orm_execute_state.is_update or orm_execute_state.is_delete):
        return
    table = getattr(orm_execute_state.statement, "table", None)
    table_name = getattr(table, "name", None)
    in_gateway = orm_execute_state.session.info.get(GATEWAY_KEY, 0) > 0

    if table_name == AuditLog.__tablename__:
        if not orm_execute_state.is_insert:
            raise AuditBypassError("Audit_log rows are append-only")
        if not in_gateway:
            raise AuditBypassError("Audit_log rows are written only by the catalog service")
    if table_name == AUDITED_TABLE and not in_gateway:
        raise AuditBypassError("Game_item writes must go through the catalog service")
