# Overview: Error kinds surfaced by the data-access services.

"""
Store error model.

Every service operation either commits its whole effect or rolls back and raises
one of these. Callers tell them apart by type:

- ConstraintViolation: a uniqueness/check rule of the store was violated.
- ReferentialIntegrityError: a dependent row points at a missing parent, or a
  parent that is still referenced was about to be deleted. Subclass of
  ConstraintViolation because foreign keys are one kind of constraint.
- CreationError: catalog create failed; wraps the underlying failure.
- PreconditionFailedError: the row no longer matches the caller's expected
  state. A business outcome (refresh and retry), not a system fault.
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError


class StoreError(Exception):
    """Base class for data-access failures."""


class ConstraintViolation(StoreError):
    """A uniqueness or check constraint rejected the mutation."""


class ReferentialIntegrityError(ConstraintViolation):
    """A foreign-key reference is missing, or a referenced parent was deleted."""


class CreationError(StoreError):
    """Creating a catalog record failed; the transaction was rolled back."""


class PreconditionFailedError(StoreError):
    """No row matched the expected current state."""


class AuditBypassError(StoreError):
    """A catalog mutation skipped the audited gateway, or an audit row was altered."""


class NotFoundError(StoreError):
    """Lookup by primary key found nothing."""


def translate_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """
    Map an engine IntegrityError onto the store error kinds.

    SQLite reports "FOREIGN KEY constraint failed"; PostgreSQL/MySQL mention
    "foreign key" in the message as well.
    """
    message = str(exc.orig) if exc.orig is not None else str(exc)
    if "foreign key" in message.lower():
        return ReferentialIntegrityError(message)
    return ConstraintViolation(message)
