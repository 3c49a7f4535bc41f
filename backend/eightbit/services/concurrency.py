# Overview: Transaction scope and row locking shared by the service layer.

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from ..errors import translate_integrity_error
from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE (its write transaction is
    database-wide), but other DBs will honor it.
    """
    return query.with_for_update()


@contextmanager
def atomic():
    """
    One unit of work on the current session.

    Commits when the block exits cleanly. Any exception rolls the whole
    session back before propagating; IntegrityError is re-raised as
    ConstraintViolation / ReferentialIntegrityError.

    Not reentrant: the inner block would commit the outer one's work.
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise translate_integrity_error(exc) from exc
    except Exception:
        db.session.rollback()
        raise
