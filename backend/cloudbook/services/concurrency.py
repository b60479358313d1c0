# Overview: Row locking and all-or-nothing transaction helpers shared by the services.

from __future__ import annotations

from contextlib import contextmanager

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for check-then-write operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE (it serializes writers on
    its own), other DBs will honor it.
    """
    return query.with_for_update()


@contextmanager
def atomic():
    """
    Commit the session when the block finishes, roll back everything it
    did if the block raises. The exception is re-raised.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
