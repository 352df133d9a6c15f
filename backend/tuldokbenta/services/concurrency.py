# Overview: Transaction helpers for sale writes; row locking and retry on transient lock errors.

from __future__ import annotations

import time
from typing import Callable, TypeVar

from flask import current_app
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db

T = TypeVar("T")

# Errors a second attempt can fix (SQLite "database is locked", deadlocks)
TRANSIENT_ERRORS = (OperationalError, StaleDataError)


def lock_for_update(query):
    """
    SELECT ... FOR UPDATE on the sale row being moved or edited.

    NOTE: a no-op on SQLite, which serializes writers anyway.
    """
    return query.with_for_update()


def run_with_retry(
    func: Callable[[], T],
    *,
    label: str = "transaction",
    attempts: int = 3,
    backoff_base: float = 0.1,
) -> T:
    """
    Run one unit of work, committing inside `func`.

    The session is rolled back after every failure. Transient lock errors
    are retried with exponential backoff; anything else (including the
    domain errors raised by services) propagates on the first attempt.
    """
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except TRANSIENT_ERRORS:
            db.session.rollback()
            if attempt == attempts:
                current_app.logger.error("%s failed after %s attempts", label, attempts)
                raise
            current_app.logger.warning("%s hit a lock, retrying (%s/%s)", label, attempt, attempts)
            time.sleep(backoff_base * (2 ** (attempt - 1)))
        except Exception:
            db.session.rollback()
            raise
    raise RuntimeError("attempts must be >= 1")
