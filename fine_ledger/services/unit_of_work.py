"""
Unit of work: one database transaction around one core operation.

Services never call commit() or rollback() themselves. They pass
their operation to run_in_transaction(), which commits when the
operation returns and rolls back on every failure, translating
storage errors into the ledger's error taxonomy on the way out.
"""

import logging
from contextlib import contextmanager
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from fine_ledger.config import get_settings
from fine_ledger.exceptions import (
    ConcurrencyConflict,
    FineLedgerError,
    PersistenceError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL SQLSTATEs for serialization failure, deadlock and lock
# not available.
CONFLICT_SQLSTATES = {"40001", "40P01", "55P03"}


def is_lock_contention(exc: OperationalError) -> bool:
    """True when the database refused the write because of another writer."""
    if getattr(exc.orig, "pgcode", None) in CONFLICT_SQLSTATES:
        return True
    return "database is locked" in str(exc.orig)


@contextmanager
def atomic(db: Session):
    """
    Commit the session on success, roll it back on any error.

    Ledger errors propagate unchanged. A stale version or lock
    contention becomes ConcurrencyConflict; any other storage
    failure becomes PersistenceError with a generic message. The
    original exception is logged and chained, never returned to
    the caller.
    """
    try:
        yield db
        db.commit()
    except FineLedgerError:
        db.rollback()
        raise
    except StaleDataError as e:
        db.rollback()
        raise ConcurrencyConflict(
            "The violation was modified by another transaction"
        ) from e
    except OperationalError as e:
        db.rollback()
        if is_lock_contention(e):
            raise ConcurrencyConflict(
                "The violation is locked by another transaction"
            ) from e
        logger.exception("Database operation failed")
        raise PersistenceError("The ledger could not be updated") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database operation failed")
        raise PersistenceError("The ledger could not be updated") from e
    except Exception:
        db.rollback()
        raise


def run_in_transaction(
    db: Session,
    operation: Callable[[], T],
    retries: int | None = None,
) -> T:
    """
    Run operation inside atomic(), re-running it on conflict.

    Every attempt starts from a rolled-back session, so the retry
    re-reads and re-validates everything against fresh data.
    """
    if retries is None:
        retries = get_settings().CONFLICT_RETRIES

    attempt = 0
    while True:
        try:
            with atomic(db):
                return operation()
        except ConcurrencyConflict as e:
            if attempt >= retries:
                logger.warning("Giving up after conflict: %s", e.message)
                raise
            attempt += 1
            logger.warning(
                "Concurrency conflict (%s), retrying %d/%d",
                e.message, attempt, retries,
            )
