"""Transaction runner with bounded retry on serialization conflicts."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session

from cash_or_card.core.errors import ConflictError, translate_integrity_error
from cash_or_card.core.settings import settings

__all__ = ["run_in_transaction", "is_serialization_failure"]

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

# serialization_failure, deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})
_RETRYABLE_MESSAGES = (
    "database is locked",
    "could not serialize",
    "deadlock detected",
)


def is_serialization_failure(exc: DBAPIError) -> bool:
    """Return True if the store aborted the transaction because of a concurrent writer."""
    orig = exc.orig
    state = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if state in _RETRYABLE_SQLSTATES:
        return True
    text = str(orig).lower()
    return any(message in text for message in _RETRYABLE_MESSAGES)


def run_in_transaction(
    db: Session,
    operation: Callable[[Session], ResultT],
    *,
    name: str,
    max_attempts: int | None = None,
) -> ResultT:
    """Run ``operation`` and commit, rolling back fully on any failure.

    Unique-constraint conflicts and serialization failures are retried up to
    ``max_attempts`` times in total; every other error is rolled back and
    propagated. Constraint violations leave as service errors, never as raw
    driver exceptions.

    Args:
        db: Session whose transaction the operation runs in.
        operation: Callable doing the reads and writes; receives ``db``.
        name: Short label used in log lines.
        max_attempts: Override for ``settings.transaction_max_attempts``.

    Returns:
        Whatever ``operation`` returned on the committed attempt.
    """
    attempts = max_attempts or settings.transaction_max_attempts
    attempt = 1
    while True:
        try:
            result = operation(db)
            db.commit()
            return result
        except IntegrityError as exc:
            db.rollback()
            error = translate_integrity_error(exc)
            if not isinstance(error, ConflictError) or attempt >= attempts:
                raise error from exc
            logger.warning("%s hit a constraint conflict (attempt %d/%d)", name, attempt, attempts)
        except OperationalError as exc:
            db.rollback()
            if not is_serialization_failure(exc):
                raise
            if attempt >= attempts:
                raise ConflictError(f"{name} could not complete; please retry") from exc
            logger.warning("%s hit a serialization failure (attempt %d/%d)", name, attempt, attempts)
        except BaseException:
            db.rollback()
            raise
        attempt += 1
