"""Error taxonomy shared by the consensus and moderation services.

The HTTP layer maps each class to a status code in ``cash_or_card.main``;
services raise these instead of leaking store-engine exceptions.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

__all__ = [
    "ConsensusError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "translate_integrity_error",
    "validate_payload",
]

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ConsensusError(Exception):
    """Base class for errors surfaced to callers of the service layer."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ConsensusError):
    """Input failed shape or range checks before any write happened."""

    status_code = 400


class NotFoundError(ConsensusError):
    """A referenced fact, restaurant, user or vote does not exist."""

    status_code = 404


class ConflictError(ConsensusError):
    """A concurrent writer won a race; the operation may be retried."""

    status_code = 409


# SQLSTATE classes reported by PostgreSQL drivers.
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def translate_integrity_error(exc: IntegrityError) -> ConsensusError:
    """Map a store constraint violation onto the service error taxonomy.

    Args:
        exc: The IntegrityError raised by SQLAlchemy on flush or commit.

    Returns:
        ConflictError for unique violations, NotFoundError for dangling
        foreign keys and ValidationError for anything else (not-null, check).
    """
    state = _sqlstate(exc)
    text = str(exc.orig).lower()
    if state == _UNIQUE_VIOLATION or "unique constraint" in text or "duplicate key" in text:
        return ConflictError("Resource already exists or was modified concurrently")
    if state == _FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return NotFoundError("Invalid reference to related resource")
    return ValidationError("Required field is missing or out of range")


def validate_payload(schema: type[SchemaT], data: object) -> SchemaT:
    """Validate ``data`` against a Pydantic schema, raising ``ValidationError``.

    Instances of ``schema`` pass through untouched; other models are dumped
    and re-validated so extra or out-of-range fields are still caught.
    """
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(problems) from exc
