"""Row and key-scoped locking helpers used inside service transactions."""

from __future__ import annotations

import hashlib
from typing import TypeVar

from sqlalchemy import select, text
from sqlalchemy.orm import Session

__all__ = ["lock_row", "lock_slot", "slot_lock_key"]

ModelT = TypeVar("ModelT")


def lock_row(db: Session, model: type[ModelT], row_id: int) -> ModelT | None:
    """Load a row with ``SELECT ... FOR UPDATE`` and refresh any cached copy.

    On SQLite the clause is dropped by the dialect; the ``BEGIN IMMEDIATE``
    transaction already holds the database write lock.
    """
    stmt = (
        select(model)
        .where(model.id == row_id)  # type: ignore[attr-defined]
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalars().first()


def slot_lock_key(namespace: str, restaurant_id: int, slot: str) -> int:
    """Return a stable signed 64-bit key for an advisory lock."""
    digest = hashlib.sha256(f"{namespace}:{restaurant_id}:{slot}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


def lock_slot(db: Session, namespace: str, restaurant_id: int, slot: str) -> None:
    """Serialize writers on a logical key such as (restaurant, payment type).

    PostgreSQL takes a transaction-scoped advisory lock, released on commit or
    rollback. Other dialects rely on their transaction-level write lock.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(
        text("SELECT pg_advisory_xact_lock(:key)"),
        {"key": slot_lock_key(namespace, restaurant_id, slot)},
    )
