"""Timestamp helper shared by models and services."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return an aware datetime in UTC; stored timestamps are never naive."""
    return datetime.now(UTC)
