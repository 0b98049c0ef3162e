# src/cash_or_card/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    cash_discounts_router,
    payment_methods_router,
    ratings_router,
)

__all__ = [
    "admin_router",
    "cash_discounts_router",
    "payment_methods_router",
    "ratings_router",
]
