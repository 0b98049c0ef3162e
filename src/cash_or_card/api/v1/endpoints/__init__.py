# src/cash_or_card/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .cash_discounts import router as cash_discounts_router
from .payment_methods import router as payment_methods_router
from .ratings import router as ratings_router

__all__ = [
    "admin_router",
    "cash_discounts_router",
    "payment_methods_router",
    "ratings_router",
]
