"""initial schema

Revision ID: 5c1e0a7b9d42
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0a7b9d42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _fact_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("restaurant_id", sa.Integer(), nullable=False),
        sa.Column("submitted_by", sa.Integer(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("verified_by", sa.Integer(), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("confidence_score", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["restaurant_id"], ["restaurants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["submitted_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    ]


def _vote_columns(vote_table: str, fact_column: str, fact_table: str) -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(fact_column, sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.String(length=10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("vote_type IN ('upvote', 'downvote')", name=f"ck_{vote_table}_type"),
        sa.ForeignKeyConstraint([fact_column], [f"{fact_table}.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(fact_column, "user_id", name=f"uq_{vote_table}_user"),
    ]


def upgrade() -> None:
    """Create users, restaurants, facts, vote ledgers and ratings."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("role IN ('guest', 'user', 'admin')", name="ck_users_role"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("province", sa.String(length=50), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("submitted_by", sa.Integer(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("verified_by", sa.Integer(), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["submitted_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "payment_methods",
        *_fact_columns(),
        sa.Column("payment_type", sa.String(length=20), nullable=False),
        sa.Column("is_accepted", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "payment_type IN ('cash', 'debit', 'visa', 'mastercard', 'amex', 'discover', 'other')",
            name="ck_payment_methods_payment_type",
        ),
        sa.CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_payment_methods_tally"),
    )
    op.create_index("ix_payment_methods_restaurant_id", "payment_methods", ["restaurant_id"])
    op.create_index("ix_payment_methods_slot", "payment_methods", ["restaurant_id", "payment_type"])
    op.create_index(
        "uq_payment_methods_verified_slot",
        "payment_methods",
        ["restaurant_id", "payment_type"],
        unique=True,
        sqlite_where=sa.text("is_verified = 1"),
        postgresql_where=sa.text("is_verified"),
    )

    op.create_table(
        "cash_discounts",
        *_fact_columns(),
        sa.Column("discount_percentage", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_cash_discounts_percentage",
        ),
        sa.CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_cash_discounts_tally"),
    )
    op.create_index("ix_cash_discounts_restaurant_id", "cash_discounts", ["restaurant_id"])

    op.create_table(
        "payment_method_votes",
        *_vote_columns("payment_method_votes", "payment_method_id", "payment_methods"),
    )
    op.create_index(
        "ix_payment_method_votes_payment_method_id",
        "payment_method_votes",
        ["payment_method_id"],
    )
    op.create_table(
        "cash_discount_votes",
        *_vote_columns("cash_discount_votes", "cash_discount_id", "cash_discounts"),
    )
    op.create_index(
        "ix_cash_discount_votes_cash_discount_id",
        "cash_discount_votes",
        ["cash_discount_id"],
    )

    op.create_table(
        "restaurant_ratings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("restaurant_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_restaurant_ratings_range"),
        sa.ForeignKeyConstraint(["restaurant_id"], ["restaurants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("restaurant_id", "user_id", name="uq_restaurant_ratings_user"),
    )
    op.create_index("ix_restaurant_ratings_restaurant_id", "restaurant_ratings", ["restaurant_id"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("restaurant_ratings")
    op.drop_table("cash_discount_votes")
    op.drop_table("payment_method_votes")
    op.drop_table("cash_discounts")
    op.drop_table("payment_methods")
    op.drop_table("restaurants")
    op.drop_table("users")
