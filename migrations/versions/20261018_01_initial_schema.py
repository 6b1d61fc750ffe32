"""Initial schema for shareholder applications and user accounts."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20261018_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None

_ENUMS: dict[str, tuple[str, ...]] = {
    "share_class": ("common", "preferred", "premium"),
    "payment_method": ("wire", "check", "ach"),
    "income_band": ("under50k", "50k-100k", "100k-250k", "250k-500k", "over500k"),
    "industry_experience": ("none", "limited", "moderate", "extensive"),
    "investment_objective": ("income", "growth", "balanced", "speculation"),
    "risk_tolerance": ("conservative", "moderate", "aggressive"),
    "time_horizon": ("short", "medium", "long"),
    "application_status": ("pending", "under_review", "approved", "rejected"),
}


def _enum(name: str) -> sa.Enum:
    return sa.Enum(*_ENUMS[name], name=name)


def _drop_enum(name: str) -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute(sa.text(f"DROP TYPE IF EXISTS {name}"))


def upgrade() -> None:  # noqa: D401
    """Create the users and shareholder_applications tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "shareholder_applications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("ssn", sa.String(length=11), nullable=False),
        sa.Column("street_address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("zip_code", sa.String(length=10), nullable=False),
        sa.Column("phone_number", sa.String(length=14), nullable=False),
        sa.Column("email_address", sa.String(length=320), nullable=False),
        sa.Column("investment_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("share_class", _enum("share_class"), nullable=False),
        sa.Column("payment_method", _enum("payment_method"), nullable=False),
        sa.Column("expected_income", _enum("income_band")),
        sa.Column("industry_experience", _enum("industry_experience"), nullable=False),
        sa.Column("business_background", sa.JSON()),
        sa.Column("investment_objective", _enum("investment_objective"), nullable=False),
        sa.Column("risk_tolerance", _enum("risk_tolerance"), nullable=False),
        sa.Column("time_horizon", _enum("time_horizon"), nullable=False),
        sa.Column("acknowledgments", sa.JSON(), nullable=False),
        sa.Column("electronic_signature", sa.String(length=255), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("status", _enum("application_status"), nullable=False, server_default="pending"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:  # noqa: D401
    """Drop tables and enum types."""

    op.drop_table("shareholder_applications")
    op.drop_table("users")
    for name in _ENUMS:
        _drop_enum(name)
