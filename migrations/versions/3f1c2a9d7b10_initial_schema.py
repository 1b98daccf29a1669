"""initial schema: profiles, seller codes, listings, reports, rate limits

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

from app.database.base import UUIDType


revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", UUIDType(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("whatsapp", sa.String(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"], unique=False)

    op.create_table(
        "admin_profiles",
        sa.Column("id", UUIDType(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("whatsapp", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("deals", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_profiles_id", "admin_profiles", ["id"], unique=False)

    op.create_table(
        "seller_codes",
        sa.Column("id", UUIDType(), nullable=False),
        sa.Column("code_hash", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("issued_to_profile_id", UUIDType(), nullable=True),
        sa.Column("claimed_by_profile_id", UUIDType(), nullable=True),
        sa.Column("claimed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("revoked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["issued_to_profile_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["claimed_by_profile_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_seller_codes_id", "seller_codes", ["id"], unique=False)
    op.create_index("ix_seller_codes_code_hash", "seller_codes", ["code_hash"], unique=True)
    op.create_index("ix_seller_codes_claimed_by_profile_id", "seller_codes", ["claimed_by_profile_id"], unique=False)

    op.create_table(
        "listings",
        sa.Column("id", UUIDType(), nullable=False),
        sa.Column("seller_id", UUIDType(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("country", sa.String(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("price_usd", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["seller_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_listings_id", "listings", ["id"], unique=False)
    op.create_index("ix_listings_seller_id", "listings", ["seller_id"], unique=False)

    op.create_table(
        "reports",
        sa.Column("id", UUIDType(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("target_id", UUIDType(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("from_ip", sa.String(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_id", "reports", ["id"], unique=False)
    op.create_index("ix_reports_target_id", "reports", ["target_id"], unique=False)

    op.create_table(
        "rate_limit_windows",
        sa.Column("key", sa.String(length=512), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("reset_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    op.drop_table("rate_limit_windows")
    op.drop_index("ix_reports_target_id", table_name="reports")
    op.drop_index("ix_reports_id", table_name="reports")
    op.drop_table("reports")
    op.drop_index("ix_listings_seller_id", table_name="listings")
    op.drop_index("ix_listings_id", table_name="listings")
    op.drop_table("listings")
    op.drop_index("ix_seller_codes_claimed_by_profile_id", table_name="seller_codes")
    op.drop_index("ix_seller_codes_code_hash", table_name="seller_codes")
    op.drop_index("ix_seller_codes_id", table_name="seller_codes")
    op.drop_table("seller_codes")
    op.drop_index("ix_admin_profiles_id", table_name="admin_profiles")
    op.drop_table("admin_profiles")
    op.drop_index("ix_profiles_id", table_name="profiles")
    op.drop_table("profiles")
