"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all initial tables for the Room platform:
- User profiles and push device tokens
- Bookings (lifecycle and payment status)
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "user_profiles",
        sa.Column("uid", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="customer"),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(30)),
        sa.Column("bio", sa.Text, server_default=""),
        sa.Column("location", sa.String(255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "device_tokens",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_uid",
            sa.String(128),
            sa.ForeignKey("user_profiles.uid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token", sa.String(512), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_uid", "token", name="uq_device_tokens_user_token"),
    )
    op.create_index("ix_device_tokens_user_uid", "device_tokens", ["user_uid"])

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_uid", sa.String(128), nullable=False),
        sa.Column("stylist_uid", sa.String(128), nullable=False),
        sa.Column("assigned_staff_id", sa.String(128)),
        sa.Column("staff_name", sa.String(200)),
        sa.Column("service_id", sa.String(50), nullable=False),
        sa.Column("service_name", sa.String(200)),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column("client_notes", sa.Text, server_default=""),
        sa.Column("date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("client_name", sa.String(200)),
        sa.Column("client_phone", sa.String(30)),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20)),
        sa.Column("payment_intent_id", sa.String(255)),
        sa.Column("payment_failure_reason", sa.Text),
        sa.Column("accepted_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("refunded_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_bookings_client_uid", "bookings", ["client_uid"])
    op.create_index("ix_bookings_stylist_uid", "bookings", ["stylist_uid"])
    op.create_index("ix_bookings_assigned_staff_id", "bookings", ["assigned_staff_id"])
    op.create_index("ix_bookings_date_time", "bookings", ["date_time"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_payment_intent_id", "bookings", ["payment_intent_id"])


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("bookings")
    op.drop_table("device_tokens")
    op.drop_table("user_profiles")
