"""Baseline migration - commissions and settings tables

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates the commission queue and the singleton intake settings row.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


STATUS_VALUES = ("pending", "approved", "rejected", "paid", "completed")


def upgrade() -> None:
    """Create commission and settings tables."""

    # ==========================================================================
    # Settings (singleton: boolean PK pinned to TRUE)
    # ==========================================================================
    op.create_table(
        "settings",
        sa.Column("id", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
        sa.Column("is_commissions_open", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
        sa.Column("queue_limit", sa.Integer(), server_default=sa.text("200"), nullable=False),
        sa.CheckConstraint("id", name="ck_settings_singleton"),
        sa.PrimaryKeyConstraint("id", name="pk_settings"),
    )

    # ==========================================================================
    # Commissions
    # ==========================================================================
    status_list = ", ".join(f"'{s}'" for s in STATUS_VALUES)
    op.create_table(
        "commissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reference_images", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("final_result_images", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("paid_amount", sa.Integer(), nullable=True),
        sa.Column("payment_reference", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(f"status IN ({status_list})", name="ck_commissions_status_valid"),
        sa.PrimaryKeyConstraint("id", name="pk_commissions"),
    )
    op.create_index(
        "idx_commissions_status_created", "commissions", ["status", "created_at"]
    )

    # Seed the singleton row so the gate exists from day one
    op.execute("INSERT INTO settings (id, is_commissions_open, queue_limit) VALUES (TRUE, TRUE, 200)")


def downgrade() -> None:
    op.drop_index("idx_commissions_status_created", table_name="commissions")
    op.drop_table("commissions")
    op.drop_table("settings")
