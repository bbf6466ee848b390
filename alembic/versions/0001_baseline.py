"""Baseline: leads and their dealer conversations.

Revision ID: 0001
Revises: None
Create Date: 2026-10-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "leads",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("status", sa.String(20), index=True),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100)),
        sa.Column("email", sa.String(255), nullable=False, index=True),
        sa.Column("zip_code", sa.String(10)),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("make", sa.String(50), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("trim", sa.String(100)),
        sa.Column("drivetrain", sa.String(20)),
        sa.Column("color", sa.String(50)),
        sa.Column("interior", sa.String(10)),
        sa.Column("must_haves", sa.JSON()),
        sa.Column("dealbreakers", sa.JSON()),
        sa.Column("target_price", sa.Float()),
        sa.Column("max_price", sa.Float()),
        sa.Column("tolerance_above_target", sa.Float()),
        sa.Column("timeline_description", sa.String(200)),
        sa.Column("deal_type", sa.String(10)),
        sa.Column("lease_terms", sa.JSON()),
        sa.Column("finance_terms", sa.JSON()),
    )

    op.create_table(
        "conversation_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column("lead_id", sa.String(32), sa.ForeignKey("leads.id"), nullable=False),
        sa.Column("sender", sa.String(20)),
        sa.Column("dealer_id", sa.String(100)),
        sa.Column("subject", sa.String(500)),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("decision", sa.String(20)),
        sa.Column("at", sa.DateTime()),
    )
    op.create_index("ix_conversation_lead_dealer", "conversation_entries", ["lead_id", "dealer_id"])


def downgrade() -> None:
    op.drop_index("ix_conversation_lead_dealer", table_name="conversation_entries")
    op.drop_table("conversation_entries")
    op.drop_table("leads")
