"""create blood_donations table

Revision ID: 0001
Revises: 
Create Date: 2025-01-10 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "blood_donations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("relation_prefix", sa.String(20), nullable=False),
        sa.Column("mobile", sa.String(10), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("blood_group", sa.String(3), nullable=False),
        sa.Column("last_donation_date", sa.Date(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_blood_donations_created_at", "blood_donations", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_blood_donations_created_at", table_name="blood_donations")
    op.drop_table("blood_donations")
