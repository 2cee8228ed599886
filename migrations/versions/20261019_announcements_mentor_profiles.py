"""class announcements and mentor profiles

Revision ID: 20261019_announcements_mentor_profiles
Revises: 20260301_initial_schema
Create Date: 2026-10-19 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_announcements_mentor_profiles"
down_revision: Union[str, Sequence[str], None] = "20260301_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "class_announcements",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_class_announcements"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], name="fk_class_announcements_class_id_classes"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_class_announcements_user_id_users"),
    )
    op.create_index("ix_class_announcements_class_id", "class_announcements", ["class_id"])

    op.create_table(
        "mentor_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("specialization", sa.String(200), nullable=False),
        sa.Column("experience", sa.Integer(), nullable=False),
        sa.Column("education", sa.String(500), nullable=True),
        sa.Column("certifications", sa.String(500), nullable=True),
        sa.Column("availability", sa.String(200), nullable=True),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_mentor_profiles"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_mentor_profiles_user_id_users"),
        sa.UniqueConstraint("user_id", name="uq_mentor_profiles_user_id"),
    )


def downgrade() -> None:
    op.drop_table("mentor_profiles")
    op.drop_index("ix_class_announcements_class_id", table_name="class_announcements")
    op.drop_table("class_announcements")
