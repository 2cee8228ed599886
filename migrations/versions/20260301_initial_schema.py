"""initial schema: users, classes, events, enrollments, payments, parent links, curriculum, notifications

Revision ID: 20260301_initial_schema
Revises:
Create Date: 2026-03-01 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20260301_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(160), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("bio", sa.String(2000), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "classes",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("current_count", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(160), nullable=True),
        sa.Column("schedule", sa.String(200), nullable=True),
        sa.Column("instructor_id", sa.Integer(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_classes"),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], name="fk_classes_instructor_id_users"),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("current_count", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(160), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_events"),
    )

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_enrollments_user_id_users"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], name="fk_enrollments_class_id_classes"),
    )
    op.create_index("ix_enrollments_user_id", "enrollments", ["user_id"])
    op.create_index("ix_enrollments_class_id", "enrollments", ["class_id"])

    op.create_table(
        "event_registrations",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("registration_type", sa.String(20), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_event_registrations"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_event_registrations_user_id_users"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], name="fk_event_registrations_event_id_events"),
    )
    op.create_index("ix_event_registrations_user_id", "event_registrations", ["user_id"])
    op.create_index("ix_event_registrations_event_id", "event_registrations", ["event_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("enrollment_id", sa.Integer(), nullable=True),
        sa.Column("event_registration_id", sa.Integer(), nullable=True),
        sa.Column("checkout_session_id", sa.String(255), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_payments_user_id_users"),
        sa.ForeignKeyConstraint(["enrollment_id"], ["enrollments.id"], name="fk_payments_enrollment_id_enrollments"),
        sa.ForeignKeyConstraint(["event_registration_id"], ["event_registrations.id"],
                                name="fk_payments_event_registration_id_event_registrations"),
        sa.UniqueConstraint("enrollment_id", name="uq_payments_enrollment_id"),
        sa.UniqueConstraint("event_registration_id", name="uq_payments_event_registration_id"),
    )
    op.create_index("ix_payments_checkout_session_id", "payments", ["checkout_session_id"])

    op.create_table(
        "parent_children",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("parent_id", sa.Integer(), nullable=False),
        sa.Column("child_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_parent_children"),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"], name="fk_parent_children_parent_id_users"),
        sa.ForeignKeyConstraint(["child_id"], ["users.id"], name="fk_parent_children_child_id_users"),
        sa.UniqueConstraint("parent_id", "child_id", name="uq_parent_child_pair"),
    )
    op.create_index("ix_parent_children_parent_id", "parent_children", ["parent_id"])
    op.create_index("ix_parent_children_child_id", "parent_children", ["child_id"])

    op.create_table(
        "curriculum_items",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("file_url", sa.String(255), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_curriculum_items"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], name="fk_curriculum_items_class_id_classes"),
    )
    op.create_index("ix_curriculum_items_class_id", "curriculum_items", ["class_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("type", sa.String(40), nullable=False),
        sa.Column("content", sa.String(500), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=True),
        sa.Column("receiver_id", sa.Integer(), nullable=False),
        sa.Column("related_id", sa.Integer(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], name="fk_notifications_sender_id_users"),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"], name="fk_notifications_receiver_id_users"),
    )
    op.create_index("ix_notifications_receiver_id", "notifications", ["receiver_id"])


def downgrade() -> None:
    for table in ("notifications", "curriculum_items", "parent_children", "payments",
                  "event_registrations", "enrollments", "events", "classes", "users"):
        op.drop_table(table)
