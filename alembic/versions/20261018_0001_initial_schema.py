"""Initial schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum(
    "super_admin",
    "admin",
    "course_manager",
    "support",
    "viewer",
    "teacher",
    "student",
    name="role_enum",
    native_enum=False,
    create_constraint=True,
)
user_status_enum = sa.Enum(
    "active",
    "inactive",
    name="user_status_enum",
    native_enum=False,
    create_constraint=True,
)
course_level_enum = sa.Enum(
    "Beginner",
    "Intermediate",
    "Advanced",
    "TOPIK",
    name="course_level_enum",
    native_enum=False,
    create_constraint=True,
)
schedule_status_enum = sa.Enum(
    "scheduled",
    "cancelled",
    "completed",
    name="schedule_status_enum",
    native_enum=False,
    create_constraint=True,
)
enrollment_status_enum = sa.Enum(
    "pending",
    "approved",
    "active",
    "completed",
    "cancelled",
    name="enrollment_status_enum",
    native_enum=False,
    create_constraint=True,
)
payment_status_enum = sa.Enum(
    "unpaid",
    "paid",
    "refunded",
    name="payment_status_enum",
    native_enum=False,
    create_constraint=True,
)
enrollment_source_enum = sa.Enum(
    "admin",
    "website",
    "form",
    "referral",
    "offline",
    name="enrollment_source_enum",
    native_enum=False,
    create_constraint=True,
)


def _id_col() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "courses",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("level", course_level_enum, nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.CheckConstraint("capacity >= 0", name=op.f("ck_courses_capacity_non_negative")),
        sa.CheckConstraint("price >= 0", name=op.f("ck_courses_price_non_negative")),
        sa.UniqueConstraint("slug", name="uq_courses_slug"),
    )
    op.create_index("ix_courses_slug", "courses", ["slug"], unique=False)
    op.create_index("ix_courses_level", "courses", ["level"], unique=False)

    op.create_table(
        "schedules",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("teacher_id", sa.Integer(), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("status", schedule_status_enum, nullable=False),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            name="fk_schedules_course_id_courses",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["teacher_id"],
            ["users.id"],
            name="fk_schedules_teacher_id_users",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint("end_time > start_time", name=op.f("ck_schedules_end_after_start")),
        sa.CheckConstraint(
            "capacity IS NULL OR capacity >= 0",
            name=op.f("ck_schedules_capacity_non_negative"),
        ),
    )
    op.create_index("ix_schedules_course_id", "schedules", ["course_id"], unique=False)
    op.create_index("ix_schedules_teacher_id", "schedules", ["teacher_id"], unique=False)
    op.create_index("ix_schedules_start_time", "schedules", ["start_time"], unique=False)
    op.create_index("ix_schedules_status", "schedules", ["status"], unique=False)

    op.create_table(
        "enrollments",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("schedule_id", sa.Integer(), nullable=True),
        sa.Column("status", enrollment_status_enum, nullable=False),
        sa.Column("payment_status", payment_status_enum, nullable=False),
        sa.Column("source", enrollment_source_enum, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_enrollments_user_id_users",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            name="fk_enrollments_course_id_courses",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["schedule_id"],
            ["schedules.id"],
            name="fk_enrollments_schedule_id_schedules",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_enrollments_user_id", "enrollments", ["user_id"], unique=False)
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"], unique=False)
    op.create_index("ix_enrollments_status", "enrollments", ["status"], unique=False)
    op.create_index("ix_enrollments_payment_status", "enrollments", ["payment_status"], unique=False)
    op.create_index(
        "ix_enrollments_schedule_id_status",
        "enrollments",
        ["schedule_id", "status"],
        unique=False,
    )
    op.create_index(
        "ix_enrollments_enrolled_at_id",
        "enrollments",
        ["enrolled_at", "id"],
        unique=False,
    )

    op.create_table(
        "gallery_items",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("image_url", sa.String(length=1024), nullable=False),
        sa.Column("caption", sa.String(length=500), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.CheckConstraint("sort_order >= 1", name=op.f("ck_gallery_items_sort_order_positive")),
        sa.UniqueConstraint(
            "sort_order",
            name="uq_gallery_items_sort_order",
            deferrable=True,
            initially="DEFERRED",
        ),
    )

    op.create_table(
        "audit_logs",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("action", sa.String(length=128), nullable=False),
        sa.Column("entity_type", sa.String(length=128), nullable=False),
        sa.Column("entity_id", sa.String(length=128), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    )
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_table("gallery_items")

    op.drop_index("ix_enrollments_enrolled_at_id", table_name="enrollments")
    op.drop_index("ix_enrollments_schedule_id_status", table_name="enrollments")
    op.drop_index("ix_enrollments_payment_status", table_name="enrollments")
    op.drop_index("ix_enrollments_status", table_name="enrollments")
    op.drop_index("ix_enrollments_course_id", table_name="enrollments")
    op.drop_index("ix_enrollments_user_id", table_name="enrollments")
    op.drop_table("enrollments")

    op.drop_index("ix_schedules_status", table_name="schedules")
    op.drop_index("ix_schedules_start_time", table_name="schedules")
    op.drop_index("ix_schedules_teacher_id", table_name="schedules")
    op.drop_index("ix_schedules_course_id", table_name="schedules")
    op.drop_table("schedules")

    op.drop_index("ix_courses_level", table_name="courses")
    op.drop_index("ix_courses_slug", table_name="courses")
    op.drop_table("courses")

    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
