"""Weekly timetable entries

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 16:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_0002"
down_revision: Union[str, None] = "20261018_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


course_level_enum = sa.Enum(
    "Beginner",
    "Intermediate",
    "Advanced",
    "TOPIK",
    name="course_level_enum",
    native_enum=False,
    create_constraint=True,
)
day_of_week_enum = sa.Enum(
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
    name="day_of_week_enum",
    native_enum=False,
    create_constraint=True,
)
timetable_status_enum = sa.Enum(
    "active",
    "cancelled",
    "completed",
    name="timetable_status_enum",
    native_enum=False,
    create_constraint=True,
)


def upgrade() -> None:
    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("course_name", sa.String(length=255), nullable=False),
        sa.Column("level", course_level_enum, nullable=False),
        sa.Column("day_of_week", day_of_week_enum, nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("teacher_name", sa.String(length=255), nullable=False),
        sa.Column("status", timetable_status_enum, nullable=False),
        sa.CheckConstraint(
            "end_time > start_time",
            name=op.f("ck_timetable_entries_end_after_start"),
        ),
    )
    op.create_index("ix_timetable_entries_status", "timetable_entries", ["status"], unique=False)
    op.create_index(
        "ix_timetable_entries_day_of_week_start_time",
        "timetable_entries",
        ["day_of_week", "start_time"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_timetable_entries_day_of_week_start_time", table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_status", table_name="timetable_entries")
    op.drop_table("timetable_entries")
