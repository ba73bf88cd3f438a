"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """User roles."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    COURSE_MANAGER = "course_manager"
    SUPPORT = "support"
    VIEWER = "viewer"
    TEACHER = "teacher"
    STUDENT = "student"


class UserStatusEnum(StrEnum):
    """User account status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class CourseLevelEnum(StrEnum):
    """Course level."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    TOPIK = "TOPIK"


class ScheduleStatusEnum(StrEnum):
    """Schedule occurrence status."""

    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class EnrollmentStatusEnum(StrEnum):
    """Enrollment lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatusEnum(StrEnum):
    """Enrollment payment status."""

    UNPAID = "unpaid"
    PAID = "paid"
    REFUNDED = "refunded"


class EnrollmentSourceEnum(StrEnum):
    """Channel an enrollment came from."""

    ADMIN = "admin"
    WEBSITE = "website"
    FORM = "form"
    REFERRAL = "referral"
    OFFLINE = "offline"


class DayOfWeekEnum(StrEnum):
    """Weekday of a recurring timetable slot, Monday first."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class TimetableStatusEnum(StrEnum):
    """Published timetable entry status."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
