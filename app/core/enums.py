from enum import Enum


class FeeRecordStatus(str, Enum):
    unpaid = "unpaid"
    partial = "partial"
    paid = "paid"


class StudentPaymentStatus(str, Enum):
    """Aggregate status of a student across all fee types of a period."""

    none = "none"
    partial = "partial"
    full = "full"


class CollectorRole(str, Enum):
    TEACHER = "teacher"
    ADMIN = "admin"


class AmountSource(str, Enum):
    FLAT = "flat"
    CLASS_OVERRIDE = "class_override"
    NOT_APPLICABLE = "not_applicable"
