from app.core.models.school_class import SchoolClass
from app.core.models.student import Student
from app.core.models.collector import Collector
from app.core.models.semester import Semester
from app.core.models.fee_type import FeeClassPricing, FeeType
from app.core.models.student_fee import StudentFee

__all__ = [
    "SchoolClass",
    "Student",
    "Collector",
    "Semester",
    "FeeType",
    "FeeClassPricing",
    "StudentFee",
]
