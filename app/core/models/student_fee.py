"""Student fee record: one row per payment event. Never updated or deleted; corrections are new rows."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String, Uuid

from app.core.enums import FeeRecordStatus
from app.db.session import Base


class StudentFee(Base):
    """
    Payment event against a fee type for a student in a period.
    amount is the resolved full amount at the time of payment; paid is what this event paid.
    Successive partial payments are separate rows and must be summed.
    """

    __tablename__ = "student_fees"
    __table_args__ = (
        CheckConstraint("paid <= amount", name="chk_student_fee_paid_le_amount"),
        CheckConstraint(
            "status IN ('unpaid','partial','paid')",
            name="chk_student_fee_status",
        ),
        CheckConstraint(
            "collector_type IN ('teacher','admin')",
            name="chk_student_fee_collector_type",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="RESTRICT"), nullable=False, index=True)
    # No FK: a fee type may later vanish from the catalog; readers fall back to an "Unknown" label
    fee_type_id = Column(Uuid, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    paid = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=FeeRecordStatus.unpaid.value)
    period = Column(String(50), nullable=False, index=True)
    # Denormalised collector reference: teachers and admins live in one directory keyed by role + id
    collector_type = Column(String(20), nullable=False)
    collector_id = Column(Uuid, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
