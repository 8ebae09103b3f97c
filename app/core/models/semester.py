import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, String, UniqueConstraint, Uuid

from app.db.session import Base


class Semester(Base):
    """
    Academic period per school. name is the period label stored on fee records (e.g. "2025 Spring").
    Only one per school can be is_current = true.
    """

    __tablename__ = "semesters"
    __table_args__ = (UniqueConstraint("school_id", "name", name="uq_semester_school_name"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(50), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_current = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
