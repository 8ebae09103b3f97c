import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, UniqueConstraint, Uuid

from app.db.session import Base


class SchoolClass(Base):
    """Class (e.g. Basic 4A) per school. Managed by admin CRUD; read-only for the fee ledger."""

    __tablename__ = "classes"
    __table_args__ = (UniqueConstraint("school_id", "name", name="uq_class_school_name"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    grade = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
