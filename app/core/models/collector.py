"""Staff members who can record payments. Fee records point here by (role, id), not by foreign key."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, String, Uuid

from app.db.session import Base


class Collector(Base):
    __tablename__ = "collectors"
    __table_args__ = (
        CheckConstraint("role IN ('teacher','admin')", name="chk_collector_role"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False)  # teacher | admin
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
