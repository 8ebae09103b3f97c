"""Fee type catalog (Tuition, Books, PTA levy) with optional per-class price overrides. School-scoped."""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db.session import Base


class FeeType(Base):
    """
    Fee definition. amount is the nominal (list) price.
    When is_class_specific is true, only classes in applicable_classes owe this fee,
    at their fee_class_pricing amount if one exists.
    """

    __tablename__ = "fee_types"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="chk_fee_type_amount"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_class_specific = Column(Boolean, nullable=False, default=False)
    # Class ids as strings; null unless is_class_specific
    applicable_classes = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    class_pricing = relationship(
        "FeeClassPricing",
        back_populates="fee_type",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class FeeClassPricing(Base):
    __tablename__ = "fee_class_pricing"
    __table_args__ = (
        UniqueConstraint("fee_type_id", "class_id", name="uq_fee_class_pricing_fee_class"),
        CheckConstraint("amount >= 0", name="chk_fee_class_pricing_amount"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    fee_type_id = Column(Uuid, ForeignKey("fee_types.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    fee_type = relationship("FeeType", back_populates="class_pricing")
