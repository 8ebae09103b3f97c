"""Fee type catalog schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class ClassPriceItem(BaseModel):
    class_id: UUID
    amount: Optional[Decimal] = Field(None, ge=0, description="Omitted or zero means the base amount")


class FeeTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    amount: Decimal = Field(Decimal("0"), ge=0)
    due_date: Optional[date] = None
    is_active: bool = True
    is_class_specific: bool = False
    applicable_classes: List[UUID] = Field(default_factory=list)
    class_prices: List[ClassPriceItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_class_scope(self) -> "FeeTypeCreate":
        if self.is_class_specific and not self.applicable_classes:
            raise ValueError("A class-specific fee needs at least one applicable class")
        stray = {p.class_id for p in self.class_prices} - set(self.applicable_classes)
        if stray:
            raise ValueError("class_prices may only reference applicable classes")
        return self


class FeeTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    due_date: Optional[date] = None
    is_class_specific: Optional[bool] = None
    applicable_classes: Optional[List[UUID]] = None
    class_prices: Optional[List[ClassPriceItem]] = None


class ClassPriceResponse(BaseModel):
    class_id: UUID
    amount: Decimal

    class Config:
        from_attributes = True


class FeeTypeResponse(BaseModel):
    id: UUID
    school_id: UUID
    name: str
    description: Optional[str] = None
    amount: Decimal
    due_date: Optional[date] = None
    is_active: bool
    is_class_specific: bool
    applicable_classes: List[UUID]
    class_prices: List[ClassPriceResponse]
    created_at: datetime
    updated_at: datetime
