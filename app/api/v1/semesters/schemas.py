from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SemesterCreate(BaseModel):
    """Create semester. name is the period label written on fee records and must be unique per school."""

    name: str = Field(..., min_length=1, max_length=50, description="e.g. 2025 Spring")
    start_date: date
    end_date: date = Field(..., description="Must be after start_date")
    is_current: bool = Field(False, description="If true, every other semester of the school stops being current")


class SemesterResponse(BaseModel):
    id: UUID
    school_id: UUID
    name: str
    start_date: date
    end_date: date
    is_current: bool
    created_at: datetime

    class Config:
        from_attributes = True
