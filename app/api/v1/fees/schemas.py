"""Fees schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import CollectorRole, FeeRecordStatus, StudentPaymentStatus


# --- Payment ---
class PaymentCreate(BaseModel):
    student_id: UUID
    fee_type_id: UUID
    # Range is checked against the resolved amount by the ledger, not here
    amount: Decimal = Field(..., decimal_places=2)
    period: Optional[str] = Field(None, max_length=50, description="Defaults to the current semester")
    collector_type: CollectorRole
    collector_id: UUID


class FeeRecordResponse(BaseModel):
    id: UUID
    school_id: UUID
    student_id: UUID
    fee_type_id: UUID
    amount: Decimal
    paid: Decimal
    due_date: Optional[date] = None
    status: FeeRecordStatus
    period: str
    collector_type: CollectorRole
    collector_id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


# --- Student ---
class StudentFeeStatusResponse(BaseModel):
    student_id: UUID
    period: str
    status: StudentPaymentStatus


class FeeGroupResponse(BaseModel):
    name: str
    fee_type_id: Optional[UUID] = None
    amount: Decimal
    paid: Decimal
    balance: Decimal
    status: FeeRecordStatus
    due_date: Optional[date] = None
    last_payment_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentFeeSummaryResponse(BaseModel):
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal
    payment_percentage: int
    paid_fees: int
    partial_fees: int
    unpaid_fees: int
    status: StudentPaymentStatus
    groups: List[FeeGroupResponse]

    class Config:
        from_attributes = True


class HistoryEntryResponse(BaseModel):
    record_id: Optional[str] = None
    fee_type: str
    amount: Decimal
    paid: Decimal
    due_date: Optional[date] = None
    status: str
    period: str
    payment_date: Optional[datetime] = None
    collector: str

    class Config:
        from_attributes = True


class PeriodHistoryResponse(BaseModel):
    period: str
    entries: List[HistoryEntryResponse]

    class Config:
        from_attributes = True


class StudentFeeStatementResponse(BaseModel):
    student_id: str
    name: str
    roll_no: Optional[str] = None
    summary: StudentFeeSummaryResponse
    history: List[PeriodHistoryResponse]
    generated_at: datetime

    class Config:
        from_attributes = True


# --- Class ---
class ClassStatisticsResponse(BaseModel):
    class_id: UUID
    period: str
    total_fees: Decimal
    total_collected: Decimal
    pending_amount: Decimal
    payment_rate: int


class ClassReportSummaryResponse(BaseModel):
    class_label: str
    period: str
    total_students: int
    total_fee_types: int
    total_potential_fees: Decimal
    total_collected: Decimal
    total_pending: Decimal
    collection_rate: int

    class Config:
        from_attributes = True


class StudentReportRowResponse(BaseModel):
    student_id: str
    roll_no: Optional[str] = None
    name: str
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal
    status: StudentPaymentStatus

    class Config:
        from_attributes = True


class FeeTypeBreakdownResponse(BaseModel):
    fee_type_id: UUID
    name: str
    amount: Decimal
    due_date: Optional[date] = None
    total_collected: Decimal
    pending: Decimal
    payment_rate: int
    paid_count: int
    partial_count: int
    unpaid_count: int

    class Config:
        from_attributes = True


class ClassFeeReportResponse(BaseModel):
    summary: ClassReportSummaryResponse
    students: List[StudentReportRowResponse]
    fee_types: List[FeeTypeBreakdownResponse]
    generated_at: datetime

    class Config:
        from_attributes = True


# --- Collector ---
class CollectorStatisticResponse(BaseModel):
    collector_type: str
    collector_id: UUID
    collector_name: str
    total_collected: Decimal
    fee_types: Dict[str, Decimal]

    class Config:
        from_attributes = True
