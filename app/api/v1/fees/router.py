"""Fees router: payments, student status/summary/history/statement, class statistics/report, collector stats."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    ClassFeeReportResponse,
    ClassStatisticsResponse,
    CollectorStatisticResponse,
    FeeRecordResponse,
    PaymentCreate,
    PeriodHistoryResponse,
    StudentFeeStatementResponse,
    StudentFeeStatusResponse,
    StudentFeeSummaryResponse,
)
from . import service

router = APIRouter(prefix="/api/v1/fees", tags=["fees"])


# --- Payment ---
@router.post(
    "/payments",
    response_model=FeeRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    payload: PaymentCreate,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> FeeRecordResponse:
    try:
        return await service.record_payment(db, school_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/students/{student_id}/payments", response_model=List[FeeRecordResponse])
async def list_payments(
    student_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[FeeRecordResponse]:
    try:
        return await service.list_payments(db, school_id, student_id, period=period)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Student ---
@router.get("/students/{student_id}/status", response_model=StudentFeeStatusResponse)
async def get_student_status(
    student_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None, description="Defaults to the current semester"),
    db: AsyncSession = Depends(get_db),
) -> StudentFeeStatusResponse:
    try:
        return await service.get_student_status(db, school_id, student_id, period=period)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/students/{student_id}/summary", response_model=StudentFeeSummaryResponse)
async def get_student_summary(
    student_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None, description="Defaults to the current semester"),
    db: AsyncSession = Depends(get_db),
) -> StudentFeeSummaryResponse:
    try:
        return await service.get_student_summary(db, school_id, student_id, period=period)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/students/{student_id}/history", response_model=List[PeriodHistoryResponse])
async def get_student_history(
    student_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None, description="Only this period; all periods when omitted"),
    db: AsyncSession = Depends(get_db),
) -> List[PeriodHistoryResponse]:
    try:
        return await service.get_student_history(db, school_id, student_id, period=period)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/students/{student_id}/statement", response_model=StudentFeeStatementResponse)
async def get_student_statement(
    student_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None, description="Summary period; defaults to the current semester"),
    history_period: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> StudentFeeStatementResponse:
    try:
        return await service.get_student_statement(
            db, school_id, student_id, period=period, history_period=history_period
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Class ---
@router.get("/classes/{class_id}/statistics", response_model=ClassStatisticsResponse)
async def get_class_statistics(
    class_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None, description="Defaults to the current semester"),
    db: AsyncSession = Depends(get_db),
) -> ClassStatisticsResponse:
    try:
        return await service.get_class_statistics(db, school_id, class_id, period=period)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/classes/{class_id}/report", response_model=ClassFeeReportResponse)
async def get_class_report(
    class_id: UUID,
    school_id: UUID = Query(...),
    period: Optional[str] = Query(None, description="Defaults to the current semester"),
    db: AsyncSession = Depends(get_db),
) -> ClassFeeReportResponse:
    try:
        return await service.get_class_report(db, school_id, class_id, period=period)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Collector ---
@router.get("/collectors/statistics", response_model=List[CollectorStatisticResponse])
async def get_collector_statistics(
    start_date: date,
    end_date: date,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> List[CollectorStatisticResponse]:
    try:
        return await service.get_collector_statistics(db, school_id, start_date, end_date)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
