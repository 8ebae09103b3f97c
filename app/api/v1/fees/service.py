"""Fees service: payments, student status/history/statement, class statistics and reports, collector stats."""

from dataclasses import asdict
from datetime import date, datetime, time, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.semesters import service as semester_service
from app.core.exceptions import ServiceError
from app.core.models import SchoolClass, Student

from . import aggregator, report
from .entities import ClassRef, CollectorRef, StudentRef
from .history import group_by_period
from .recorder import PaymentRecorder
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
from .store import SqlAlchemyFeeRecordStore, list_collectors, list_fee_types


async def _get_student(db: AsyncSession, school_id: UUID, student_id: UUID) -> StudentRef:
    student = (
        await db.execute(select(Student).where(Student.id == student_id, Student.school_id == school_id))
    ).scalar_one_or_none()
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)
    return StudentRef.from_model(student)


async def _get_class_with_students(
    db: AsyncSession,
    school_id: UUID,
    class_id: UUID,
) -> Tuple[ClassRef, List[StudentRef]]:
    cl = (
        await db.execute(select(SchoolClass).where(SchoolClass.id == class_id, SchoolClass.school_id == school_id))
    ).scalar_one_or_none()
    if not cl:
        raise ServiceError("Class not found", status.HTTP_404_NOT_FOUND)
    rows = (
        await db.execute(
            select(Student)
            .where(Student.school_id == school_id, Student.class_id == class_id)
            .order_by(Student.roll_no, Student.last_name, Student.first_name)
        )
    ).scalars().all()
    return ClassRef.from_model(cl), [StudentRef.from_model(s) for s in rows]


async def _resolve_period(db: AsyncSession, school_id: UUID, period: Optional[str]) -> str:
    """Explicit period label, or the school's current semester."""
    if period and period.strip():
        return period.strip()
    current = await semester_service.get_current_semester(db, school_id)
    if not current:
        raise ServiceError("No period given and no current semester set", status.HTTP_400_BAD_REQUEST)
    return current.name


# --- Payment ---
async def record_payment(
    db: AsyncSession,
    school_id: UUID,
    payload: PaymentCreate,
) -> FeeRecordResponse:
    student = await _get_student(db, school_id, payload.student_id)
    catalog = await list_fee_types(db, school_id)
    fee_type = catalog.get(payload.fee_type_id)
    if fee_type is None:
        raise ServiceError("Fee type not found", status.HTTP_404_NOT_FOUND)
    period = await _resolve_period(db, school_id, payload.period)
    collector = CollectorRef(id=payload.collector_id, role=payload.collector_type)

    recorder = PaymentRecorder(SqlAlchemyFeeRecordStore(db), school_id)
    record = await recorder.record_payment(student, fee_type, collector, period, payload.amount)
    return FeeRecordResponse.model_validate(record)


async def list_payments(
    db: AsyncSession,
    school_id: UUID,
    student_id: UUID,
    period: Optional[str] = None,
) -> List[FeeRecordResponse]:
    await _get_student(db, school_id, student_id)
    records = await SqlAlchemyFeeRecordStore(db).query(school_id, student_id=student_id, period=period)
    return [FeeRecordResponse.model_validate(r) for r in records]


# --- Student ---
async def get_student_status(
    db: AsyncSession,
    school_id: UUID,
    student_id: UUID,
    period: Optional[str] = None,
) -> StudentFeeStatusResponse:
    student = await _get_student(db, school_id, student_id)
    period = await _resolve_period(db, school_id, period)
    catalog = await list_fee_types(db, school_id)
    records = await SqlAlchemyFeeRecordStore(db).query(school_id, student_id=student_id, period=period)
    return StudentFeeStatusResponse(
        student_id=student.id,
        period=period,
        status=aggregator.student_fee_status(student, records, catalog, period),
    )


async def get_student_summary(
    db: AsyncSession,
    school_id: UUID,
    student_id: UUID,
    period: Optional[str] = None,
) -> StudentFeeSummaryResponse:
    student = await _get_student(db, school_id, student_id)
    period = await _resolve_period(db, school_id, period)
    catalog = await list_fee_types(db, school_id)
    records = await SqlAlchemyFeeRecordStore(db).query(school_id, student_id=student_id, period=period)
    summary = aggregator.student_fee_summary(student, records, catalog, period)
    return StudentFeeSummaryResponse.model_validate(summary)


async def get_student_history(
    db: AsyncSession,
    school_id: UUID,
    student_id: UUID,
    period: Optional[str] = None,
) -> List[PeriodHistoryResponse]:
    """Full payment history grouped by period; period narrows it to one term."""
    await _get_student(db, school_id, student_id)
    catalog = await list_fee_types(db, school_id)
    collectors = await list_collectors(db, school_id)
    names = {c.key: c.name for c in collectors}
    records = await SqlAlchemyFeeRecordStore(db).query(school_id, student_id=student_id)
    history = group_by_period(records)
    if period:
        history = history.only(period)
    return [
        PeriodHistoryResponse(
            period=p,
            entries=[asdict(report.history_entry(r, catalog, names)) for r in period_records],
        )
        for p, period_records in history.items()
    ]


async def get_student_statement(
    db: AsyncSession,
    school_id: UUID,
    student_id: UUID,
    period: Optional[str] = None,
    history_period: Optional[str] = None,
) -> StudentFeeStatementResponse:
    student = await _get_student(db, school_id, student_id)
    period = await _resolve_period(db, school_id, period)
    catalog = await list_fee_types(db, school_id)
    collectors = await list_collectors(db, school_id)
    records = await SqlAlchemyFeeRecordStore(db).query(school_id, student_id=student_id)
    statement = report.assemble_student_statement(
        student, records, catalog, collectors, period, history_period=history_period
    )
    return StudentFeeStatementResponse.model_validate(statement)


# --- Class ---
async def get_class_statistics(
    db: AsyncSession,
    school_id: UUID,
    class_id: UUID,
    period: Optional[str] = None,
) -> ClassStatisticsResponse:
    _, students = await _get_class_with_students(db, school_id, class_id)
    period = await _resolve_period(db, school_id, period)
    catalog = await list_fee_types(db, school_id, active_only=True)
    records = await SqlAlchemyFeeRecordStore(db).query(
        school_id, period=period, student_ids=[s.id for s in students]
    )
    stats = aggregator.class_statistics(class_id, period, list(catalog), students, records)
    return ClassStatisticsResponse(
        class_id=class_id,
        period=period,
        total_fees=stats.total_fees,
        total_collected=stats.total_collected,
        pending_amount=stats.pending_amount,
        payment_rate=stats.payment_rate,
    )


async def get_class_report(
    db: AsyncSession,
    school_id: UUID,
    class_id: UUID,
    period: Optional[str] = None,
) -> ClassFeeReportResponse:
    school_class, students = await _get_class_with_students(db, school_id, class_id)
    period = await _resolve_period(db, school_id, period)
    # Full catalog so records of since-deactivated fee types still get their names
    catalog = await list_fee_types(db, school_id)
    records = await SqlAlchemyFeeRecordStore(db).query(
        school_id, period=period, student_ids=[s.id for s in students]
    )
    class_report = report.assemble_class_report(
        school_class, period, catalog.active(), students, records, catalog
    )
    return ClassFeeReportResponse.model_validate(class_report)


# --- Collector ---
async def get_collector_statistics(
    db: AsyncSession,
    school_id: UUID,
    start_date: date,
    end_date: date,
) -> List[CollectorStatisticResponse]:
    if end_date < start_date:
        raise ServiceError("end_date must not be before start_date", status.HTTP_400_BAD_REQUEST)
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date, time.max, tzinfo=timezone.utc)
    catalog = await list_fee_types(db, school_id)
    collectors = await list_collectors(db, school_id)
    records = await SqlAlchemyFeeRecordStore(db).query(school_id, created_from=start, created_to=end)
    stats = aggregator.collector_statistics(records, collectors, catalog, start, end)
    return [CollectorStatisticResponse.model_validate(s) for s in stats]
