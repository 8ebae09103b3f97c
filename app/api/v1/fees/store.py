"""
Store adapters the ledger reads and writes through.
FeeRecordStore is the only write path for fee records (insert only, no update/delete).
SQLAlchemy failures surface as StoreUnavailableError; nothing here retries.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import CollectorRole, FeeRecordStatus
from app.core.exceptions import StoreUnavailableError
from app.core.money import to_decimal
from app.core.models import Collector, FeeType, StudentFee

from .catalog import FeeCatalog
from .entities import CollectorRef, FeeRecord

logger = logging.getLogger(__name__)


class FeeRecordStore(Protocol):
    async def insert(self, record: FeeRecord) -> FeeRecord:
        ...

    async def query(
        self,
        school_id: UUID,
        student_id: Optional[UUID] = None,
        fee_type_id: Optional[UUID] = None,
        period: Optional[str] = None,
        student_ids: Optional[Iterable[UUID]] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> List[FeeRecord]:
        ...


def _row_to_record(row: StudentFee) -> FeeRecord:
    return FeeRecord(
        id=row.id,
        school_id=row.school_id,
        student_id=row.student_id,
        fee_type_id=row.fee_type_id,
        amount=to_decimal(row.amount),
        paid=to_decimal(row.paid),
        due_date=row.due_date,
        status=FeeRecordStatus(row.status),
        period=row.period,
        collector_type=CollectorRole(row.collector_type),
        collector_id=row.collector_id,
        created_at=row.created_at,
    )


class SqlAlchemyFeeRecordStore:
    """FeeRecordStore over an AsyncSession (student_fees table)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, record: FeeRecord) -> FeeRecord:
        row = StudentFee(
            school_id=record.school_id,
            student_id=record.student_id,
            fee_type_id=record.fee_type_id,
            amount=record.amount,
            paid=record.paid,
            due_date=record.due_date,
            status=record.status.value,
            period=record.period,
            collector_type=record.collector_type.value,
            collector_id=record.collector_id,
        )
        if record.created_at is not None:
            row.created_at = record.created_at
        try:
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to insert fee record for student %s", record.student_id)
            raise StoreUnavailableError("Failed to record payment")
        return _row_to_record(row)

    async def query(
        self,
        school_id: UUID,
        student_id: Optional[UUID] = None,
        fee_type_id: Optional[UUID] = None,
        period: Optional[str] = None,
        student_ids: Optional[Iterable[UUID]] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> List[FeeRecord]:
        stmt = select(StudentFee).where(StudentFee.school_id == school_id)
        if student_id is not None:
            stmt = stmt.where(StudentFee.student_id == student_id)
        if student_ids is not None:
            ids = list(student_ids)
            if not ids:
                return []
            stmt = stmt.where(StudentFee.student_id.in_(ids))
        if fee_type_id is not None:
            stmt = stmt.where(StudentFee.fee_type_id == fee_type_id)
        if period is not None:
            stmt = stmt.where(StudentFee.period == period)
        if created_from is not None:
            stmt = stmt.where(StudentFee.created_at >= created_from)
        if created_to is not None:
            stmt = stmt.where(StudentFee.created_at <= created_to)
        stmt = stmt.order_by(StudentFee.created_at)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError:
            logger.exception("Failed to query fee records for school %s", school_id)
            raise StoreUnavailableError("Failed to load fee records")
        return [_row_to_record(r) for r in result.scalars().all()]


# --- Catalog store ---
async def list_fee_types(
    db: AsyncSession,
    school_id: UUID,
    active_only: bool = False,
) -> FeeCatalog:
    """Fee types for a school with nested class pricing, as a FeeCatalog."""
    stmt = select(FeeType).where(FeeType.school_id == school_id)
    if active_only:
        stmt = stmt.where(FeeType.is_active.is_(True))
    stmt = stmt.order_by(FeeType.created_at, FeeType.name)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError:
        logger.exception("Failed to load fee catalog for school %s", school_id)
        raise StoreUnavailableError("Failed to load fee types")
    return FeeCatalog.from_models(result.scalars().all())


# --- Collector directory ---
async def list_collectors(db: AsyncSession, school_id: UUID) -> List[CollectorRef]:
    """Teachers and admins of a school. Read-only; used to label (role, id) pairs."""
    stmt = select(Collector).where(Collector.school_id == school_id).order_by(Collector.role, Collector.name)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError:
        logger.exception("Failed to load collectors for school %s", school_id)
        raise StoreUnavailableError("Failed to load collectors")
    return [CollectorRef.from_model(c) for c in result.scalars().all()]
