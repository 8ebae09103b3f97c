from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import Semester

from .schemas import SemesterCreate, SemesterResponse


def _to_response(sem: Semester) -> SemesterResponse:
    return SemesterResponse(
        id=sem.id,
        school_id=sem.school_id,
        name=sem.name,
        start_date=sem.start_date,
        end_date=sem.end_date,
        is_current=sem.is_current,
        created_at=sem.created_at,
    )


def _validate_dates(start_date: date, end_date: date) -> None:
    if end_date <= start_date:
        raise ServiceError("end_date must be after start_date", status.HTTP_400_BAD_REQUEST)


async def create_semester(
    db: AsyncSession,
    school_id: UUID,
    payload: SemesterCreate,
) -> SemesterResponse:
    """Create semester. If is_current=true, unset current on all other semesters first."""
    _validate_dates(payload.start_date, payload.end_date)
    name = payload.name.strip()
    existing = await db.execute(
        select(Semester).where(Semester.school_id == school_id, Semester.name == name)
    )
    if existing.scalar_one_or_none():
        raise ServiceError(f"Semester '{name}' already exists for this school", status.HTTP_409_CONFLICT)
    if payload.is_current:
        await db.execute(update(Semester).where(Semester.school_id == school_id).values(is_current=False))
    sem = Semester(
        school_id=school_id,
        name=name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_current=payload.is_current,
    )
    db.add(sem)
    try:
        await db.commit()
        await db.refresh(sem)
        return _to_response(sem)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Semester name conflict", status.HTTP_409_CONFLICT)


async def list_semesters(db: AsyncSession, school_id: UUID) -> List[SemesterResponse]:
    """Semesters for a school, newest first."""
    result = await db.execute(
        select(Semester).where(Semester.school_id == school_id).order_by(Semester.start_date.desc())
    )
    return [_to_response(s) for s in result.scalars().all()]


async def get_current_semester(db: AsyncSession, school_id: UUID) -> Optional[SemesterResponse]:
    """The semester marked current; falls back to the most recent one when none is marked."""
    result = await db.execute(
        select(Semester).where(Semester.school_id == school_id, Semester.is_current.is_(True))
    )
    sem = result.scalars().first()
    if sem is None:
        result = await db.execute(
            select(Semester).where(Semester.school_id == school_id).order_by(Semester.start_date.desc())
        )
        sem = result.scalars().first()
    return _to_response(sem) if sem else None


async def set_current_semester(db: AsyncSession, school_id: UUID, semester_id: UUID) -> SemesterResponse:
    result = await db.execute(
        select(Semester).where(Semester.id == semester_id, Semester.school_id == school_id)
    )
    sem = result.scalar_one_or_none()
    if not sem:
        raise ServiceError("Semester not found", status.HTTP_404_NOT_FOUND)
    await db.execute(update(Semester).where(Semester.school_id == school_id).values(is_current=False))
    sem.is_current = True
    await db.commit()
    await db.refresh(sem)
    return _to_response(sem)
