from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import SemesterCreate, SemesterResponse
from . import service

router = APIRouter(prefix="/api/v1/semesters", tags=["semesters"])


@router.post("", response_model=SemesterResponse, status_code=status.HTTP_201_CREATED)
async def create_semester(
    payload: SemesterCreate,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> SemesterResponse:
    try:
        return await service.create_semester(db, school_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[SemesterResponse])
async def list_semesters(
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> List[SemesterResponse]:
    return await service.list_semesters(db, school_id)


@router.get("/current", response_model=SemesterResponse)
async def get_current_semester(
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> SemesterResponse:
    sem = await service.get_current_semester(db, school_id)
    if not sem:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No semester defined")
    return sem


@router.post("/{semester_id}/set-current", response_model=SemesterResponse)
async def set_current_semester(
    semester_id: UUID,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> SemesterResponse:
    try:
        return await service.set_current_semester(db, school_id, semester_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
