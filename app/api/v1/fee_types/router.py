"""Fee type catalog router."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import FeeTypeCreate, FeeTypeResponse, FeeTypeUpdate
from . import service

router = APIRouter(prefix="/api/v1/fee-types", tags=["fee-types"])


@router.post("", response_model=FeeTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_fee_type(
    payload: FeeTypeCreate,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> FeeTypeResponse:
    try:
        return await service.create_fee_type(db, school_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[FeeTypeResponse])
async def list_fee_types(
    school_id: UUID = Query(...),
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> List[FeeTypeResponse]:
    return await service.list_fee_types(db, school_id, active_only=active_only)


@router.patch("/{fee_type_id}", response_model=FeeTypeResponse)
async def update_fee_type(
    fee_type_id: UUID,
    payload: FeeTypeUpdate,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> FeeTypeResponse:
    try:
        return await service.update_fee_type(db, school_id, fee_type_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{fee_type_id}/toggle", response_model=FeeTypeResponse)
async def toggle_fee_type(
    fee_type_id: UUID,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> FeeTypeResponse:
    try:
        return await service.toggle_fee_type(db, school_id, fee_type_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{fee_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fee_type(
    fee_type_id: UUID,
    school_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await service.delete_fee_type(db, school_id, fee_type_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
