"""Fee type catalog administration: create/update with class pricing, activate/deactivate, guarded delete."""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import FeeClassPricing, FeeType, SchoolClass, StudentFee
from app.core.money import to_decimal

from .schemas import ClassPriceItem, ClassPriceResponse, FeeTypeCreate, FeeTypeResponse, FeeTypeUpdate

logger = logging.getLogger(__name__)


def _to_response(ft: FeeType) -> FeeTypeResponse:
    return FeeTypeResponse(
        id=ft.id,
        school_id=ft.school_id,
        name=ft.name,
        description=ft.description,
        amount=to_decimal(ft.amount),
        due_date=ft.due_date,
        is_active=ft.is_active,
        is_class_specific=ft.is_class_specific,
        applicable_classes=[UUID(str(c)) for c in (ft.applicable_classes or [])],
        class_prices=[
            ClassPriceResponse(class_id=p.class_id, amount=to_decimal(p.amount))
            for p in (ft.class_pricing or [])
        ],
        created_at=ft.created_at,
        updated_at=ft.updated_at,
    )


async def _get_fee_type(db: AsyncSession, school_id: UUID, fee_type_id: UUID) -> FeeType:
    ft = (
        await db.execute(select(FeeType).where(FeeType.id == fee_type_id, FeeType.school_id == school_id))
    ).scalar_one_or_none()
    if not ft:
        raise ServiceError("Fee type not found", status.HTTP_404_NOT_FOUND)
    return ft


async def _validate_classes(db: AsyncSession, school_id: UUID, class_ids: Iterable[UUID]) -> None:
    ids = set(class_ids)
    if not ids:
        return
    found = (
        await db.execute(select(SchoolClass.id).where(SchoolClass.school_id == school_id, SchoolClass.id.in_(ids)))
    ).scalars().all()
    if len(set(found)) != len(ids):
        raise ServiceError("Invalid class in applicable_classes", status.HTTP_400_BAD_REQUEST)


def _build_pricing(
    class_ids: List[UUID],
    prices: List[ClassPriceItem],
    base_amount: Decimal,
) -> List[FeeClassPricing]:
    """One pricing row per applicable class; classes without a price get the base amount."""
    by_class = {p.class_id: p.amount for p in prices}
    return [
        FeeClassPricing(class_id=cid, amount=by_class.get(cid) or base_amount)
        for cid in class_ids
    ]


async def create_fee_type(db: AsyncSession, school_id: UUID, payload: FeeTypeCreate) -> FeeTypeResponse:
    await _validate_classes(db, school_id, payload.applicable_classes)
    ft = FeeType(
        school_id=school_id,
        name=payload.name.strip(),
        description=(payload.description or "").strip() or None,
        amount=payload.amount,
        due_date=payload.due_date,
        is_active=payload.is_active,
        is_class_specific=payload.is_class_specific,
        applicable_classes=[str(c) for c in payload.applicable_classes] if payload.is_class_specific else None,
    )
    if payload.is_class_specific:
        ft.class_pricing = _build_pricing(payload.applicable_classes, payload.class_prices, payload.amount)
    db.add(ft)
    await db.commit()
    await db.refresh(ft)
    logger.info("Created fee type %s (%s) for school %s", ft.id, ft.name, school_id)
    return _to_response(ft)


async def list_fee_types(
    db: AsyncSession,
    school_id: UUID,
    active_only: bool = False,
) -> List[FeeTypeResponse]:
    stmt = select(FeeType).where(FeeType.school_id == school_id)
    if active_only:
        stmt = stmt.where(FeeType.is_active.is_(True))
    stmt = stmt.order_by(FeeType.created_at.desc())
    result = await db.execute(stmt)
    return [_to_response(ft) for ft in result.scalars().all()]


async def update_fee_type(
    db: AsyncSession,
    school_id: UUID,
    fee_type_id: UUID,
    payload: FeeTypeUpdate,
) -> FeeTypeResponse:
    """
    Update a fee type. Existing fee records keep their amount snapshot; only future
    payments see new prices. Class pricing is replaced as a whole when classes change.
    """
    ft = await _get_fee_type(db, school_id, fee_type_id)
    if payload.name is not None:
        ft.name = payload.name.strip()
    if payload.description is not None:
        ft.description = payload.description.strip() or None
    if payload.amount is not None:
        ft.amount = payload.amount
    if payload.due_date is not None:
        ft.due_date = payload.due_date
    if payload.is_class_specific is not None:
        ft.is_class_specific = payload.is_class_specific

    if ft.is_class_specific:
        class_ids = (
            payload.applicable_classes
            if payload.applicable_classes is not None
            else [UUID(str(c)) for c in (ft.applicable_classes or [])]
        )
        if not class_ids:
            raise ServiceError("A class-specific fee needs at least one applicable class", status.HTTP_400_BAD_REQUEST)
        await _validate_classes(db, school_id, class_ids)
        if payload.class_prices is not None:
            prices = payload.class_prices
        else:
            prices = [ClassPriceItem(class_id=p.class_id, amount=p.amount) for p in ft.class_pricing]
        if {p.class_id for p in prices} - set(class_ids):
            raise ServiceError("class_prices may only reference applicable classes", status.HTTP_400_BAD_REQUEST)
        ft.applicable_classes = [str(c) for c in class_ids]
        # Flush the removal first so re-added classes don't hit uq_fee_class_pricing_fee_class
        ft.class_pricing.clear()
        await db.flush()
        ft.class_pricing.extend(_build_pricing(class_ids, prices, to_decimal(ft.amount)))
    else:
        ft.applicable_classes = None
        ft.class_pricing.clear()

    await db.commit()
    await db.refresh(ft)
    return _to_response(ft)


async def toggle_fee_type(db: AsyncSession, school_id: UUID, fee_type_id: UUID) -> FeeTypeResponse:
    ft = await _get_fee_type(db, school_id, fee_type_id)
    ft.is_active = not ft.is_active
    await db.commit()
    await db.refresh(ft)
    logger.info("Fee type %s %s", ft.id, "activated" if ft.is_active else "deactivated")
    return _to_response(ft)


async def delete_fee_type(db: AsyncSession, school_id: UUID, fee_type_id: UUID) -> None:
    """Delete a fee type. Refused once any payment references it; deactivate instead."""
    ft = await _get_fee_type(db, school_id, fee_type_id)
    count: Optional[int] = (
        await db.execute(select(func.count(StudentFee.id)).where(StudentFee.fee_type_id == fee_type_id))
    ).scalar()
    if count:
        raise ServiceError("Cannot delete fee with existing payments", status.HTTP_409_CONFLICT)
    await db.delete(ft)
    await db.commit()
