"""Fee catalog: a school's fee types with their class price overrides, loaded once per request."""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple
from uuid import UUID

from app.core.config import settings
from app.core.money import to_decimal

logger = logging.getLogger(__name__)


def _to_uuid(val) -> UUID:
    return val if isinstance(val, UUID) else UUID(str(val))


@dataclass(frozen=True)
class ClassPrice:
    class_id: UUID
    amount: Decimal


@dataclass(frozen=True)
class FeeTypeEntry:
    id: UUID
    name: str
    amount: Decimal
    due_date: Optional[date] = None
    is_active: bool = True
    is_class_specific: bool = False
    class_prices: Tuple[ClassPrice, ...] = ()
    applicable_classes: FrozenSet[UUID] = field(default_factory=frozenset)

    def override_for(self, class_id: Optional[UUID]) -> Optional[Decimal]:
        for price in self.class_prices:
            if price.class_id == class_id:
                return price.amount
        return None

    @classmethod
    def from_model(cls, fee_type) -> "FeeTypeEntry":
        return cls(
            id=fee_type.id,
            name=fee_type.name,
            amount=to_decimal(fee_type.amount),
            due_date=fee_type.due_date,
            is_active=bool(fee_type.is_active),
            is_class_specific=bool(fee_type.is_class_specific),
            class_prices=tuple(
                ClassPrice(class_id=p.class_id, amount=to_decimal(p.amount))
                for p in (fee_type.class_pricing or [])
            ),
            applicable_classes=frozenset(_to_uuid(c) for c in (fee_type.applicable_classes or [])),
        )


class FeeCatalog:
    """Read-only lookup over fee types, in catalog order."""

    def __init__(self, fee_types: Iterable[FeeTypeEntry] = ()) -> None:
        self._fee_types: List[FeeTypeEntry] = list(fee_types)
        self._by_id: Dict[UUID, FeeTypeEntry] = {ft.id: ft for ft in self._fee_types}

    @classmethod
    def from_models(cls, fee_types) -> "FeeCatalog":
        return cls(FeeTypeEntry.from_model(ft) for ft in fee_types)

    def __iter__(self) -> Iterator[FeeTypeEntry]:
        return iter(self._fee_types)

    def __len__(self) -> int:
        return len(self._fee_types)

    def __contains__(self, fee_type_id) -> bool:
        return fee_type_id in self._by_id

    def get(self, fee_type_id: UUID) -> Optional[FeeTypeEntry]:
        return self._by_id.get(fee_type_id)

    def by_name(self, name: str) -> Optional[FeeTypeEntry]:
        for ft in self._fee_types:
            if ft.name == name:
                return ft
        return None

    def active(self) -> List[FeeTypeEntry]:
        return [ft for ft in self._fee_types if ft.is_active]

    def name_for(self, fee_type_id: UUID) -> str:
        """Fee type name, or the unknown label when the record points outside the catalog."""
        ft = self._by_id.get(fee_type_id)
        if ft is None:
            logger.warning("Fee record references fee type %s which is not in the catalog", fee_type_id)
            return settings.unknown_label
        return ft.name
