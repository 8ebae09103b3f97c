"""
Resolve what a student owes for a fee type.
Flat fee: nominal amount. Class-specific fee: zero for classes it does not apply to,
otherwise the class override, falling back to the nominal amount.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.core.enums import AmountSource

from .catalog import FeeTypeEntry
from .entities import StudentRef

ZERO = Decimal("0")


@dataclass(frozen=True)
class ResolvedAmount:
    value: Decimal
    source: AmountSource

    @property
    def applicable(self) -> bool:
        return self.source is not AmountSource.NOT_APPLICABLE and self.value > ZERO


def resolve(student: StudentRef, fee_type: FeeTypeEntry) -> ResolvedAmount:
    if not fee_type.is_class_specific:
        return ResolvedAmount(fee_type.amount, AmountSource.FLAT)
    if student.class_id is None or student.class_id not in fee_type.applicable_classes:
        return ResolvedAmount(ZERO, AmountSource.NOT_APPLICABLE)
    override = fee_type.override_for(student.class_id)
    # A zero override is treated as "no price set", same as the admin form stores it
    if override:
        return ResolvedAmount(override, AmountSource.CLASS_OVERRIDE)
    return ResolvedAmount(fee_type.amount, AmountSource.FLAT)


def resolve_amount(student: StudentRef, fee_type: FeeTypeEntry) -> Decimal:
    return resolve(student, fee_type).value
