"""Unit tests for fee amount resolution."""

from decimal import Decimal
from uuid import uuid4

from app.api.v1.fees.catalog import ClassPrice, FeeTypeEntry
from app.api.v1.fees.entities import StudentRef
from app.api.v1.fees.resolver import resolve, resolve_amount
from app.core.enums import AmountSource

CLASS_A = uuid4()
CLASS_B = uuid4()


def _tuition(**kwargs) -> FeeTypeEntry:
    fields = dict(id=uuid4(), name="Tuition", amount=Decimal("100"))
    fields.update(kwargs)
    return FeeTypeEntry(**fields)


def test_flat_fee_returns_base_amount() -> None:
    student = StudentRef(id=uuid4(), class_id=CLASS_B)
    assert resolve_amount(student, _tuition()) == Decimal("100")
    assert resolve(student, _tuition()).source is AmountSource.FLAT


def test_class_specific_fee_uses_override_for_applicable_class() -> None:
    fee = _tuition(
        is_class_specific=True,
        applicable_classes=frozenset({CLASS_A}),
        class_prices=(ClassPrice(CLASS_A, Decimal("80")),),
    )
    resolved = resolve(StudentRef(id=uuid4(), class_id=CLASS_A), fee)
    assert resolved.value == Decimal("80")
    assert resolved.source is AmountSource.CLASS_OVERRIDE


def test_class_specific_fee_is_zero_outside_applicable_classes() -> None:
    fee = _tuition(
        is_class_specific=True,
        applicable_classes=frozenset({CLASS_A}),
        class_prices=(ClassPrice(CLASS_A, Decimal("80")),),
    )
    resolved = resolve(StudentRef(id=uuid4(), class_id=CLASS_B), fee)
    assert resolved.value == Decimal("0")
    assert resolved.source is AmountSource.NOT_APPLICABLE
    assert not resolved.applicable


def test_class_specific_fee_without_override_falls_back_to_base() -> None:
    fee = _tuition(is_class_specific=True, applicable_classes=frozenset({CLASS_A, CLASS_B}))
    assert resolve_amount(StudentRef(id=uuid4(), class_id=CLASS_B), fee) == Decimal("100")


def test_zero_override_falls_back_to_base() -> None:
    fee = _tuition(
        is_class_specific=True,
        applicable_classes=frozenset({CLASS_A}),
        class_prices=(ClassPrice(CLASS_A, Decimal("0")),),
    )
    assert resolve_amount(StudentRef(id=uuid4(), class_id=CLASS_A), fee) == Decimal("100")


def test_student_without_class_does_not_owe_class_specific_fee() -> None:
    fee = _tuition(is_class_specific=True, applicable_classes=frozenset({CLASS_A}))
    assert resolve_amount(StudentRef(id=uuid4(), class_id=None), fee) == Decimal("0")
