"""Report assembly from ledger aggregates."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from app.api.v1.fees.catalog import ClassPrice, FeeCatalog, FeeTypeEntry
from app.api.v1.fees.entities import ClassRef, CollectorRef, FeeRecord, StudentRef
from app.api.v1.fees.report import assemble_class_report, assemble_student_statement
from app.core.enums import CollectorRole, FeeRecordStatus, StudentPaymentStatus

CLASS_A = ClassRef(id=uuid4(), name="Basic 4A", grade="4")
TEACHER = CollectorRef(id=uuid4(), role=CollectorRole.TEACHER, name="Kofi Asante")
TUITION = FeeTypeEntry(id=uuid4(), name="Tuition", amount=Decimal("100"))
LAB = FeeTypeEntry(
    id=uuid4(),
    name="Lab",
    amount=Decimal("60"),
    is_class_specific=True,
    applicable_classes=frozenset({CLASS_A.id}),
    class_prices=(ClassPrice(CLASS_A.id, Decimal("80")),),
)
CATALOG = FeeCatalog([TUITION, LAB])


def _record(student, fee_type, paid, amount, period="2025 Spring", collector=TEACHER):
    return FeeRecord(
        id=uuid4(),
        school_id=uuid4(),
        student_id=student.id,
        fee_type_id=fee_type.id,
        amount=Decimal(amount),
        paid=Decimal(paid),
        due_date=None,
        status=FeeRecordStatus.paid if Decimal(paid) >= Decimal(amount) else FeeRecordStatus.partial,
        period=period,
        collector_type=collector.role,
        collector_id=collector.id,
        created_at=datetime(2025, 2, 1),
    )


def test_class_report_uses_resolved_amounts_for_potential() -> None:
    alice = StudentRef(id=uuid4(), class_id=CLASS_A.id, name="Alice Mensah", roll_no="A01")
    bob = StudentRef(id=uuid4(), class_id=CLASS_A.id, name="Bob Owusu", roll_no="A02")
    outsider = StudentRef(id=uuid4(), class_id=uuid4(), name="Carol Boateng")
    records = [
        _record(alice, TUITION, "100", "100"),
        _record(alice, LAB, "80", "80"),
        _record(bob, TUITION, "50", "100"),
        _record(bob, TUITION, "50", "100", period="2024 Fall"),
    ]

    report = assemble_class_report(CLASS_A, "2025 Spring", [TUITION, LAB], [alice, bob, outsider], records, CATALOG)

    summary = report.summary
    assert summary.class_label == "Basic 4A - 4"
    assert summary.total_students == 2
    assert summary.total_fee_types == 2
    assert summary.total_potential_fees == Decimal("360")  # 2 x (100 + 80)
    assert summary.total_collected == Decimal("230")
    assert summary.total_pending == Decimal("130")
    assert summary.collection_rate == 64

    rows = {r.name: r for r in report.students}
    assert rows["Alice Mensah"].status is StudentPaymentStatus.full
    assert rows["Alice Mensah"].balance == Decimal("0")
    assert rows["Bob Owusu"].status is StudentPaymentStatus.partial
    assert rows["Bob Owusu"].total_due == Decimal("180")
    assert rows["Bob Owusu"].total_paid == Decimal("50")

    breakdown = {b.name: b for b in report.fee_types}
    assert breakdown["Tuition"].paid_count == 1
    assert breakdown["Tuition"].partial_count == 1
    assert breakdown["Lab"].unpaid_count == 1


def test_student_statement_history_and_collector_names() -> None:
    alice = StudentRef(id=uuid4(), class_id=CLASS_A.id, name="Alice Mensah")
    stranger = CollectorRef(id=uuid4(), role=CollectorRole.ADMIN)
    ghost = FeeTypeEntry(id=uuid4(), name="Ghost", amount=Decimal("5"))
    records = [
        _record(alice, TUITION, "100", "100"),
        _record(alice, TUITION, "40", "100", period="2024 Fall", collector=stranger),
        _record(alice, ghost, "5", "5", period="2024 Fall"),
    ]

    statement = assemble_student_statement(alice, records, CATALOG, [TEACHER], "2025 Spring")

    assert statement.summary.total_paid == Decimal("100")
    assert [p.period for p in statement.history] == ["2025 Spring", "2024 Fall"]
    fall = statement.history[1].entries
    assert [e.collector for e in fall] == ["Unknown", "Kofi Asante"]
    assert [e.fee_type for e in fall] == ["Tuition", "Unknown"]


def test_student_statement_history_filter() -> None:
    alice = StudentRef(id=uuid4(), class_id=CLASS_A.id, name="Alice Mensah")
    records = [
        _record(alice, TUITION, "100", "100"),
        _record(alice, TUITION, "40", "100", period="2024 Fall"),
    ]

    statement = assemble_student_statement(
        alice, records, CATALOG, [TEACHER], "2025 Spring", history_period="2024 Fall"
    )
    assert [p.period for p in statement.history] == ["2024 Fall"]
