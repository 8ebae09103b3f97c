"""
Report assembly: turns ledger aggregates into report structures.
Rendering (PDF, spreadsheet) happens outside this package through a ReportRenderer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol, Sequence

from app.core.config import settings
from app.core.enums import StudentPaymentStatus

from .aggregator import (
    FeeTypeBreakdown,
    StudentFeeSummary,
    fee_type_breakdown,
    percentage,
    student_fee_summary,
)
from .catalog import FeeCatalog, FeeTypeEntry
from .entities import ClassRef, CollectorRef, FeeRecord, StudentRef
from .history import group_by_period
from .resolver import ZERO, resolve_amount


@dataclass
class ClassReportSummary:
    class_label: str
    period: str
    total_students: int
    total_fee_types: int
    total_potential_fees: Decimal
    total_collected: Decimal
    total_pending: Decimal
    collection_rate: int


@dataclass
class StudentReportRow:
    student_id: str
    roll_no: Optional[str]
    name: str
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal
    status: StudentPaymentStatus


@dataclass
class ClassFeeReport:
    summary: ClassReportSummary
    students: List[StudentReportRow]
    fee_types: List[FeeTypeBreakdown]
    generated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class HistoryEntry:
    record_id: Optional[str]
    fee_type: str
    amount: Decimal
    paid: Decimal
    due_date: Optional[date]
    status: str
    period: str
    payment_date: Optional[datetime]
    collector: str


@dataclass
class PeriodEntries:
    period: str
    entries: List[HistoryEntry]


@dataclass
class StudentFeeStatement:
    student_id: str
    name: str
    roll_no: Optional[str]
    summary: StudentFeeSummary
    history: List[PeriodEntries]
    generated_at: datetime = field(default_factory=datetime.utcnow)


class ReportRenderer(Protocol):
    """Turns an assembled report into a document. Implemented by the presentation layer."""

    def render(self, report) -> bytes:
        ...


def assemble_class_report(
    school_class: ClassRef,
    period: str,
    fee_types: Sequence[FeeTypeEntry],
    students: Sequence[StudentRef],
    records: Iterable[FeeRecord],
    catalog: FeeCatalog,
) -> ClassFeeReport:
    """
    Class report for one period. Unlike class_statistics, potential fees here use each
    student's resolved amount, so overrides and inapplicable fees are reflected.
    """
    class_students = [s for s in students if s.class_id == school_class.id]
    records = [r for r in records if r.period == period]

    rows = []
    for s in class_students:
        summary = student_fee_summary(s, records, catalog, period)
        rows.append(
            StudentReportRow(
                student_id=str(s.id),
                roll_no=s.roll_no,
                name=s.name,
                total_due=summary.total_due,
                total_paid=summary.total_paid,
                balance=summary.balance,
                status=summary.status,
            )
        )

    potential = sum(
        (resolve_amount(s, ft) for s in class_students for ft in fee_types),
        ZERO,
    )
    student_ids = {s.id for s in class_students}
    collected = sum((r.paid for r in records if r.student_id in student_ids), ZERO)
    return ClassFeeReport(
        summary=ClassReportSummary(
            class_label=school_class.label,
            period=period,
            total_students=len(class_students),
            total_fee_types=len(fee_types),
            total_potential_fees=potential,
            total_collected=collected,
            total_pending=potential - collected,
            collection_rate=percentage(collected, potential),
        ),
        students=rows,
        fee_types=fee_type_breakdown(fee_types, class_students, records, period),
    )


def assemble_student_statement(
    student: StudentRef,
    records: Sequence[FeeRecord],
    catalog: FeeCatalog,
    collectors: Iterable[CollectorRef],
    period: str,
    history_period: Optional[str] = None,
) -> StudentFeeStatement:
    """Summary for one period plus the payment history grouped by period (all periods unless filtered)."""
    names = {c.key: c.name for c in collectors}
    history = group_by_period(r for r in records if r.student_id == student.id)
    if history_period is not None:
        history = history.only(history_period)
    return StudentFeeStatement(
        student_id=str(student.id),
        name=student.name,
        roll_no=student.roll_no,
        summary=student_fee_summary(student, records, catalog, period),
        history=[
            PeriodEntries(
                period=p,
                entries=[history_entry(r, catalog, names) for r in period_records],
            )
            for p, period_records in history.items()
        ],
    )


def history_entry(record: FeeRecord, catalog: FeeCatalog, collector_names: dict) -> HistoryEntry:
    return HistoryEntry(
        record_id=str(record.id) if record.id is not None else None,
        fee_type=catalog.name_for(record.fee_type_id),
        amount=record.amount,
        paid=record.paid,
        due_date=record.due_date,
        status=record.status.value,
        period=record.period,
        payment_date=record.created_at,
        collector=collector_names.get(record.collector_key, settings.unknown_label),
    )
