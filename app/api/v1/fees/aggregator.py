"""
Payment status and collection statistics derived from fee records.

Everything here is a pure function of (catalog, students, records): callers re-read the
records on every request and nothing is cached between calls.
Paid amounts for the same fee type in a period are always summed across records.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from app.core.config import settings
from app.core.enums import FeeRecordStatus, StudentPaymentStatus

from .catalog import FeeCatalog, FeeTypeEntry
from .entities import CollectorRef, FeeRecord, StudentRef
from .resolver import ZERO, resolve


def percentage(part: Decimal, whole: Decimal) -> int:
    """Whole-number percentage, rounded half up; 0 when whole is zero."""
    if whole == ZERO:
        return 0
    return int((part / whole * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _in_period(record: FeeRecord, period: Optional[str]) -> bool:
    return period is None or record.period == period


def _as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC datetime; naive input is taken to already be UTC."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


# --- Per student ---
@dataclass
class FeeGroup:
    """All records of one fee type for one student (and period), with the summed paid amount."""

    name: str
    fee_type_id: Optional[UUID]
    amount: Decimal
    paid: Decimal = ZERO
    due_date: Optional[date] = None
    last_payment_at: Optional[datetime] = None
    records: List[FeeRecord] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        return self.amount - self.paid

    @property
    def is_fully_paid(self) -> bool:
        return self.paid >= self.amount

    @property
    def status(self) -> FeeRecordStatus:
        if self.is_fully_paid:
            return FeeRecordStatus.paid
        if self.paid > ZERO:
            return FeeRecordStatus.partial
        return FeeRecordStatus.unpaid

    def add(self, record: FeeRecord) -> None:
        self.paid += record.paid
        self.records.append(record)
        if record.created_at is not None and (
            self.last_payment_at is None or _as_utc(record.created_at) > _as_utc(self.last_payment_at)
        ):
            self.last_payment_at = record.created_at


def fee_type_groups(
    student: StudentRef,
    records: Iterable[FeeRecord],
    catalog: FeeCatalog,
    period: Optional[str] = None,
) -> List[FeeGroup]:
    """
    Group a student's records by fee type name, then add an empty group for every active
    catalog fee type the student owes but has not paid anything towards.
    Fee types that resolve to zero for the student's class are left out entirely.
    Records pointing outside the catalog are labelled unknown but still grouped per fee type id,
    each group priced at its own first record.
    """
    # Catalog fee types are keyed by name, missing ones by fee type id
    groups: "OrderedDict[object, FeeGroup]" = OrderedDict()
    for record in records:
        if record.student_id != student.id or not _in_period(record, period):
            continue
        fee_type = catalog.get(record.fee_type_id)
        if fee_type is not None and not resolve(student, fee_type).applicable:
            continue
        key = fee_type.name if fee_type is not None else record.fee_type_id
        group = groups.get(key)
        if group is None:
            group = FeeGroup(
                name=catalog.name_for(record.fee_type_id),
                fee_type_id=record.fee_type_id,
                amount=record.amount,
                due_date=record.due_date,
            )
            groups[key] = group
        group.add(record)

    for fee_type in catalog.active():
        if fee_type.name in groups:
            continue
        resolved = resolve(student, fee_type)
        if not resolved.applicable:
            continue
        groups[fee_type.name] = FeeGroup(
            name=fee_type.name,
            fee_type_id=fee_type.id,
            amount=resolved.value,
            due_date=fee_type.due_date,
        )
    return list(groups.values())


def status_of_groups(groups: Sequence[FeeGroup]) -> StudentPaymentStatus:
    if groups and all(g.is_fully_paid for g in groups):
        return StudentPaymentStatus.full
    if any(g.paid > ZERO for g in groups):
        return StudentPaymentStatus.partial
    return StudentPaymentStatus.none


def student_fee_status(
    student: StudentRef,
    records: Iterable[FeeRecord],
    catalog: FeeCatalog,
    period: Optional[str] = None,
) -> StudentPaymentStatus:
    """
    full: every owed fee type is fully paid (needs at least one fee type).
    partial: something was paid but not everything is full.
    none: nothing paid, including no records at all.
    """
    return status_of_groups(fee_type_groups(student, records, catalog, period))


@dataclass
class StudentFeeSummary:
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal
    payment_percentage: int
    paid_fees: int
    partial_fees: int
    unpaid_fees: int
    status: StudentPaymentStatus
    groups: List[FeeGroup]


def student_fee_summary(
    student: StudentRef,
    records: Iterable[FeeRecord],
    catalog: FeeCatalog,
    period: Optional[str] = None,
) -> StudentFeeSummary:
    groups = fee_type_groups(student, records, catalog, period)
    total_due = sum((g.amount for g in groups), ZERO)
    total_paid = sum((g.paid for g in groups), ZERO)
    return StudentFeeSummary(
        total_due=total_due,
        total_paid=total_paid,
        balance=total_due - total_paid,
        payment_percentage=percentage(total_paid, total_due),
        paid_fees=sum(1 for g in groups if g.status is FeeRecordStatus.paid),
        partial_fees=sum(1 for g in groups if g.status is FeeRecordStatus.partial),
        unpaid_fees=sum(1 for g in groups if g.status is FeeRecordStatus.unpaid),
        status=status_of_groups(groups),
        groups=groups,
    )


# --- Per class ---
@dataclass
class ClassStatistics:
    total_fees: Decimal
    total_collected: Decimal
    pending_amount: Decimal
    payment_rate: int


def class_statistics(
    class_id: UUID,
    period: Optional[str],
    fee_types: Iterable[FeeTypeEntry],
    students: Iterable[StudentRef],
    records: Iterable[FeeRecord],
) -> ClassStatistics:
    """
    total_fees is planned revenue at list price: sum of nominal fee type amounts times the
    number of students, without class overrides. pending_amount can therefore go negative
    when overrides are above list price or payments exceed it.
    """
    student_ids = {s.id for s in students if s.class_id == class_id}
    nominal = sum((ft.amount for ft in fee_types), ZERO)
    total_fees = nominal * len(student_ids)
    total_collected = sum(
        (r.paid for r in records if r.student_id in student_ids and _in_period(r, period)),
        ZERO,
    )
    return ClassStatistics(
        total_fees=total_fees,
        total_collected=total_collected,
        pending_amount=total_fees - total_collected,
        payment_rate=percentage(total_collected, total_fees),
    )


@dataclass
class FeeTypeBreakdown:
    fee_type_id: UUID
    name: str
    amount: Decimal
    due_date: Optional[date]
    total_collected: Decimal
    pending: Decimal
    payment_rate: int
    paid_count: int
    partial_count: int
    unpaid_count: int


def fee_type_breakdown(
    fee_types: Iterable[FeeTypeEntry],
    students: Sequence[StudentRef],
    records: Iterable[FeeRecord],
    period: Optional[str] = None,
) -> List[FeeTypeBreakdown]:
    """Per fee type collection across a group of students. Potential is nominal amount x students."""
    student_ids = {s.id for s in students}
    paid_by: Dict[tuple, Decimal] = {}
    amount_by: Dict[tuple, Decimal] = {}
    for r in records:
        if r.student_id not in student_ids or not _in_period(r, period):
            continue
        key = (r.student_id, r.fee_type_id)
        paid_by[key] = paid_by.get(key, ZERO) + r.paid
        amount_by.setdefault(key, r.amount)

    out = []
    for ft in fee_types:
        collected = ZERO
        paid_count = partial_count = unpaid_count = 0
        for s in students:
            key = (s.id, ft.id)
            paid = paid_by.get(key, ZERO)
            collected += paid
            resolved = resolve(s, ft)
            if not resolved.applicable and key not in paid_by:
                continue
            owed = amount_by.get(key, resolved.value)
            if key in paid_by and paid >= owed:
                paid_count += 1
            elif paid > ZERO:
                partial_count += 1
            else:
                unpaid_count += 1
        potential = ft.amount * len(students)
        out.append(
            FeeTypeBreakdown(
                fee_type_id=ft.id,
                name=ft.name,
                amount=ft.amount,
                due_date=ft.due_date,
                total_collected=collected,
                pending=potential - collected,
                payment_rate=percentage(collected, potential),
                paid_count=paid_count,
                partial_count=partial_count,
                unpaid_count=unpaid_count,
            )
        )
    return out


# --- Per collector ---
@dataclass
class CollectorStatistic:
    collector_type: str
    collector_id: UUID
    collector_name: str
    total_collected: Decimal = ZERO
    fee_types: Dict[str, Decimal] = field(default_factory=dict)


def collector_statistics(
    records: Iterable[FeeRecord],
    collectors: Iterable[CollectorRef],
    catalog: FeeCatalog,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[CollectorStatistic]:
    """
    Money collected per collector, split by fee type name, for records created in [start, end].
    A (role, id) pair missing from the directory is still counted, under the unknown label.
    """
    names = {c.key: c.name for c in collectors}
    start, end = _as_utc(start), _as_utc(end)
    stats: "OrderedDict[tuple, CollectorStatistic]" = OrderedDict()
    for r in records:
        created_at = _as_utc(r.created_at)
        if created_at is not None:
            if start is not None and created_at < start:
                continue
            if end is not None and created_at > end:
                continue
        key = r.collector_key
        stat = stats.get(key)
        if stat is None:
            stat = CollectorStatistic(
                collector_type=r.collector_type.value,
                collector_id=r.collector_id,
                collector_name=names.get(key, settings.unknown_label),
            )
            stats[key] = stat
        stat.total_collected += r.paid
        fee_name = catalog.name_for(r.fee_type_id)
        stat.fee_types[fee_name] = stat.fee_types.get(fee_name, ZERO) + r.paid
    return list(stats.values())
