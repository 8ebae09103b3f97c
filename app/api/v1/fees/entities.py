"""Plain value types the fee ledger works on. Independent of the ORM so the ledger logic stays pure."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.core.enums import CollectorRole, FeeRecordStatus


@dataclass(frozen=True)
class StudentRef:
    id: UUID
    class_id: Optional[UUID]
    name: str = ""
    roll_no: Optional[str] = None

    @classmethod
    def from_model(cls, student) -> "StudentRef":
        return cls(
            id=student.id,
            class_id=student.class_id,
            name=student.full_name,
            roll_no=student.roll_no,
        )


@dataclass(frozen=True)
class CollectorRef:
    id: UUID
    role: CollectorRole
    name: str = ""

    @property
    def key(self) -> tuple:
        return (self.role.value, self.id)

    @classmethod
    def from_model(cls, collector) -> "CollectorRef":
        return cls(id=collector.id, role=CollectorRole(collector.role), name=collector.name)


@dataclass(frozen=True)
class FeeRecord:
    """One payment event. paid <= amount always holds."""

    id: Optional[UUID]
    school_id: UUID
    student_id: UUID
    fee_type_id: UUID
    amount: Decimal
    paid: Decimal
    due_date: Optional[date]
    status: FeeRecordStatus
    period: str
    collector_type: CollectorRole
    collector_id: UUID
    created_at: Optional[datetime] = None

    @property
    def collector_key(self) -> tuple:
        return (self.collector_type.value, self.collector_id)


@dataclass(frozen=True)
class ClassRef:
    id: UUID
    name: str
    grade: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.name} - {self.grade}" if self.grade else self.name

    @classmethod
    def from_model(cls, school_class) -> "ClassRef":
        return cls(id=school_class.id, name=school_class.name, grade=school_class.grade)
