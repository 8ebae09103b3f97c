"""Validate and record a single payment event."""

import logging
from decimal import Decimal
from uuid import UUID

from app.core.enums import FeeRecordStatus
from app.core.exceptions import InvalidAmountError, NotApplicableError
from app.core.money import has_sub_cent_digits, to_decimal

from .catalog import FeeTypeEntry
from .entities import CollectorRef, FeeRecord, StudentRef
from .resolver import ZERO, resolve_amount
from .store import FeeRecordStore

logger = logging.getLogger(__name__)


class PaymentRecorder:
    """
    Records payments through a FeeRecordStore.

    Each call is one fixed-amount event chosen by the caller; it does not look at earlier
    payments, and it never touches existing records. The record status reflects this
    record alone (paid vs its full amount); cumulative status belongs to the aggregator.
    """

    def __init__(self, store: FeeRecordStore, school_id: UUID) -> None:
        self.store = store
        self.school_id = school_id

    async def record_payment(
        self,
        student: StudentRef,
        fee_type: FeeTypeEntry,
        collector: CollectorRef,
        period: str,
        requested_amount,
    ) -> FeeRecord:
        if not fee_type.is_active:
            logger.info("Rejected payment for student %s: fee type %s is inactive", student.id, fee_type.id)
            raise NotApplicableError("This fee type is not active")

        full_amount = resolve_amount(student, fee_type)
        if full_amount <= ZERO:
            logger.info(
                "Rejected payment for student %s: fee type %s does not apply to class %s",
                student.id, fee_type.id, student.class_id,
            )
            raise NotApplicableError()

        amount: Decimal = to_decimal(requested_amount)
        if has_sub_cent_digits(amount):
            raise InvalidAmountError("Payment amount cannot have more than 2 decimal places")
        if amount <= ZERO:
            raise InvalidAmountError("Payment amount must be greater than zero")
        if amount > full_amount:
            raise InvalidAmountError(f"Payment amount cannot exceed {full_amount}")

        status = FeeRecordStatus.paid if amount >= full_amount else FeeRecordStatus.partial
        record = FeeRecord(
            id=None,
            school_id=self.school_id,
            student_id=student.id,
            fee_type_id=fee_type.id,
            amount=full_amount,
            paid=amount,
            due_date=fee_type.due_date,
            status=status,
            period=period,
            collector_type=collector.role,
            collector_id=collector.id,
        )
        saved = await self.store.insert(record)
        logger.info(
            "Recorded %s payment of %s/%s for student %s, fee type %s, period %s",
            saved.status.value, saved.paid, saved.amount, student.id, fee_type.id, period,
        )
        return saved
