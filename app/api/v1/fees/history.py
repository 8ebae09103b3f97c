"""Group a student's fee records by academic period for history views and statements."""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Tuple

from .entities import FeeRecord


class PeriodHistory(Mapping):
    """
    Read-only mapping of period label -> records, in order of first appearance.

    Holds only the record tuple; the grouping is recomputed on every access, so the view
    can be iterated any number of times and never mutates its input.
    Callers wanting chronological periods sort the keys themselves.
    """

    def __init__(self, records: Iterable[FeeRecord]) -> None:
        self._records: Tuple[FeeRecord, ...] = tuple(records)

    def _groups(self) -> Dict[str, List[FeeRecord]]:
        groups: Dict[str, List[FeeRecord]] = {}
        for record in self._records:
            groups.setdefault(record.period, []).append(record)
        return groups

    def __getitem__(self, period: str) -> List[FeeRecord]:
        records = [r for r in self._records if r.period == period]
        if not records:
            raise KeyError(period)
        return records

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups())

    def __len__(self) -> int:
        return len({r.period for r in self._records})

    @property
    def records(self) -> Tuple[FeeRecord, ...]:
        return self._records

    def only(self, period: str) -> "PeriodHistory":
        """History restricted to a single period (empty when the period has no records)."""
        return PeriodHistory(r for r in self._records if r.period == period)


def group_by_period(records: Iterable[FeeRecord]) -> PeriodHistory:
    return PeriodHistory(records)
