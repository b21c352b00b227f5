from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

from app.utils.periods import DateWindow

R = TypeVar("R")
KeyFn = Callable[[Any], Hashable]

_TIME_BUCKET_FIELDS = ("year", "month", "day")


@dataclass
class GroupTotal:
    """Sum, count and optional average of ``amount`` for one group key."""

    key: Hashable
    total: float
    count: int
    avg: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.key, tuple):
            key: Any = dict(zip(_TIME_BUCKET_FIELDS, self.key))
        else:
            key = self.key
        data = {"key": key, "total": self.total, "count": self.count}
        if self.avg is not None:
            data["avg"] = self.avg
        return data


def round2(value: float) -> float:
    """Round half away from zero at the second decimal."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round0(value: float) -> int:
    """Round to a whole number with halves going up, so -12.5 becomes -12."""
    return math.floor(value + 0.5)


# Group key functions

def by_type(record: Any) -> str:
    return record.type


def by_category(record: Any) -> str:
    return record.category


def by_status(record: Any) -> str:
    return record.status


def by_month(record: Any) -> tuple:
    return (record.date.year, record.date.month)


def by_day(record: Any) -> tuple:
    return (record.date.year, record.date.month, record.date.day)


# Pipeline stages

def filter_by_window(
    records: Iterable[R],
    window: Optional[DateWindow],
    date_of: Callable[[R], Any] = lambda record: record.date,
) -> List[R]:
    if window is None:
        return list(records)
    return [record for record in records if window.contains(date_of(record))]


def filter_by_type(records: Iterable[R], transaction_type: str) -> List[R]:
    return [record for record in records if record.type == transaction_type]


def group_by(records: Iterable[R], key: KeyFn) -> Dict[Hashable, List[R]]:
    groups: Dict[Hashable, List[R]] = defaultdict(list)
    for record in records:
        groups[key(record)].append(record)
    return groups


def reduce_sum(key: Hashable, records: Sequence[Any], with_avg: bool = False) -> GroupTotal:
    total = sum(float(record.amount) for record in records)
    count = len(records)
    avg = None
    if with_avg:
        avg = total / count if count else 0.0
    return GroupTotal(key=key, total=total, count=count, avg=avg)


def aggregate(
    records: Iterable[Any],
    key: KeyFn,
    window: Optional[DateWindow] = None,
    with_avg: bool = False,
) -> List[GroupTotal]:
    """
    filter_by_window -> group_by -> reduce_sum, ordered by group key.
    Use ``sort_by_total`` for "top category" style reports.
    """
    groups = group_by(filter_by_window(records, window), key)
    return [reduce_sum(group_key, items, with_avg) for group_key, items in sorted(groups.items())]


def sort_by_total(groups: List[GroupTotal]) -> List[GroupTotal]:
    return sorted(groups, key=lambda group: group.total, reverse=True)


def grand_total(groups: Iterable[GroupTotal]) -> float:
    return sum(group.total for group in groups)


def lookup_total(groups: Iterable[GroupTotal], key: Hashable) -> float:
    """Total for ``key``, 0 when the key has no group."""
    for group in groups:
        if group.key == key:
            return group.total
    return 0


def lookup_count(groups: Iterable[GroupTotal], key: Hashable) -> int:
    for group in groups:
        if group.key == key:
            return group.count
    return 0
