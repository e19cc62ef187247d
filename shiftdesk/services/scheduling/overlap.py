"""
Double-booking detection.
Intervals are half-open: [start, end). Touching endpoints never conflict.
"""

from datetime import datetime
from typing import Iterable, Protocol, Optional


class Interval(Protocol):
    person_id: int
    start: datetime
    end: datetime
    id: Optional[str]


def intervals_overlap(
    start1: datetime, end1: datetime,
    start2: datetime, end2: datetime
) -> bool:
    """Check if two half-open ranges overlap."""
    return start1 < end2 and end1 > start2


def find_conflicts(candidate: Interval, existing: Iterable[Interval]) -> list[Interval]:
    """
    Items in `existing` that the candidate would double-book.
    An item sharing the candidate's id is the candidate's own prior position
    and is skipped.
    """
    clashes = []
    for item in existing:
        if candidate.id is not None and item.id == candidate.id:
            continue
        if item.person_id != candidate.person_id:
            continue
        if intervals_overlap(candidate.start, candidate.end, item.start, item.end):
            clashes.append(item)
    return clashes


def conflicts(candidate: Interval, existing: Iterable[Interval]) -> bool:
    return len(find_conflicts(candidate, existing)) > 0
