"""
Shift provisioning: one work shift per selected date for a center.
"""

import logging
from datetime import date
from typing import Iterable, Optional, Union

from .backend import SchedulingBackend
from .errors import ValidationError
from .time_grid import format_hhmm, parse_date_key, parse_hhmm
from .types import WorkShift


logger = logging.getLogger(__name__)


def normalize_dates(dates: Iterable[Union[str, date]]) -> list[date]:
    """Distinct calendar dates, sorted."""
    return sorted({parse_date_key(d) for d in dates})


def validate_provisioning(
    center_id: Optional[int],
    dates: Iterable[Union[str, date]],
    start_time: str,
    end_time: str,
) -> list[date]:
    if center_id is None:
        raise ValidationError("Choose a center")
    normalized = normalize_dates(dates)
    if not normalized:
        raise ValidationError("Choose at least one date")
    if parse_hhmm(start_time) >= parse_hhmm(end_time):
        raise ValidationError("Start time must be before end time")
    return normalized


def provision_shifts(
    backend: SchedulingBackend,
    center_id: Optional[int],
    dates: Iterable[Union[str, date]],
    start_time: str,
    end_time: str,
) -> list[WorkShift]:
    """
    Create the shifts for a center across the given dates in one batch call.

    Raises:
        ValidationError: missing center, no dates, or start >= end
        RemoteError: the backend refused the batch
    """
    normalized = validate_provisioning(center_id, dates, start_time, end_time)
    shifts = backend.create_workshifts_bulk(
        center_id,
        normalized,
        format_hhmm(parse_hhmm(start_time)),
        format_hhmm(parse_hhmm(end_time)),
    )
    logger.info(f"Provisioned {len(shifts)} shifts for center {center_id}")
    return shifts
