from datetime import date, time
from typing import Any

from shiftdesk.services.scheduling.errors import SchedulingError
from shiftdesk.services.scheduling.time_grid import format_hhmm, parse_date_key


def coerce_date(value: Any) -> date:
    """Accept YYYY-MM-DD or an ISO timestamp from the dashboard date picker."""
    try:
        return parse_date_key(value)
    except SchedulingError as e:
        raise ValueError(str(e))


def hhmm(value: time) -> str:
    return format_hhmm(value)
