"""Month view occupancy grid: which appointment holds each therapist/day/hour cell"""

import calendar
from collections.abc import Iterable
from datetime import date
from typing import Any

from .stats import CANCELLED, coerce_date, record_field
from .time_utils import leading_int


def _hour_of(time_value: Any) -> int:
    if not isinstance(time_value, str):
        return 0
    return leading_int(time_value.split(":")[0]) or 0


def build_occupancy_grid(appointments: Iterable[Any], year: int, month: int) -> dict[str, str]:
    """
    Map "therapist_id|YYYY-MM-DD|hour" to the id of the appointment occupying that hour.

    Cancelled appointments and those outside the month are skipped. An
    appointment covers whole hours from its start hour up to (excluding) its
    end hour; later appointments overwrite earlier ones in the same cell.
    """
    month_start = date(year, month, 1)
    month_end = date(year, month, calendar.monthrange(year, month)[1])

    grid: dict[str, str] = {}
    for appointment in appointments:
        if record_field(appointment, "status") == CANCELLED:
            continue

        appointment_date = coerce_date(record_field(appointment, "date"))
        if appointment_date is None or not (month_start <= appointment_date <= month_end):
            continue

        start_hour = _hour_of(record_field(appointment, "start_time"))
        end_hour = max(start_hour, _hour_of(record_field(appointment, "end_time")))
        therapist_id = record_field(appointment, "therapist_id")
        date_key = appointment_date.isoformat()

        for hour in range(start_hour, end_hour):
            grid[f"{therapist_id}|{date_key}|{hour}"] = record_field(appointment, "id")

    return grid
