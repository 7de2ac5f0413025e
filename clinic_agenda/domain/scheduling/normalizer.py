"""Reconcile the center's working hours with the appointment-booking window"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ...shared.settings_parser import format_hhmm, parse_time_setting
from .time_utils import MINUTES_PER_DAY

logger = logging.getLogger(__name__)

DEFAULT_CENTER_OPENS_AT = "09:00"
DEFAULT_CENTER_CLOSES_AT = "21:00"
MINIMUM_WORKING_SPAN_MINUTES = 60


@dataclass(frozen=True)
class ScheduleWindow:
    """Raw, possibly malformed or unset, time-of-day bounds"""

    center_opens_at: Optional[Any] = None
    center_closes_at: Optional[Any] = None
    appointment_opens_at: Optional[Any] = None
    appointment_closes_at: Optional[Any] = None


@dataclass(frozen=True)
class NormalizedSchedule:
    center_opens_at: str
    center_closes_at: str
    appointment_opens_at: str
    appointment_closes_at: str


def _to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def _from_minutes(total: int) -> str:
    return format_hhmm(total // 60, total % 60)


def normalize_schedule(window: ScheduleWindow) -> NormalizedSchedule:
    """
    Produce valid HH:MM bounds where the booking window lies within the working window.

    - every bound is parsed and clamped to a valid clock time, falling back to
      the defaults (working hours) or to the matching working bound (booking)
    - an inverted or empty working window is widened to one hour after opening
    - booking bounds are clamped into the working window; if that leaves an
      empty booking window, the booking window equals the working window
    """
    opens = parse_time_setting(window.center_opens_at, DEFAULT_CENTER_OPENS_AT).value
    closes = parse_time_setting(window.center_closes_at, DEFAULT_CENTER_CLOSES_AT).value

    open_minutes = _to_minutes(opens)
    close_minutes = _to_minutes(closes)
    if close_minutes <= open_minutes:
        close_minutes = min(open_minutes + MINIMUM_WORKING_SPAN_MINUTES, MINUTES_PER_DAY - 1)
        logger.warning(
            f"⚠️ Working hours {opens}-{closes} are inverted, closing moved to {_from_minutes(close_minutes)}"
        )
        closes = _from_minutes(close_minutes)

    appointment_open_minutes = _to_minutes(
        parse_time_setting(window.appointment_opens_at, opens).value
    )
    appointment_close_minutes = _to_minutes(
        parse_time_setting(window.appointment_closes_at, closes).value
    )

    appointment_open_minutes = min(max(appointment_open_minutes, open_minutes), close_minutes)
    appointment_close_minutes = min(max(appointment_close_minutes, open_minutes), close_minutes)

    if appointment_close_minutes <= appointment_open_minutes:
        appointment_open_minutes, appointment_close_minutes = open_minutes, close_minutes

    return NormalizedSchedule(
        center_opens_at=opens,
        center_closes_at=closes,
        appointment_opens_at=_from_minutes(appointment_open_minutes),
        appointment_closes_at=_from_minutes(appointment_close_minutes),
    )
