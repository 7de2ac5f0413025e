"""
Time-of-day arithmetic on "HH:MM" strings.

Times are handled as minute offsets from midnight. Parsing is lenient:
leading integers are read from each component ("9" is 09:00, "10:30:00"
reads hours and minutes) and out-of-range values are not rejected here.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

WEEKDAY_LABELS = (
    ("Mon", 1),
    ("Tue", 2),
    ("Wed", 3),
    ("Thu", 4),
    ("Fri", 5),
    ("Sat", 6),
    ("Sun", 0),
)


def leading_int(part: str) -> Optional[int]:
    match = _LEADING_INT.match(part)
    return int(match.group(1)) if match else None


def _split_clock(time: str) -> tuple[Optional[int], Optional[int]]:
    parts = time.split(":")
    hour_part = parts[0]
    minute_part = parts[1] if len(parts) > 1 else "0"
    return leading_int(hour_part), leading_int(minute_part)


def parse_time_to_minutes(time: Optional[str]) -> Optional[int]:
    """
    Convert "H:MM" / "HH:MM" to minutes since midnight.

    Returns None for missing or unparseable input. A missing minute component
    counts as 0. Hours >= 24 or minutes >= 60 pass through numerically.
    """
    if not time:
        return None

    hours, minutes = _split_clock(time)
    if hours is None or minutes is None:
        return None

    return hours * 60 + minutes


def format_minutes(total_minutes: int) -> str:
    """Format a minute offset (wrapped into one day) as zero-padded HH:MM"""
    normalized = total_minutes % MINUTES_PER_DAY
    return f"{normalized // 60:02d}:{normalized % 60:02d}"


def add_minutes_to_time(time: str, minutes_to_add: int) -> str:
    """
    Add minutes to an "HH:MM" time, wrapping around midnight in both directions.

    The input is returned unchanged when its hour or minute cannot be parsed.
    """
    hours, minutes = _split_clock(time)
    if hours is None or minutes is None:
        return time

    return format_minutes(hours * 60 + minutes + minutes_to_add)


def clamp_minutes(value: float) -> int:
    """Clamp a minute offset into [0, MINUTES_PER_DAY - 1]"""
    if not math.isfinite(value):
        return 0
    if value < 0:
        return 0
    if value >= MINUTES_PER_DAY:
        return MINUTES_PER_DAY - 1
    return math.floor(value)


_CLOCK_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?$")


def parse_clock_minutes(value: object, fallback_minutes: float) -> int:
    """Strict "H[:MM]" parse clamped to a valid clock time; anything else yields the fallback"""
    if isinstance(value, str):
        match = _CLOCK_PATTERN.match(value.strip())
        if match:
            hours = min(max(int(match.group(1)), 0), 23)
            minutes = min(max(int(match.group(2) or 0), 0), 59)
            return hours * 60 + minutes

    return clamp_minutes(fallback_minutes)


@dataclass(frozen=True)
class CenterHourBounds:
    opening_hour: int
    client_closing_exclusive: int
    therapist_closing_exclusive: int
    center_closing_exclusive: int


def derive_center_hour_bounds(
    center_opens_at: str,
    center_closes_at: str,
    default_opening_hour: int = 9,
    default_closing_hour: int = 21,
    therapist_extra_hours: int = 1,
) -> CenterHourBounds:
    """
    Derive whole-hour grid bounds from the center's opening window.

    The center is open at least one hour. Client bookings stop an hour before
    closing; therapists get `therapist_extra_hours` past the client limit.
    """
    minimum_span = 60
    default_opening_minutes = clamp_minutes(default_opening_hour * 60)
    default_closing_minutes = clamp_minutes(default_closing_hour * 60)

    opening_minutes = parse_clock_minutes(center_opens_at, default_opening_minutes)
    raw_closing_minutes = parse_clock_minutes(center_closes_at, default_closing_minutes)
    ensured_closing_minutes = max(opening_minutes + minimum_span, raw_closing_minutes)

    opening_hour = max(0, min(23, opening_minutes // 60))
    center_closing_exclusive = min(
        24, max(opening_hour + 1, math.ceil(ensured_closing_minutes / 60))
    )

    buffered_closing_minutes = max(opening_minutes + minimum_span, ensured_closing_minutes - 60)
    buffered_closing_hour = buffered_closing_minutes // 60

    client_closing_exclusive = min(
        center_closing_exclusive, max(opening_hour + 1, buffered_closing_hour + 1)
    )
    therapist_closing_exclusive = min(
        24, max(center_closing_exclusive, client_closing_exclusive + therapist_extra_hours)
    )

    return CenterHourBounds(
        opening_hour=opening_hour,
        client_closing_exclusive=client_closing_exclusive,
        therapist_closing_exclusive=therapist_closing_exclusive,
        center_closing_exclusive=center_closing_exclusive,
    )


def build_day_options(open_on_saturday: bool, open_on_sunday: bool) -> list[dict]:
    """Monday-first day list; weekend days only when the center opens on them"""
    options = []
    for name, value in WEEKDAY_LABELS:
        if value == 6 and not open_on_saturday:
            continue
        if value == 0 and not open_on_sunday:
            continue
        options.append({"name": name, "value": value})
    return options


def build_hour_range(start_hour: float, exclusive_end_hour: float) -> list[int]:
    safe_start = max(0, min(23, math.floor(start_hour)))
    safe_end = max(safe_start + 1, min(24, math.floor(exclusive_end_hour)))
    return list(range(safe_start, safe_end))
