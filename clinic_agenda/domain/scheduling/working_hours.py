"""
Sanitizing weekly time blocks (therapist working hours, client availability).

Blocks arrive from API bodies in camelCase or from storage in snake_case and
may carry out-of-range days or sloppy times. Records that cannot be tied to an
owner and a day are dropped.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "10:00"

_TIME_24H = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")
_TIME_WITH_SECONDS = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d:[0-5]\d$")
_LOOSE_TIME = re.compile(r"^(\d{1,2}):(\d{1,2})")

_DAY_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def _pick(record: Mapping, camel: str, snake: str) -> Any:
    value = record.get(camel)
    return value if value is not None else record.get(snake)


def _to_str_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str):
        trimmed = value.strip()
        return trimmed or None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    return None


def normalize_day_index(value: Any) -> Optional[int]:
    """Wrap any integer-like day into 0..6"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        raw = value
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        raw = int(value)
    else:
        match = _DAY_PATTERN.match(str(value))
        if not match:
            return None
        raw = int(match.group(1))
    return raw % 7


def normalize_time_value(value: Any, fallback: str) -> str:
    if isinstance(value, str):
        trimmed = value.strip()
        if _TIME_24H.match(trimmed):
            return trimmed
        if _TIME_WITH_SECONDS.match(trimmed):
            return trimmed[:5]

        parts = _LOOSE_TIME.match(trimmed)
        if parts:
            hours = min(23, max(0, int(parts.group(1))))
            minutes = min(59, max(0, int(parts.group(2))))
            return f"{hours:02d}:{minutes:02d}"

    return fallback


def sanitize_working_hours_record(record: Mapping, owner_field: str = "therapist_id") -> Optional[dict]:
    """
    Normalize one block to {owner_field, day_of_week, start_time, end_time}.

    `owner_field` is the snake_case owner key ("therapist_id" or "client_id");
    its camelCase variant is accepted too.
    """
    owner_camel = "".join(
        part.capitalize() if index else part for index, part in enumerate(owner_field.split("_"))
    )
    owner_id = _to_str_or_none(_pick(record, owner_camel, owner_field))
    day = normalize_day_index(_pick(record, "dayOfWeek", "day_of_week"))

    if not owner_id or day is None:
        return None

    return {
        owner_field: owner_id,
        "day_of_week": day,
        "start_time": normalize_time_value(_pick(record, "startTime", "start_time"), DEFAULT_START_TIME),
        "end_time": normalize_time_value(_pick(record, "endTime", "end_time"), DEFAULT_END_TIME),
    }


def sanitize_working_hours_collection(
    records: Any, owner_field: str = "therapist_id"
) -> list[dict]:
    """Sanitize every block and drop exact duplicates, keeping the first occurrence"""
    if not isinstance(records, Iterable) or isinstance(records, (str, bytes, Mapping)):
        return []

    seen = set()
    sanitized = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        normalized = sanitize_working_hours_record(record, owner_field)
        if normalized is None:
            continue

        key = (
            normalized[owner_field],
            normalized["day_of_week"],
            normalized["start_time"],
            normalized["end_time"],
        )
        if key in seen:
            continue
        seen.add(key)
        sanitized.append(normalized)

    return sanitized
