"""
Explicit parsers for loosely typed stored settings.

Stored setting values come from JSON columns and may be booleans, numbers or
strings ("si", "1", "09:00:00"...). Each parser returns a ParseResult that
says whether the raw value was understood or the fallback was used, and why.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

TRUE_STRINGS = frozenset({"true", "1", "yes", "si", "sí"})
FALSE_STRINGS = frozenset({"false", "0", "no"})

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    value: T
    used_fallback: bool = False
    reason: Optional[str] = None

    @classmethod
    def parsed(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "ParseResult[T]":
        return cls(value=value, used_fallback=True, reason=reason)


def format_hhmm(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def parse_bool_setting(raw: Any, fallback: bool) -> ParseResult[bool]:
    """Coerce a stored value to bool: bools, numbers (non-zero is true) and yes/no strings."""
    if raw is None:
        return ParseResult.fallback(fallback, "missing")
    # bool is checked before numbers because bool is an int subclass
    if isinstance(raw, bool):
        return ParseResult.parsed(raw)
    if isinstance(raw, (int, float)):
        return ParseResult.parsed(raw != 0)
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in TRUE_STRINGS:
            return ParseResult.parsed(True)
        if normalized in FALSE_STRINGS:
            return ParseResult.parsed(False)
        return ParseResult.fallback(fallback, f"unrecognized boolean string {raw!r}")
    return ParseResult.fallback(fallback, f"unsupported type {type(raw).__name__}")


def parse_time_setting(raw: Any, fallback: str) -> ParseResult[str]:
    """
    Coerce a stored value to a zero-padded HH:MM string.

    Accepts "H:MM", "HH:MM" and "HH:MM:SS" (seconds dropped) with hours clamped
    to 0..23 and minutes to 0..59, or a number taken as whole hours.
    """
    if raw is None:
        return ParseResult.fallback(fallback, "missing")
    if isinstance(raw, bool):
        return ParseResult.fallback(fallback, "boolean is not a time")
    if isinstance(raw, str):
        match = _TIME_PATTERN.match(raw.strip())
        if not match:
            return ParseResult.fallback(fallback, f"unrecognized time string {raw!r}")
        hours = min(23, max(0, int(match.group(1))))
        minutes = min(59, max(0, int(match.group(2))))
        return ParseResult.parsed(format_hhmm(hours, minutes))
    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            return ParseResult.fallback(fallback, "not a finite number")
        hours = min(23, max(0, math.floor(raw)))
        return ParseResult.parsed(format_hhmm(hours, 0))
    return ParseResult.fallback(fallback, f"unsupported type {type(raw).__name__}")
