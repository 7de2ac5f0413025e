"""Shared validation utilities"""

import re
from typing import Optional

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address, or None for blank input

    Raises:
        ValueError: If email format is invalid
    """
    if email is None:
        return None

    email = email.strip().lower()
    if not email:
        return None

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def validate_hex_color(color: Optional[str]) -> Optional[str]:
    """Validate a #RRGGBB calendar color, returning it uppercased"""
    if color is None:
        return None

    color = color.strip()
    if not HEX_COLOR_PATTERN.match(color):
        raise ValueError("Color must be a hex value like #3B82F6")

    return color.upper()


def validate_day_of_week(day: int) -> int:
    """Days are stored 0=Sunday .. 6=Saturday"""
    if day < 0 or day > 6:
        raise ValueError("dayOfWeek must be between 0 (Sunday) and 6 (Saturday)")
    return day
