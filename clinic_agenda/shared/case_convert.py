"""Recursive key renaming between snake_case (storage) and camelCase (API)"""

import re
from datetime import date, datetime, time
from typing import Callable, Union

JSONPrimitive = Union[str, int, float, bool, None, date, datetime, time]
JSONValue = Union[JSONPrimitive, list["JSONValue"], dict[str, "JSONValue"]]

_SNAKE_SEGMENT = re.compile(r"_([a-z])")
_UPPER_LETTER = re.compile(r"[A-Z]")


def snake_to_camel(key: str) -> str:
    """first_name -> firstName"""
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), key)


def camel_to_snake(key: str) -> str:
    """firstName -> first_name"""
    return _UPPER_LETTER.sub(lambda match: f"_{match.group(0).lower()}", key)


def _rename_keys(value: JSONValue, rename: Callable[[str], str]) -> JSONValue:
    if isinstance(value, dict):
        return {rename(key): _rename_keys(item, rename) for key, item in value.items()}
    if isinstance(value, list):
        return [_rename_keys(item, rename) for item in value]
    return value


def to_camel_case(value: JSONValue) -> JSONValue:
    """Rename every object key in a JSON-like tree to camelCase. Leaves are untouched."""
    return _rename_keys(value, snake_to_camel)


def to_snake_case(value: JSONValue) -> JSONValue:
    """Rename every object key in a JSON-like tree to snake_case. Leaves are untouched."""
    return _rename_keys(value, camel_to_snake)
