"""ORM row -> camelCase API payload"""

from typing import Any, Iterable

from .case_convert import to_camel_case


def row_to_dict(row: Any) -> dict:
    """Column values of a mapped row keyed by column name (snake_case)"""
    return {column.name: getattr(row, column.key, None) for column in row.__table__.columns}


def serialize_row(row: Any, **extra) -> dict:
    payload = row_to_dict(row)
    payload.update(extra)
    return to_camel_case(payload)


def serialize_rows(rows: Iterable[Any]) -> list[dict]:
    return [serialize_row(row) for row in rows]
