from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from pydantic.alias_generators import to_camel
from sqlalchemy.inspection import inspect as sa_inspect


def serialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def row_to_dict(row: Any, *, fields: Iterable[str] | None = None, exclude: Iterable[str] = ()) -> dict[str, Any]:
    """Column values of an ORM row keyed by camelCase names, ready for JSON."""
    mapper = sa_inspect(type(row))
    keys = list(fields) if fields is not None else [column.key for column in mapper.columns]
    skipped = set(exclude)
    return {to_camel(key): serialize_value(getattr(row, key)) for key in keys if key not in skipped}
