from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, or_
from sqlalchemy.orm import Session


def is_unique(db: Session, model: type, fields: Mapping[str, Any], *, case_insensitive: bool = False) -> bool:
    """True when no existing row matches any of the given field/value pairs.

    This is a pre-check only; the unique indexes in the database stay authoritative.
    """
    conditions = []
    for name, value in fields.items():
        if value is None:
            continue
        column = getattr(model, name)
        if case_insensitive and isinstance(value, str):
            conditions.append(func.lower(column) == value.lower())
        else:
            conditions.append(column == value)
    if not conditions:
        return True
    return db.query(model.id).filter(or_(*conditions)).first() is None
