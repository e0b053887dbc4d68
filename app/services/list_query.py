"""
Generic list pipeline shared by every "list resource" endpoint.

    params -> ListQuery -> FilterExpression -> count -> (unfiltered count) -> fetch -> rows

A ``ListResource`` describes one table: which API sort names map to which
expressions, which columns take part in the free-text search, which query
parameters are exact-match filters and how their raw values are coerced,
and how a fetched row is turned into a response dict.
"""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from sqlalchemy import and_, asc, desc, func, or_, true
from sqlalchemy.orm import Session

from app.core.errors import ValidationFailed
from app.schemas.listing import ListQuery, PageResult

ALL_SENTINEL = "all"
LIKE_ESCAPE = "\\"

Coercer = Callable[[str, str], Any]
RowSerializer = Callable[[Any, Mapping[str, Any]], dict]


def _bad_filter_value(param: str) -> ValidationFailed:
    return ValidationFailed(f'Invalid value for filter "{param}".')


def coerce_uuid(param: str, raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw).strip())
    except ValueError:
        raise _bad_filter_value(param)


def enum_coercer(enum_cls: type[enum.Enum]) -> Coercer:
    def _coerce(param: str, raw: str) -> str:
        text = str(raw).strip().upper()
        allowed = {member.value for member in enum_cls}
        if text not in allowed:
            raise _bad_filter_value(param)
        return text

    return _coerce


def is_unset_filter(raw: str | None) -> bool:
    if raw is None:
        return True
    text = str(raw).strip()
    return not text or text == ALL_SENTINEL


def _escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


@dataclass(frozen=True)
class FilterExpression:
    exact: tuple = ()
    search: tuple = ()

    @property
    def is_empty(self) -> bool:
        return not self.exact and not self.search

    def clause(self):
        parts = list(self.exact)
        if self.search:
            parts.append(or_(*self.search))
        if not parts:
            return true()
        return and_(*parts)


class FilterBuilder:
    def __init__(self) -> None:
        self._exact: list = []
        self._search: list = []

    def equals(self, column, value) -> "FilterBuilder":
        if value is not None:
            self._exact.append(column == value)
        return self

    def search(self, columns: Sequence[Any], text: str | None) -> "FilterBuilder":
        needle = str(text or "")
        if not needle:
            return self
        pattern = f"%{_escape_like(needle)}%"
        self._search.extend(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns)
        return self

    def build(self) -> FilterExpression:
        return FilterExpression(exact=tuple(self._exact), search=tuple(self._search))


@dataclass(frozen=True)
class FilterField:
    column: Any
    coerce: Coercer | None = None


@dataclass(frozen=True)
class ListResource:
    name: str
    model: Any
    sort_fields: Mapping[str, Any]
    default_sort: str
    serialize: RowSerializer
    # Used for sort names outside the allow-list; defaults to default_sort.
    fallback_sort: str | None = None
    search_columns: Sequence[Any] = ()
    filter_fields: Mapping[str, FilterField] = field(default_factory=dict)
    aggregates: Mapping[str, Any] = field(default_factory=dict)
    joins: Sequence[Any] = ()
    options: Sequence[Any] = ()

    def parse(self, params: Mapping[str, Any]) -> ListQuery:
        return ListQuery.from_params(params, tuple(self.filter_fields))


def build_filter(resource: ListResource, lq: ListQuery) -> FilterExpression:
    builder = FilterBuilder()
    for param, filter_field in resource.filter_fields.items():
        raw = lq.filters.get(param)
        if is_unset_filter(raw):
            continue
        value = filter_field.coerce(param, raw) if filter_field.coerce else str(raw).strip()
        builder.equals(filter_field.column, value)
    builder.search(resource.search_columns, lq.search)
    return builder.build()


def resolve_sort_field(resource: ListResource, lq: ListQuery) -> str:
    if not lq.sort_field:
        return resource.default_sort
    if lq.sort_field in resource.sort_fields:
        return lq.sort_field
    return resource.fallback_sort or resource.default_sort


def resolve_order_by(resource: ListResource, lq: ListQuery) -> list:
    expr = resource.sort_fields[resolve_sort_field(resource, lq)]
    direction = desc if lq.sort_dir == "desc" else asc
    # Primary key keeps pages stable when the sort column has ties.
    return [direction(expr), asc(resource.model.id)]


def _joined(query, resource: ListResource):
    for target in resource.joins:
        query = query.outerjoin(target)
    return query


def count_rows(db: Session, resource: ListResource, expression: FilterExpression | None = None) -> int:
    query = db.query(func.count(resource.model.id)).select_from(resource.model)
    if expression is not None and not expression.is_empty:
        query = _joined(query, resource).filter(expression.clause())
    return int(query.scalar() or 0)


def fetch_rows(db: Session, resource: ListResource, lq: ListQuery, expression: FilterExpression) -> list[dict]:
    labels = [expr.label(name) for name, expr in resource.aggregates.items()]
    query = _joined(db.query(resource.model, *labels), resource)
    if resource.options:
        query = query.options(*resource.options)
    rows = (
        query.filter(expression.clause())
        .order_by(*resolve_order_by(resource, lq))
        .offset(lq.offset)
        .limit(lq.limit)
        .all()
    )
    items = []
    for row in rows:
        if labels:
            entity = row[0]
            extras = {name: row._mapping[name] for name in resource.aggregates}
        else:
            entity = row
            extras = {}
        items.append(resource.serialize(entity, extras))
    return items


def run_list_query(db: Session, resource: ListResource, lq: ListQuery) -> PageResult:
    expression = build_filter(resource, lq)
    total = count_rows(db, resource, expression)
    if total == 0:
        overall = total if expression.is_empty else count_rows(db, resource)
        return PageResult(items=[], total=0, is_empty_overall=overall == 0)
    return PageResult(items=fetch_rows(db, resource, lq, expression), total=total, is_empty_overall=False)
