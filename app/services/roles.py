from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.user_role import UserRole
from app.services.list_query import ListResource, run_list_query
from app.services.serialization import row_to_dict

USER_COUNT = (
    select(func.count(User.id))
    .where(User.role_id == UserRole.id)
    .correlate(UserRole)
    .scalar_subquery()
)


def serialize_role(row: UserRole, extras: Mapping[str, Any]) -> dict[str, Any]:
    payload = row_to_dict(row, exclude=("updated_at",))
    payload["userCount"] = int(extras.get("user_count") or 0)
    return payload


ROLE_RESOURCE = ListResource(
    name="roles",
    model=UserRole,
    sort_fields={
        "name": UserRole.name,
        "slug": UserRole.slug,
        "createdAt": UserRole.created_at,
        "userCount": USER_COUNT,
    },
    default_sort="name",
    serialize=serialize_role,
    search_columns=(UserRole.name, UserRole.description),
    aggregates={"user_count": USER_COUNT},
)


def list_roles_service(db: Session, params: Mapping[str, Any]) -> dict[str, Any]:
    lq = ROLE_RESOURCE.parse(params)
    return run_list_query(db, ROLE_RESOURCE, lq).envelope(lq, meta_key="meta")


def select_roles_service(db: Session) -> list[dict[str, Any]]:
    rows = db.query(UserRole.id, UserRole.name).order_by(UserRole.name.asc()).all()
    return [{"id": str(row.id), "name": row.name} for row in rows]
