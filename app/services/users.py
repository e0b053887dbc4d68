from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import Conflict, NotFound
from app.models.user import User, UserStatus
from app.models.user_role import UserRole
from app.schemas.admin import UserCreate
from app.services.list_query import FilterField, ListResource, coerce_uuid, enum_coercer, run_list_query
from app.services.serialization import row_to_dict
from app.services.system_log import EVENT_CREATE, write_system_log
from app.services.uniqueness import is_unique
from app.services.validation import validate_payload

EMAIL_TAKEN_MESSAGE = "Email is already registered."
ROLE_MISSING_MESSAGE = "Selected role does not exist. Someone might have deleted it already."

USER_FIELDS = ("id", "is_trashed", "avatar", "name", "email", "status", "created_at", "last_sign_in_at")


def serialize_user(row: User, extras: Mapping[str, Any] | None = None) -> dict[str, Any]:
    payload = row_to_dict(row, fields=USER_FIELDS)
    role = row.role
    payload["role"] = {"id": str(role.id), "name": role.name} if role is not None else None
    return payload


USER_RESOURCE = ListResource(
    name="users",
    model=User,
    sort_fields={
        "name": User.name,
        "email": User.email,
        "role_name": UserRole.name,
        "status": User.status,
        "createdAt": User.created_at,
        "lastSignInAt": User.last_sign_in_at,
    },
    default_sort="name",
    serialize=serialize_user,
    fallback_sort="createdAt",
    search_columns=(User.name, User.email),
    filter_fields={
        "status": FilterField(User.status, enum_coercer(UserStatus)),
        "roleId": FilterField(User.role_id, coerce_uuid),
    },
    joins=(User.role,),
    options=(selectinload(User.role),),
)


def list_users_service(db: Session, params: Mapping[str, Any]) -> dict[str, Any]:
    lq = USER_RESOURCE.parse(params)
    return run_list_query(db, USER_RESOURCE, lq).envelope(lq, meta_key="pagination")


def create_user_service(db: Session, payload: Any, actor: User, client_ip: str) -> dict[str, Any]:
    data = validate_payload(UserCreate, payload)
    if not is_unique(db, User, {"email": data.email}, case_insensitive=True):
        raise Conflict(EMAIL_TAKEN_MESSAGE)
    if db.get(UserRole, data.role_id) is None:
        raise NotFound(ROLE_MISSING_MESSAGE)

    user = User(name=data.name, email=data.email, status=UserStatus.ACTIVE.value, role_id=data.role_id)
    try:
        # User row and its audit entry commit together or not at all.
        db.add(user)
        db.flush()
        write_system_log(
            db,
            event=EVENT_CREATE,
            user_id=actor.id,
            entity_id=user.id,
            entity_type="user",
            description="User added by user.",
            ip_address=client_ip,
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(EMAIL_TAKEN_MESSAGE, cause=exc)
    db.refresh(user)
    return {"message": "User successfully added.", "user": serialize_user(user)}
