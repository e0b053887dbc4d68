from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict
from app.models.ecommerce_category import CategoryStatus, EcommerceCategory
from app.models.ecommerce_product import EcommerceProduct
from app.models.user import User
from app.schemas.admin import CategoryCreate
from app.schemas.listing import PageResult
from app.services.list_query import FilterField, ListResource, enum_coercer, run_list_query
from app.services.serialization import row_to_dict
from app.services.system_log import EVENT_CREATE, write_system_log
from app.services.uniqueness import is_unique
from app.services.validation import validate_payload

DUPLICATE_MESSAGE = "Name and slug must be unique."

PRODUCT_COUNT = (
    select(func.count(EcommerceProduct.id))
    .where(EcommerceProduct.category_id == EcommerceCategory.id)
    .correlate(EcommerceCategory)
    .scalar_subquery()
)

CATEGORY_FIELDS = ("id", "name", "slug", "description", "status", "created_at")


def serialize_category(row: EcommerceCategory, extras: Mapping[str, Any]) -> dict[str, Any]:
    payload = row_to_dict(row, fields=CATEGORY_FIELDS)
    payload["productCount"] = int(extras.get("product_count") or 0)
    return payload


CATEGORY_RESOURCE = ListResource(
    name="categories",
    model=EcommerceCategory,
    sort_fields={
        "name": EcommerceCategory.name,
        "slug": EcommerceCategory.slug,
        "status": EcommerceCategory.status,
        "createdAt": EcommerceCategory.created_at,
        "productCount": PRODUCT_COUNT,
    },
    default_sort="name",
    serialize=serialize_category,
    search_columns=(EcommerceCategory.name, EcommerceCategory.description),
    filter_fields={"status": FilterField(EcommerceCategory.status, enum_coercer(CategoryStatus))},
    aggregates={"product_count": PRODUCT_COUNT},
)


def list_categories_service(db: Session, params: Mapping[str, Any]) -> dict[str, Any]:
    lq = CATEGORY_RESOURCE.parse(params)
    result: PageResult = run_list_query(db, CATEGORY_RESOURCE, lq)
    return result.envelope(lq, meta_key="meta")


def create_category_service(db: Session, payload: Any, actor: User, client_ip: str) -> dict[str, Any]:
    data = validate_payload(CategoryCreate, payload)
    if not is_unique(db, EcommerceCategory, {"slug": data.slug, "name": data.name}):
        raise Conflict(DUPLICATE_MESSAGE)

    row = EcommerceCategory(
        name=data.name,
        slug=data.slug,
        description=data.description,
        status=CategoryStatus.ACTIVE.value,
        created_by_user_id=actor.id,
    )
    try:
        db.add(row)
        db.flush()
        write_system_log(
            db,
            event=EVENT_CREATE,
            user_id=actor.id,
            entity_id=row.id,
            entity_type="category",
            description="Category created by user",
            ip_address=client_ip,
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(DUPLICATE_MESSAGE, cause=exc)
    db.refresh(row)
    return serialize_category(row, {"product_count": 0})
