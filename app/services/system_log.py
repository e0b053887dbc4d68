from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from app.models.system_log import SystemLog

logger = logging.getLogger(__name__)

EVENT_CREATE = "create"
EVENT_UPDATE = "update"


def _uuid_or_none(raw: str | uuid.UUID | None) -> uuid.UUID | None:
    if raw is None:
        return None
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


def write_system_log(
    db: Session,
    *,
    event: str,
    user_id: str | uuid.UUID | None,
    entity_id: str | uuid.UUID,
    entity_type: str,
    description: str | None = None,
    ip_address: str | None = None,
) -> SystemLog:
    """Add an audit record to the caller's session; committing is up to the caller."""
    row = SystemLog(
        event=str(event or "").strip().lower() or EVENT_UPDATE,
        user_id=_uuid_or_none(user_id),
        entity_id=str(entity_id),
        entity_type=str(entity_type or "").strip(),
        description=description,
        ip_address=(str(ip_address or "").strip()[:64] or None),
    )
    db.add(row)
    db.flush()
    logger.info(
        "system_log event=%s entity_type=%s entity_id=%s user_id=%s ip=%s",
        row.event,
        row.entity_type,
        row.entity_id,
        row.user_id or "-",
        row.ip_address or "-",
    )
    return row
