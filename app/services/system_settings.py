from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.common import utcnow
from app.models.system_setting import SystemSetting
from app.models.user import User
from app.schemas.admin import SocialSettingsUpdate
from app.services.serialization import row_to_dict
from app.services.system_log import EVENT_UPDATE, write_system_log
from app.services.validation import validate_payload

SETTINGS_MISSING_MESSAGE = "Settings not found."


def _current_settings(db: Session) -> SystemSetting | None:
    return db.query(SystemSetting).order_by(SystemSetting.created_at.asc()).first()


def get_settings_service(db: Session) -> dict[str, Any]:
    row = _current_settings(db)
    if row is None:
        raise NotFound(SETTINGS_MISSING_MESSAGE)
    return row_to_dict(row)


def update_social_settings_service(db: Session, payload: Any, actor: User, client_ip: str) -> dict[str, Any]:
    row = _current_settings(db)
    if row is None:
        raise NotFound(SETTINGS_MISSING_MESSAGE)
    data = validate_payload(SocialSettingsUpdate, payload)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    row.updated_at = utcnow()
    db.add(row)
    write_system_log(
        db,
        event=EVENT_UPDATE,
        user_id=actor.id,
        entity_id=row.id,
        entity_type="system.settings",
        description="System settings updated.",
        ip_address=client_ip,
    )
    db.commit()
    return {"message": "Social settings updated successfully"}
