from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.core.deps import get_current_actor
from app.core.errors import error_boundary
from app.db.session import get_db
from app.models.user import User
from app.services.client_address import get_client_ip
from app.services.system_settings import get_settings_service, update_social_settings_service

router = APIRouter()


@router.get("")
def get_settings(db: Session = Depends(get_db)):
    with error_boundary("read system settings"):
        return get_settings_service(db)


@router.post("/social")
def update_social_settings(
    request: Request,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_actor),
):
    with error_boundary("update social settings"):
        return update_social_settings_service(db, payload, actor, get_client_ip(request))
