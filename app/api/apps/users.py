from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.core.deps import get_current_actor
from app.core.errors import error_boundary
from app.db.session import get_db
from app.models.user import User
from app.services.client_address import get_client_ip
from app.services.users import create_user_service, list_users_service

router = APIRouter()


@router.get("")
def list_users(request: Request, db: Session = Depends(get_db)):
    with error_boundary("list users"):
        return list_users_service(db, request.query_params)


@router.post("")
def create_user(
    request: Request,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_actor),
):
    with error_boundary("create user"):
        return create_user_service(db, payload, actor, get_client_ip(request))
