from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.errors import error_boundary
from app.db.session import get_db
from app.services.roles import list_roles_service, select_roles_service

router = APIRouter()


@router.get("")
def list_roles(request: Request, db: Session = Depends(get_db)):
    with error_boundary("list roles"):
        return list_roles_service(db, request.query_params)


@router.get("/select")
def select_roles(db: Session = Depends(get_db)):
    with error_boundary("select roles"):
        return select_roles_service(db)
