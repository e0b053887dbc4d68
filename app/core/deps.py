import uuid

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.errors import Unauthorized, error_boundary
from app.core.security import subject_from_token
from app.db.session import get_db
from app.models.user import User, UserStatus

bearer = HTTPBearer(auto_error=False)

def resolve_current_actor(db: Session, token: str | None) -> User | None:
    if not token:
        return None
    sub = subject_from_token(token)
    if sub is None:
        return None
    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        return None
    user = db.get(User, user_id)
    if user is None or user.is_trashed or user.status != UserStatus.ACTIVE.value:
        return None
    return user

def get_current_actor(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    with error_boundary("resolve current actor"):
        actor = resolve_current_actor(db, creds.credentials if creds else None)
    if actor is None:
        raise Unauthorized()
    return actor
