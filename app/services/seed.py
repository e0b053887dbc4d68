from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.models.system_setting import SystemSetting
from app.models.user import User, UserStatus
from app.models.user_role import UserRole

logger = logging.getLogger(__name__)

ADMIN_ROLE_SLUG = "admin"


@dataclass
class SeedSummary:
    roles_created: int = 0
    users_created: int = 0
    settings_created: int = 0


def ensure_admin_role(db: Session, summary: SeedSummary) -> UserRole:
    role = db.query(UserRole).filter(UserRole.slug == ADMIN_ROLE_SLUG).first()
    if role is not None:
        return role
    role = UserRole(
        slug=ADMIN_ROLE_SLUG,
        name="Administrator",
        description="System Administrator",
        is_protected=True,
        is_default=False,
    )
    db.add(role)
    db.flush()
    summary.roles_created += 1
    return role


def ensure_admin_user(db: Session, role: UserRole, summary: SeedSummary) -> User:
    email = str(settings.SEED_ADMIN_EMAIL or "").strip().lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()
    if user is not None:
        return user
    user = User(
        email=email,
        password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
        name=settings.SEED_ADMIN_NAME,
        role_id=role.id,
        status=UserStatus.ACTIVE.value,
        is_protected=True,
    )
    db.add(user)
    db.flush()
    summary.users_created += 1
    return user


def ensure_system_settings(db: Session, summary: SeedSummary) -> SystemSetting:
    row = db.query(SystemSetting).first()
    if row is not None:
        return row
    row = SystemSetting(
        name=settings.SEED_SITE_NAME,
        support_email=settings.SEED_SUPPORT_EMAIL,
        language="en",
        timezone="UTC",
        currency="USD",
    )
    db.add(row)
    db.flush()
    summary.settings_created += 1
    return row


def seed_defaults(db: Session) -> SeedSummary:
    """Create the protected admin role and user plus default settings. Safe to re-run."""
    summary = SeedSummary()
    role = ensure_admin_role(db, summary)
    ensure_admin_user(db, role, summary)
    ensure_system_settings(db, summary)
    db.commit()
    logger.info(
        "seed done roles_created=%s users_created=%s settings_created=%s",
        summary.roles_created,
        summary.users_created,
        summary.settings_created,
    )
    return summary
