import re
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from app.models.system_setting import SOCIAL_FIELDS

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name", "slug", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, value: str) -> str:
        if not SLUG_RE.fullmatch(value):
            raise ValueError("slug may contain lowercase letters, digits and dashes only")
        return value


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=200)
    role_id: uuid.UUID = Field(alias="roleId")

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        if not EMAIL_RE.fullmatch(value):
            raise ValueError("invalid email")
        return value.lower()


class SocialSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    facebook: Optional[str] = Field(default=None, max_length=500)
    twitter: Optional[str] = Field(default=None, max_length=500)
    instagram: Optional[str] = Field(default=None, max_length=500)
    linkedin: Optional[str] = Field(default=None, max_length=500)
    youtube: Optional[str] = Field(default=None, max_length=500)

    @field_validator(*SOCIAL_FIELDS, mode="before")
    @classmethod
    def normalize_url(cls, value):
        text = _strip(value)
        if text is None or text == "":
            return None
        if not isinstance(text, str) or not text.lower().startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return text
