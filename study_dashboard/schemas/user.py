"""Pydantic schemas for registration, login and the current user."""
import re
from datetime import datetime

from pydantic import Field, field_validator

from study_dashboard.core.security import MAX_PASSWORD_BYTES
from study_dashboard.schemas.base import CamelSchema

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(value: str) -> str:
    email = (value or "").strip().lower()
    if not EMAIL_RE.match(email):
        raise ValueError("Please enter a valid email")
    return email


class UserCreateSchema(CamelSchema):
    email: str
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return value.strip()

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLoginSchema(CamelSchema):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _normalize_email(value)


class UserOutSchema(CamelSchema):
    id: int
    email: str
    username: str
    created_at: datetime
