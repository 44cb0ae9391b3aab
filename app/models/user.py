"""
User models: the authenticated principal and the stored account
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.models.product import utc_now


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


class UserType(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    DIRECTOR = "director"
    ADMINISTRATOR = "administrator"
    PARENT = "parent"
    OTHER = "other"


class User(BaseModel):
    """Principal extracted from a verified JWT"""

    id: str
    role: str = Role.USER.value

    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def can_moderate(self) -> bool:
        """Admins and moderators may change catalogue approval"""
        return self.role in (Role.ADMIN.value, Role.MODERATOR.value)


class Preferences(BaseModel):
    language: str = "en"
    theme: str = "dark"
    notifications: bool = True


class UserAccount(BaseModel):
    """Stored user account; the password hash never leaves the repository layer"""

    id: str
    username: str
    email: str
    password_hash: str = Field(default="", exclude=True)
    role: str = Role.USER.value
    user_type: str = UserType.OTHER.value
    preferences: Preferences = Field(default_factory=Preferences)
    is_active: bool = True
    is_system: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        populate_by_name = True
        alias_generator = to_camel
