"""User account models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from vocab_trainer.models.document import Document


class NativeLanguage(StrEnum):
    EN = "en"
    ZH = "zh"


class UserPreferences(BaseModel):
    dark_mode: bool = False


class User(Document):
    username: str
    email: str
    password_hash: str
    native_language: NativeLanguage = NativeLanguage.EN
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    is_admin: bool = False

    def public(self) -> "PublicUser":
        return PublicUser(**self.model_dump(exclude={"password_hash", "version"}))


class PublicUser(BaseModel):
    """User projection returned to clients (never carries the password hash)."""

    id: str
    username: str
    email: str
    native_language: NativeLanguage
    preferences: UserPreferences
    is_admin: bool = False
    created_at: datetime
    updated_at: datetime


class AuthPayload(BaseModel):
    token: str
    user: PublicUser
