"""Pydantic models for database records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from confluence_gpt.config.settings import (
    DEFAULT_AI_BASE_URL,
    DEFAULT_AI_MODEL,
    AIConfig,
    ConfluenceCredentials,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    id: int
    email: str
    name: str
    created_at: datetime = Field(default_factory=utcnow)


class UserRecord(User):
    password_hash: str
    updated_at: datetime = Field(default_factory=utcnow)

    def public(self) -> User:
        return User(id=self.id, email=self.email, name=self.name, created_at=self.created_at)


class UserSettingsRecord(BaseModel):
    user_id: int
    confluence_domain: str | None = None
    confluence_email: str | None = None
    confluence_token: str | None = None
    ai_api_key: str | None = None
    ai_base_url: str = DEFAULT_AI_BASE_URL
    ai_model: str = DEFAULT_AI_MODEL
    ai_enabled: bool = False
    updated_at: datetime = Field(default_factory=utcnow)

    def confluence_credentials(self) -> ConfluenceCredentials:
        return ConfluenceCredentials(
            domain=self.confluence_domain or "",
            email=self.confluence_email or "",
            api_token=self.confluence_token or "",
        )

    def active_ai_key(self) -> str | None:
        if self.ai_enabled and self.ai_api_key and self.ai_api_key.strip():
            return self.ai_api_key
        return None

    def ai_config(self, base: AIConfig | None = None) -> AIConfig:
        base = base or AIConfig()
        return base.model_copy(
            update={
                "base_url": self.ai_base_url or base.base_url,
                "model": self.ai_model or base.model,
            }
        )


class SessionRecord(BaseModel):
    id: int
    user_id: int
    token: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=utcnow)


class ConversationRecord(BaseModel):
    id: int
    user_id: int
    title: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class MessagePreview(BaseModel):
    content: str
    role: str
    created_at: datetime


class ConversationSummary(ConversationRecord):
    last_message: MessagePreview | None = None


class MessageRecord(BaseModel):
    id: int
    conversation_id: int
    role: str
    content: str
    attachment_filename: str | None = None
    attachment_preview: str | None = None
    action_type: str | None = None
    action_status: str | None = None
    action_data: Any = None
    created_at: datetime = Field(default_factory=utcnow)
