"""Intent models: output of the resolution pipeline."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class IntentKind(str, enum.Enum):
    CREATE = "create"
    SEARCH = "search"
    LIST_SPACES = "spaces"
    HELP = "help"
    CHAT = "chat"
    UNKNOWN = "unknown"


class IntentSource(str, enum.Enum):
    AI = "ai"
    RULES = "rules"


class AIMode(str, enum.Enum):
    PARSE = "parse"
    CHAT = "chat"


class ParsedIntent(BaseModel):
    kind: IntentKind
    title: str | None = None
    content: str | None = None
    query: str | None = None
    space: str | None = None
    answer: str | None = None
    confidence: float = Field(ge=0.0, le=1.0)
    source: IntentSource = IntentSource.RULES


class UploadedDocument(BaseModel):
    model_config = {"frozen": True}

    file_name: str
    file_type: str = ""
    content: str
    preview: str = ""
    length: int = 0
