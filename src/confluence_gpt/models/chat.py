"""Chat turn models: output of the chat pipeline."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel

from confluence_gpt.models.intent import ParsedIntent, UploadedDocument


class ActionStatus(str, enum.Enum):
    EXECUTING = "executing"
    DONE = "done"
    ERROR = "error"


class ActionInfo(BaseModel):
    type: str
    status: ActionStatus
    data: Any = None


class AssistantReply(BaseModel):
    content: str
    action: ActionInfo | None = None


class ChatRequest(BaseModel):
    message: str = ""
    attachment: UploadedDocument | None = None
    api_key: str | None = None
    user_id: int | None = None
    conversation_id: int | None = None
    space: str | None = None


class ChatTurn(BaseModel):
    conversation_id: int | None = None
    intent: ParsedIntent
    reply: AssistantReply
