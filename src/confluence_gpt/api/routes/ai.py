"""Direct intent resolution and free-form chat."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from confluence_gpt.api.dependencies import PipelineDep
from confluence_gpt.models.intent import AIMode, ParsedIntent

router = APIRouter()


class AIRequest(BaseModel):
    message: str
    api_key: str | None = None
    mode: AIMode = AIMode.PARSE


class ChatAnswer(BaseModel):
    answer: str


@router.post("/ai", response_model=ParsedIntent | ChatAnswer)
async def ai(body: AIRequest, pipeline: PipelineDep) -> ParsedIntent | ChatAnswer:
    if body.mode == AIMode.CHAT:
        intent = await pipeline.resolver.chat(body.message, body.api_key)
        return ChatAnswer(answer=intent.answer or "")
    return await pipeline.resolver.resolve(body.message, body.api_key)
