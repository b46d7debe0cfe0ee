"""Conversation history and chat turn API."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from confluence_gpt.api.dependencies import (
    OptionalConfluenceDep,
    PipelineDep,
    StoreDep,
    UserDep,
    UserSettingsDep,
)
from confluence_gpt.exceptions import AccessDeniedError, NotFoundError
from confluence_gpt.models.chat import ActionInfo, ChatRequest, ChatTurn
from confluence_gpt.models.intent import UploadedDocument
from confluence_gpt.pipeline import retitle_if_first
from confluence_gpt.storage.models import (
    ConversationRecord,
    ConversationSummary,
    MessageRecord,
    User,
)
from confluence_gpt.storage.store import AppStore

router = APIRouter()


class NewConversation(BaseModel):
    title: str | None = None


class RenameConversation(BaseModel):
    title: str | None = None


class AttachmentRef(BaseModel):
    file_name: str
    preview: str | None = None


class NewMessage(BaseModel):
    conversation_id: int
    role: str
    content: str
    attachment: AttachmentRef | None = None
    action: ActionInfo | None = None


class MessageUpdate(BaseModel):
    message_id: int
    action_status: str | None = None
    action_data: Any = None


class SendRequest(BaseModel):
    message: str = ""
    conversation_id: int | None = None
    space: str | None = None
    attachment: UploadedDocument | None = None


async def owned_conversation(store: AppStore, conversation_id: int, user: User) -> ConversationRecord:
    conversation = await store.get_conversation(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if conversation.user_id != user.id:
        raise AccessDeniedError("Unauthorized")
    return conversation


@router.get("/conversations")
async def list_conversations(user: UserDep, store: StoreDep) -> dict[str, list[ConversationSummary]]:
    return {"conversations": await store.list_conversations(user.id)}


@router.post("/conversations")
async def create_conversation(
    body: NewConversation, user: UserDep, store: StoreDep
) -> dict[str, ConversationRecord]:
    title = body.title or f"Chat {date.today().isoformat()}"
    return {"conversation": await store.create_conversation(user.id, title)}


@router.delete("/conversations")
async def delete_conversations(user: UserDep, store: StoreDep) -> dict[str, str]:
    await store.delete_user_conversations(user.id)
    return {"message": "All conversations deleted"}


@router.get("/conversations/{conversation_id}")
async def get_conversation(conversation_id: int, user: UserDep, store: StoreDep) -> dict[str, Any]:
    conversation = await owned_conversation(store, conversation_id, user)
    return {
        "conversation": conversation,
        "messages": await store.list_messages(conversation_id),
    }


@router.patch("/conversations/{conversation_id}")
async def rename_conversation(
    conversation_id: int, body: RenameConversation, user: UserDep, store: StoreDep
) -> dict[str, ConversationRecord | None]:
    await owned_conversation(store, conversation_id, user)
    if body.title:
        await store.rename_conversation(conversation_id, body.title)
    return {"conversation": await store.get_conversation(conversation_id)}


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(conversation_id: int, user: UserDep, store: StoreDep) -> dict[str, str]:
    await owned_conversation(store, conversation_id, user)
    await store.delete_conversation(conversation_id)
    return {"message": "Conversation deleted"}


@router.post("/messages")
async def add_message(body: NewMessage, user: UserDep, store: StoreDep) -> dict[str, MessageRecord]:
    await owned_conversation(store, body.conversation_id, user)
    message = await store.add_message(
        body.conversation_id,
        body.role,
        body.content,
        attachment_filename=body.attachment.file_name if body.attachment else None,
        attachment_preview=body.attachment.preview if body.attachment else None,
        action_type=body.action.type if body.action else None,
        action_status=body.action.status.value if body.action else None,
        action_data=body.action.data if body.action else None,
    )
    if body.role == "user":
        await retitle_if_first(store, body.conversation_id, body.content)
    return {"message": message}


@router.patch("/messages")
async def update_message(body: MessageUpdate, user: UserDep, store: StoreDep) -> dict[str, str]:
    message = await store.get_message(body.message_id)
    if message is None:
        raise NotFoundError("Message not found")
    await owned_conversation(store, message.conversation_id, user)
    if body.action_status:
        await store.update_message_action(body.message_id, body.action_status, body.action_data)
    return {"message": "Message updated"}


@router.post("/send", response_model=ChatTurn)
async def send(
    body: SendRequest,
    user: UserDep,
    user_settings: UserSettingsDep,
    pipeline: PipelineDep,
    confluence: OptionalConfluenceDep,
) -> ChatTurn:
    request = ChatRequest(
        message=body.message,
        attachment=body.attachment,
        api_key=user_settings.active_ai_key() if user_settings else None,
        user_id=user.id,
        conversation_id=body.conversation_id,
        space=body.space,
    )
    return await pipeline.run(request, confluence)
