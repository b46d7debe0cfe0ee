"""Chat pipeline: resolve a message, act on Confluence, record the turn."""

from __future__ import annotations

from datetime import date

from loguru import logger

from confluence_gpt.confluence.client import ConfluenceClient
from confluence_gpt.exceptions import (
    AccessDeniedError,
    ConfluenceCredentialsError,
    ConfluenceGPTError,
    NotFoundError,
)
from confluence_gpt.models.chat import (
    ActionInfo,
    ActionStatus,
    AssistantReply,
    ChatRequest,
    ChatTurn,
)
from confluence_gpt.models.intent import IntentKind, IntentSource, ParsedIntent, UploadedDocument
from confluence_gpt.parser.ai_delegate import wrap_plain_text
from confluence_gpt.parser.context_builder import default_title_for
from confluence_gpt.parser.intent_parser import IntentResolver
from confluence_gpt.parser.prompt_templates import (
    CHAT_FALLBACK_TEXT,
    DEFAULT_DOCUMENT_REQUEST,
    HELP_TEXT,
    PLACEHOLDER_CONTENT,
    UNKNOWN_TEXT,
)
from confluence_gpt.storage.store import AppStore

MAX_SEARCH_RESULTS = 10
TITLE_CHARS = 50
NO_SPACES_TEXT = "❌ No spaces found. Please create a space in Confluence first."


def conversation_title(content: str) -> str:
    if len(content) > TITLE_CHARS:
        return content[:TITLE_CHARS] + "..."
    return content


async def retitle_if_first(store: AppStore, conversation_id: int, content: str) -> None:
    """Name a conversation after its first user message."""
    messages = await store.list_messages(conversation_id)
    if sum(1 for m in messages if m.role == "user") == 1:
        await store.rename_conversation(conversation_id, conversation_title(content))


def error_reply(exc: Exception, action_type: str | None = None) -> AssistantReply:
    action = ActionInfo(type=action_type, status=ActionStatus.ERROR) if action_type else None
    return AssistantReply(content=f"❌ Error: {exc}", action=action)


class ChatPipeline:
    def __init__(
        self,
        resolver: IntentResolver,
        store: AppStore | None = None,
        default_space: str | None = None,
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._default_space = default_space or None

    @property
    def resolver(self) -> IntentResolver:
        return self._resolver

    @property
    def store(self) -> AppStore | None:
        return self._store

    async def run(
        self, request: ChatRequest, confluence: ConfluenceClient | None = None
    ) -> ChatTurn:
        conversation_id = await self._record_user_message(request)

        intent = await self._resolver.resolve_request(
            request.message, request.attachment, request.api_key
        )
        logger.info(
            "Resolved intent kind={} source={} confidence={:.2f}",
            intent.kind.value, intent.source.value, intent.confidence,
        )

        try:
            reply = await self.dispatch(intent, request, confluence)
        except ConfluenceGPTError as exc:
            logger.warning("Action {} failed: {}", intent.kind.value, exc)
            reply = error_reply(exc, _action_type(intent.kind))

        if conversation_id is not None:
            await self._store.add_message(
                conversation_id,
                "assistant",
                reply.content,
                action_type=reply.action.type if reply.action else None,
                action_status=reply.action.status.value if reply.action else None,
                action_data=reply.action.data if reply.action else None,
            )

        return ChatTurn(conversation_id=conversation_id, intent=intent, reply=reply)

    async def dispatch(
        self,
        intent: ParsedIntent,
        request: ChatRequest,
        confluence: ConfluenceClient | None = None,
    ) -> AssistantReply:
        if intent.kind == IntentKind.CREATE:
            return await self._create(intent, request, _require(confluence))
        if intent.kind == IntentKind.SEARCH:
            return await self._search(intent, request, _require(confluence))
        if intent.kind == IntentKind.LIST_SPACES:
            return await self._spaces(_require(confluence))
        if intent.kind == IntentKind.HELP:
            return AssistantReply(content=HELP_TEXT)
        if intent.kind == IntentKind.CHAT:
            return AssistantReply(content=intent.answer or CHAT_FALLBACK_TEXT)
        return AssistantReply(content=intent.answer or UNKNOWN_TEXT)

    async def _create(
        self, intent: ParsedIntent, request: ChatRequest, client: ConfluenceClient
    ) -> AssistantReply:
        title, content = _page_payload(intent, request.attachment)

        space_key = intent.space or request.space or self._default_space
        if not space_key:
            spaces = await client.list_spaces()
            space_key = spaces[0].key if spaces else None
        if not space_key:
            return AssistantReply(
                content=NO_SPACES_TEXT,
                action=ActionInfo(type="create", status=ActionStatus.ERROR),
            )

        page = await client.create_page(title, space_key, content)
        return AssistantReply(
            content=f"✅ Created: **{page.title}**",
            action=ActionInfo(
                type="create",
                status=ActionStatus.DONE,
                data={"link": page.link, "title": page.title},
            ),
        )

    async def _search(
        self, intent: ParsedIntent, request: ChatRequest, client: ConfluenceClient
    ) -> AssistantReply:
        query = intent.query or request.message
        results = await client.search_pages(query, space_key=intent.space)
        if not results:
            return AssistantReply(
                content=f'No pages found matching "{query}".',
                action=ActionInfo(type="search", status=ActionStatus.DONE, data=[]),
            )
        return AssistantReply(
            content=f"Found {len(results)} page(s):",
            action=ActionInfo(
                type="search",
                status=ActionStatus.DONE,
                data=[r.model_dump() for r in results[:MAX_SEARCH_RESULTS]],
            ),
        )

    async def _spaces(self, client: ConfluenceClient) -> AssistantReply:
        spaces = await client.list_spaces()
        listing = "\n".join(f"• **{s.name}** (`{s.key}`)" for s in spaces)
        return AssistantReply(
            content=f"📚 **Available Spaces ({len(spaces)})**\n\n{listing}",
            action=ActionInfo(type="spaces", status=ActionStatus.DONE),
        )

    async def _record_user_message(self, request: ChatRequest) -> int | None:
        if self._store is None or request.user_id is None:
            return None

        content = request.message or DEFAULT_DOCUMENT_REQUEST
        conversation_id = request.conversation_id
        if conversation_id is None:
            conversation = await self._store.create_conversation(
                request.user_id, conversation_title(content)
            )
            conversation_id = conversation.id
        else:
            conversation = await self._store.get_conversation(conversation_id)
            if conversation is None:
                raise NotFoundError("Conversation not found")
            if conversation.user_id != request.user_id:
                raise AccessDeniedError("Conversation belongs to another user")

        attachment = request.attachment
        await self._store.add_message(
            conversation_id,
            "user",
            content,
            attachment_filename=attachment.file_name if attachment else None,
            attachment_preview=attachment.preview if attachment else None,
        )
        await retitle_if_first(self._store, conversation_id, content)
        return conversation_id


def _require(client: ConfluenceClient | None) -> ConfluenceClient:
    if client is None:
        raise ConfluenceCredentialsError()
    return client


def _action_type(kind: IntentKind) -> str | None:
    if kind in (IntentKind.CREATE, IntentKind.SEARCH, IntentKind.LIST_SPACES):
        return kind.value
    return None


def _page_payload(intent: ParsedIntent, attachment: UploadedDocument | None) -> tuple[str, str]:
    # Rules cannot read an attachment, so its text becomes the page body.
    if attachment is not None and intent.source == IntentSource.RULES:
        content = wrap_plain_text(attachment.content) or PLACEHOLDER_CONTENT
        return default_title_for(attachment.file_name), content

    if intent.title:
        title = intent.title
    elif attachment is not None:
        title = default_title_for(attachment.file_name)
    else:
        title = f"New Page - {date.today().isoformat()}"
    return title, intent.content or PLACEHOLDER_CONTENT
