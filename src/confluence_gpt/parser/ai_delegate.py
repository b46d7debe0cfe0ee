"""Chat-completion delegate that turns provider replies into intents."""

from __future__ import annotations

import html
import json
import re
from typing import Any, Callable

import openai
from loguru import logger
from openai import AsyncOpenAI
from pydantic import ValidationError

from confluence_gpt.config.logging import mask_secret
from confluence_gpt.config.settings import AIConfig
from confluence_gpt.exceptions import (
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    UpstreamAuthError,
    UpstreamError,
)
from confluence_gpt.models.intent import AIMode, IntentKind, IntentSource, ParsedIntent
from confluence_gpt.parser.page_templates import fallback_title, is_vague_title
from confluence_gpt.parser.prompt_templates import (
    CHAT_SYSTEM_PROMPT,
    COMMAND_SYSTEM_PROMPT,
    DOCUMENT_MARKERS,
    DOCUMENT_SYSTEM_PROMPT,
    PLACEHOLDER_CONTENT,
)
from confluence_gpt.parser.schemas import AIIntentPayload

ClientFactory = Callable[[str, AIConfig], AsyncOpenAI]

_ZERO_WIDTH = re.compile(r"[\u200B-\u200D\uFEFF]")
_FENCE_OPEN = re.compile(r"```json\s*", re.I)
_FENCE = re.compile(r"```\s*")
_JSON_SPAN = re.compile(r"\{[\s\S]*\}")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_AUTH_HINTS = ("invalid", "authentication")

_KIND_BY_TYPE = {
    "create": IntentKind.CREATE,
    "search": IntentKind.SEARCH,
    "spaces": IntentKind.LIST_SPACES,
    "help": IntentKind.HELP,
    "chat": IntentKind.CHAT,
}


def clean_api_key(raw: object) -> str:
    if raw is None:
        return ""
    return _ZERO_WIDTH.sub("", str(raw).strip()).strip()


def is_document_request(message: str) -> bool:
    return any(marker in message for marker in DOCUMENT_MARKERS)


def select_system_prompt(message: str, mode: AIMode) -> str:
    if mode == AIMode.CHAT:
        return CHAT_SYSTEM_PROMPT
    if is_document_request(message):
        return DOCUMENT_SYSTEM_PROMPT
    return COMMAND_SYSTEM_PROMPT


def sanitize_title(title: str | None, kind: IntentKind) -> str | None:
    if kind != IntentKind.CREATE:
        return None
    if not title or not title.strip():
        return fallback_title()
    if is_vague_title(title):
        logger.debug("Replacing vague title {!r}", title)
        return fallback_title()
    return title.strip()


def wrap_plain_text(content: str) -> str:
    if not content or "<" in content:
        return content
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(content)]
    return "".join(
        f"<p>{html.escape(p, quote=False)}</p>" for p in paragraphs if p
    )


def extract_json_object(raw: str) -> dict[str, Any] | None:
    """Pull the embedded JSON object out of a free-form completion.

    Markdown fences are dropped, then the widest ``{...}`` span is parsed.
    When that span is not valid JSON (for example trailing prose that
    contains a brace), the first decodable object starting at the opening
    brace is used instead.
    """
    text = _FENCE.sub("", _FENCE_OPEN.sub("", raw))
    match = _JSON_SPAN.search(text)
    if match is None:
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        try:
            parsed, _ = json.JSONDecoder().raw_decode(text, match.start())
        except json.JSONDecodeError:
            return None

    return parsed if isinstance(parsed, dict) else None


def normalize_payload(payload: AIIntentPayload) -> ParsedIntent:
    raw_type = (payload.type or "").strip().lower()
    kind = _KIND_BY_TYPE.get(raw_type, IntentKind.UNKNOWN) if raw_type else IntentKind.CREATE

    content = wrap_plain_text(payload.content or "")
    if kind == IntentKind.CREATE and not content:
        content = PLACEHOLDER_CONTENT

    return ParsedIntent(
        kind=kind,
        title=sanitize_title(payload.title, kind),
        content=content or None,
        query=payload.query,
        space=payload.space or None,
        answer=payload.answer,
        confidence=0.95,
        source=IntentSource.AI,
    )


def _default_client_factory(api_key: str, config: AIConfig) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=config.base_url, max_retries=0)


class AIDelegate:
    def __init__(
        self,
        config: AIConfig | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config or AIConfig()
        self._client_factory = client_factory or _default_client_factory

    @property
    def config(self) -> AIConfig:
        return self._config

    def request_options(self, message: str, mode: AIMode) -> dict[str, Any]:
        document = mode == AIMode.PARSE and is_document_request(message)
        return {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": select_system_prompt(message, mode)},
                {"role": "user", "content": message},
            ],
            "temperature": (
                self._config.document_temperature if document
                else self._config.command_temperature
            ),
            "max_tokens": (
                self._config.document_max_tokens if document
                else self._config.command_max_tokens
            ),
        }

    async def complete(self, message: str, api_key: str | None, mode: AIMode) -> str:
        key = clean_api_key(api_key)
        if not key:
            raise MissingCredentialError("No API key provided")

        options = self.request_options(message, mode)
        logger.debug(
            "AI request mode={} model={} key={} max_tokens={}",
            mode.value, options["model"], mask_secret(key), options["max_tokens"],
        )
        client = self._client_factory(key, self._config)

        try:
            response = await client.chat.completions.create(**options)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise UpstreamAuthError(
                f"AI provider rejected the API key: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except openai.APIStatusError as exc:
            if any(hint in exc.message.lower() for hint in _AUTH_HINTS):
                raise UpstreamAuthError(
                    f"AI provider rejected the API key: {exc.message}",
                    status_code=exc.status_code,
                ) from exc
            raise UpstreamError(
                f"AI provider error: {exc.message}", status_code=exc.status_code
            ) from exc
        except openai.APIConnectionError as exc:
            raise NetworkError(f"Network error calling AI provider: {exc}") from exc
        finally:
            await client.close()

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise MalformedResponseError("No response from AI")
        return content

    async def parse(self, message: str, api_key: str | None) -> ParsedIntent:
        raw = await self.complete(message, api_key, AIMode.PARSE)

        data = extract_json_object(raw)
        if data is None:
            logger.info("No JSON object in AI reply, treating it as chat")
            return ParsedIntent(
                kind=IntentKind.CHAT, answer=raw, confidence=0.9, source=IntentSource.AI
            )

        try:
            payload = AIIntentPayload.model_validate(data)
        except ValidationError as exc:
            logger.warning("Unusable AI payload: {}", exc)
            return ParsedIntent(
                kind=IntentKind.CHAT, answer=raw, confidence=0.9, source=IntentSource.AI
            )

        intent = normalize_payload(payload)
        logger.debug("AI intent kind={} title={!r}", intent.kind.value, intent.title)
        return intent

    async def chat(self, message: str, api_key: str | None) -> ParsedIntent:
        raw = await self.complete(message, api_key, AIMode.CHAT)
        return ParsedIntent(
            kind=IntentKind.CHAT, answer=raw, confidence=0.95, source=IntentSource.AI
        )
