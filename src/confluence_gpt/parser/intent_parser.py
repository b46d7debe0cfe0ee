"""Intent resolution: AI first when configured, rules otherwise."""

from __future__ import annotations

from loguru import logger

from confluence_gpt.models.intent import ParsedIntent, UploadedDocument
from confluence_gpt.parser.ai_delegate import AIDelegate, clean_api_key
from confluence_gpt.parser.context_builder import build_outbound_message
from confluence_gpt.parser.rule_matcher import RuleMatcher


class IntentResolver:
    def __init__(
        self,
        delegate: AIDelegate | None = None,
        rules: RuleMatcher | None = None,
    ) -> None:
        self._delegate = delegate or AIDelegate()
        self._rules = rules or RuleMatcher()

    async def resolve(self, message: str, api_key: str | None = None) -> ParsedIntent:
        if not clean_api_key(api_key):
            logger.debug("No AI key, using rule-based parsing")
            return self._rules.match(message)

        try:
            return await self._delegate.parse(message, api_key)
        except Exception as exc:
            logger.warning("AI parsing failed, falling back to rules: {}", exc)
            return self._rules.match(message)

    async def resolve_request(
        self,
        message: str,
        attachment: UploadedDocument | None = None,
        api_key: str | None = None,
    ) -> ParsedIntent:
        return await self.resolve(build_outbound_message(message, attachment), api_key)

    async def chat(self, message: str, api_key: str | None) -> ParsedIntent:
        return await self._delegate.chat(message, api_key)
