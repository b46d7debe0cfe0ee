"""Text extraction for uploaded documents."""

from __future__ import annotations

import io
import json
import re

import pdfplumber
from loguru import logger

from confluence_gpt.exceptions import UploadError
from confluence_gpt.models.intent import UploadedDocument

MAX_CONTENT_CHARS = 15000
PREVIEW_CHARS = 200
TRUNCATION_MARKER = "\n\n[Truncated...]"

TEXT_TYPES = frozenset({"text/plain", "text/markdown", "text/csv", "text/html"})
TEXT_SUFFIXES = (".md", ".txt", ".csv", ".html")

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def _is_pdf(file_name: str, content_type: str) -> bool:
    return content_type == "application/pdf" or file_name.lower().endswith(".pdf")


def _is_json(file_name: str, content_type: str) -> bool:
    return content_type == "application/json" or file_name.lower().endswith(".json")


def _is_text(file_name: str, content_type: str) -> bool:
    return content_type in TEXT_TYPES or file_name.lower().endswith(TEXT_SUFFIXES)


def extract_pdf_text(data: bytes) -> str:
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        logger.warning("PDF parsing failed: {}", exc)
        raise UploadError("Failed to parse PDF. Try a different file.") from exc

    text = "\n\n".join(pages).strip()
    if not text:
        raise UploadError("PDF appears to be empty or contains only images.")
    return text


def normalize_text(content: str, max_chars: int = MAX_CONTENT_CHARS) -> str:
    content = _EXCESS_NEWLINES.sub("\n\n", content.replace("\r\n", "\n")).strip()
    if len(content) > max_chars:
        content = content[:max_chars] + TRUNCATION_MARKER
    return content


def extract_document(
    file_name: str,
    content_type: str | None,
    data: bytes,
    max_chars: int = MAX_CONTENT_CHARS,
) -> UploadedDocument:
    content_type = (content_type or "").lower()

    if _is_pdf(file_name, content_type):
        content = extract_pdf_text(data)
    elif _is_text(file_name, content_type):
        content = data.decode("utf-8", errors="replace")
    elif _is_json(file_name, content_type):
        raw = data.decode("utf-8", errors="replace")
        try:
            content = json.dumps(json.loads(raw), indent=2)
        except json.JSONDecodeError:
            content = raw
    else:
        content = data.decode("utf-8", errors="replace")
        if "\0" in content or "\ufffd" in content:
            raise UploadError("Binary file detected. Use PDF, TXT, MD, JSON, or CSV.")

    content = normalize_text(content, max_chars)
    if not content:
        raise UploadError("File appears to be empty.")

    logger.info("Extracted {} chars from {}", len(content), file_name)
    return UploadedDocument(
        file_name=file_name,
        file_type=content_type,
        content=content,
        preview=content[:PREVIEW_CHARS],
        length=len(content),
    )
