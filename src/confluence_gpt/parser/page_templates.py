"""Starter page bodies and title fallbacks for page creation."""

from __future__ import annotations

import html
from datetime import date

MEETING_TEMPLATE = (
    "<h2>Attendees</h2><ul><li>Add attendees</li></ul>"
    "<h2>Agenda</h2><ol><li>Topic 1</li></ol>"
    "<h2>Notes</h2><p>Meeting notes...</p>"
    "<h2>Action Items</h2><ul><li>[ ] Action 1</li></ul>"
)

RETRO_TEMPLATE = (
    "<h2>What Went Well</h2><ul><li>Item 1</li></ul>"
    "<h2>What Could Improve</h2><ul><li>Item 1</li></ul>"
    "<h2>Action Items</h2><ul><li>[ ] Action 1</li></ul>"
)

STATUS_TEMPLATE = (
    "<h2>Highlights</h2><ul><li>Highlight 1</li></ul>"
    "<h2>In Progress</h2><ul><li>Task 1</li></ul>"
    "<h2>Blockers</h2><ul><li>None</li></ul>"
)

GENERIC_TEMPLATE = "<h2>{title}</h2><p>Content goes here...</p>"

_VAGUE_TITLES = frozenset({"this", "document", "untitled"})

# Checked in order; first keyword group found in the title wins.
_KEYWORD_TEMPLATES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("meeting",), MEETING_TEMPLATE),
    (("retro",), RETRO_TEMPLATE),
    (("status", "weekly"), STATUS_TEMPLATE),
)


def generate_content(title: str) -> str:
    lower = title.lower()
    for keywords, template in _KEYWORD_TEMPLATES:
        if any(k in lower for k in keywords):
            return template
    return GENERIC_TEMPLATE.format(title=html.escape(title, quote=False))


def fallback_title() -> str:
    return f"Imported Document - {date.today().isoformat()}"


def is_vague_title(title: str) -> bool:
    lowered = title.strip().lower()
    return (
        len(lowered) < 3
        or lowered in _VAGUE_TITLES
        or "for this" in lowered
    )
