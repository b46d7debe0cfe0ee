"""CQL (Confluence Query Language) expression builders."""

from __future__ import annotations

import re

_CQL_SPECIAL = re.compile(r'(["\\])')


def escape_cql_value(value: str) -> str:
    return _CQL_SPECIAL.sub(r"\\\1", value).strip()


def build_search_cql(query: str | None = None, space_key: str | None = None) -> str:
    """Build the page search expression used by ``ConfluenceClient.search_pages``.

    Every word of the query must prefix-match the title, or the full phrase
    must appear in the text or title. Results are ordered by relevance.
    """
    parts = ["type=page"]

    if space_key:
        parts.append(f'space = "{escape_cql_value(space_key)}"')

    if query:
        escaped = escape_cql_value(query)
        tokens = [t for t in escaped.split() if t]
        title_clause = (
            " AND ".join(f'title ~ "{t}*"' for t in tokens)
            if tokens
            else f'title ~ "{escaped}"'
        )
        phrase_clause = " OR ".join(
            [
                f'text ~ "\\"{escaped}\\""',
                f'text ~ "{escaped}"',
                f'title ~ "\\"{escaped}\\""',
            ]
        )
        parts.append(f'({phrase_clause} OR ({title_clause}) OR title ~ "{escaped}")')

    return f"{' AND '.join(parts)} order by score desc"
