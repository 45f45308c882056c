"""Search query formation (core domain)."""

from __future__ import annotations

import re

DEFAULT_QUERY_MAX_LENGTH = 100

_SENTENCE_END_RE = re.compile(r"[.!?]")


def build_search_query(text: str, max_length: int = DEFAULT_QUERY_MAX_LENGTH) -> str:
    """Reduce arbitrary text to a bounded search query.

    The first sentence wins when it fits into ``max_length``; otherwise the
    trimmed text is cut at ``max_length``. Empty input gives an empty query,
    which the orchestrator treats as "cannot proceed".
    """

    trimmed = (text or "").strip()
    if not trimmed:
        return ""

    first_sentence = _SENTENCE_END_RE.split(trimmed, maxsplit=1)[0].strip()
    if first_sentence and len(first_sentence) <= max_length:
        return first_sentence

    return trimmed[:max_length].strip()
