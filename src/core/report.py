"""User-facing message rendering.

Keeping every reply here prevents drift between pipeline states and keeps
messages consistent for both Telegram markup modes ("markdown" is Telegram's
legacy Markdown, "html" its HTML subset).
"""

from __future__ import annotations

import html
import math
from typing import Sequence

from core.models import CandidateSource, ScoredSource

MODES = ("markdown", "html")

SEARCH_CONFIG_VARIABLES = ("GOOGLE_SEARCH_API_KEY", "GOOGLE_CSE_ID")

STATUS_PROCESSING = "🔍 Processing your request..."
STATUS_SEARCHING = "🌐 Searching for sources..."
STATUS_RANKING = "🤖 Analysing relevance..."
STATUS_LINKS_FOUND = "📎 Found {count} link(s) to Telegram posts. Processing the text..."
REPLY_NO_TEXT = "❌ Could not extract any text. Send a text or a link to a post."
REPLY_NO_QUERY = "❌ Could not form a search query."
REPLY_PROCESSING_ERROR = "❌ Something went wrong while processing. Please try again later."


def _check_mode(mode: str) -> None:
    if mode not in MODES:
        raise ValueError(f"Unsupported markup mode: {mode}")


def escape_markdown(value: str) -> str:
    # Legacy Markdown only recognises escapes for these four characters.
    for ch in "_*`[":
        value = value.replace(ch, f"\\{ch}")
    return value


def escape(value: str, mode: str) -> str:
    """Escape dynamic text for the given markup mode."""

    _check_mode(mode)
    if mode == "html":
        return html.escape(value)
    return escape_markdown(value)


def _bold(value: str, mode: str) -> str:
    return f"<b>{value}</b>" if mode == "html" else f"*{value}*"


def _code(value: str, mode: str) -> str:
    return f"<code>{html.escape(value)}</code>" if mode == "html" else f"`{value}`"


def render_status(text: str, mode: str) -> str:
    """Render a plain status or error line."""

    return escape(text, mode)


def render_links_found(count: int, mode: str) -> str:
    return render_status(STATUS_LINKS_FOUND.format(count=count), mode)


def render_missing_search_config(mode: str) -> str:
    """Diagnostic reply for an empty search, aimed at the operator."""

    _check_mode(mode)
    variables = ", ".join(_code(name, mode) for name in SEARCH_CONFIG_VARIABLES)
    return f"❌ The search returned no results. Check the Google Search API settings ({variables})."


def mean_confidence(scored: Sequence[ScoredSource]) -> int:
    """Arithmetic mean of the scores, rounded half up."""

    if not scored:
        return 0
    mean = sum(item.relevance_score for item in scored) / len(scored)
    return int(math.floor(mean + 0.5))


def _markdown_url(url: str) -> str:
    # A bare ")" would close the link target early.
    return url.replace(")", "%29")


def _link_line(source: CandidateSource, mode: str) -> str:
    title = source.title or source.link
    if not source.link:
        return escape(title, mode)
    if mode == "html":
        return f"<a href=\"{html.escape(source.link, quote=True)}\">{html.escape(title)}</a>"
    return f"[{escape_markdown(title)}]({_markdown_url(source.link)})"


def render_unranked_digest(sources: Sequence[CandidateSource], mode: str) -> str:
    """Fallback digest: raw search results, title and link only."""

    _check_mode(mode)
    header = _bold(f"📌 Top {len(sources)} search results (unranked):", mode)
    lines = [
        escape("Search completed, but no relevant sources were found.", mode),
        "",
        header,
    ]
    lines.extend(f"{index}. {_link_line(source, mode)}" for index, source in enumerate(sources, start=1))
    return "\n".join(lines)


def render_digest(accepted: Sequence[ScoredSource], mode: str) -> str:
    """Final ranked digest with the mean confidence in the header."""

    _check_mode(mode)
    blocks = [_bold(f"📋 Sources found (confidence: {mean_confidence(accepted)}%):", mode)]
    for index, item in enumerate(accepted, start=1):
        lines = [f"{index}. {_bold(escape(item.title or item.link, mode), mode)} ({item.relevance_score}%)"]
        if item.link:
            lines.append(escape(item.link, mode))
        if item.snippet:
            lines.append(escape(item.snippet, mode))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
