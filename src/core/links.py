"""Telegram post link extraction (core domain).

Only structural metadata is extracted here; the referenced post content is
never fetched, so the pipeline keeps operating on the message text itself.
"""

from __future__ import annotations

import re

from core.models import LinkExtraction, PostReference

# Any Telegram link inside free text, scheme optional.
_LINK_RE = re.compile(r"(?:https?://)?\b(?:t\.me|telegram\.me)/\S+", re.IGNORECASE)

# A single post link: <host>/<channel>/<numeric id>, optional trailing slash.
_POST_RE = re.compile(
    r"(?:https?://)?(?:www\.)?(?:t\.me|telegram\.me)/([^/\s]+)/(\d+)/?",
    re.IGNORECASE,
)

# Punctuation that commonly sticks to a link at the end of a sentence.
_TRAILING_PUNCTUATION = ".,;:!?)]}>\"'»…"

INVALID_REFERENCE = PostReference(channel="", post_id=0, is_valid=False)


def _clean_link(url: str) -> str:
    url = url.split("?", 1)[0].split("#", 1)[0]
    return url.rstrip(_TRAILING_PUNCTUATION)


def parse_post_link(url: str) -> PostReference:
    """Parse a t.me post link into a PostReference.

    Query strings and fragments are ignored. Anything that is not exactly
    ``<channel>/<digits>`` yields an invalid reference.
    """

    match = _POST_RE.fullmatch(_clean_link(url.strip()))
    if not match:
        return INVALID_REFERENCE
    return PostReference(channel=match.group(1), post_id=int(match.group(2)), is_valid=True)


def extract_post_references(text: str) -> LinkExtraction:
    """Return the text unchanged plus every valid post reference found in it."""

    if not text:
        return LinkExtraction(text=text or "", references=())

    references = tuple(
        reference
        for reference in (parse_post_link(link) for link in _LINK_RE.findall(text))
        if reference.is_valid
    )
    return LinkExtraction(text=text, references=references)
