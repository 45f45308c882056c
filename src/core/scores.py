"""Defensive parsing of relevance scores from free-form model replies."""

from __future__ import annotations

import re
from typing import Optional

SCORE_MIN = 0
SCORE_MAX = 100

# Leading integer literal of a token, so "85%" or "85 (likely)" still count.
_INTEGER_PREFIX_RE = re.compile(r"[+-]?[0-9]+")


def parse_score_token(token: str, low: int = SCORE_MIN, high: int = SCORE_MAX) -> Optional[int]:
    """Return the token's integer value when it lies in ``[low, high]``."""

    match = _INTEGER_PREFIX_RE.match(token.strip())
    if not match:
        return None
    value = int(match.group(0))
    if low <= value <= high:
        return value
    return None


def parse_score_slots(reply: str, low: int = SCORE_MIN, high: int = SCORE_MAX) -> list[Optional[int]]:
    """Split ``reply`` on commas and parse every slot.

    Slot ``i`` answers candidate ``i``; a slot that is not a valid score is
    ``None`` so the following slots keep their positions.
    """

    if not reply or not reply.strip():
        return []
    return [parse_score_token(token, low, high) for token in reply.split(",")]


def parse_scores(reply: str, low: int = SCORE_MIN, high: int = SCORE_MAX) -> list[int]:
    """Return every valid score in ``reply``, silently dropping invalid tokens."""

    return [score for score in parse_score_slots(reply, low, high) if score is not None]
