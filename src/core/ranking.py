"""Relevance ranking of candidate sources against the original claim.

Scoring is all-or-nothing per request: either the scorer answers and its
comma-separated slots are mapped positionally onto the candidates, or every
candidate gets a zero. The final order is always a stable descending sort by score.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from core.models import CandidateSource, ScoredSource
from core.ports import ScorerPort
from core.scores import parse_score_slots

LOGGER = logging.getLogger(__name__)

DEFAULT_CLAIM_MAX_CHARS = 2000

SYSTEM_PROMPT = "You rate how relevant sources are. Reply with comma-separated numbers only."

PROMPT_TEMPLATE = '''You help rate how relevant candidate sources are to an original text.

Original text:
"""
{claim}
"""

Candidate sources (title, snippet):
{candidates}

For each source rate its relevance from 0 to 100 (how likely it is the primary source of, or confirms, the information in the text).
Return ONLY the numbers separated by commas, in source order (1, 2, 3...). Example: 85, 42, 10'''


def build_scoring_prompt(claim: str, sources: Sequence[CandidateSource], claim_max_chars: int) -> str:
    """Render the scoring prompt. Links are left out on purpose."""

    candidates = "\n\n".join(
        f"{index}. {source.title}\n   {source.snippet}" for index, source in enumerate(sources, start=1)
    )
    return PROMPT_TEMPLATE.format(claim=claim[:claim_max_chars], candidates=candidates)


def _unscored(sources: Sequence[CandidateSource]) -> list[ScoredSource]:
    return [ScoredSource(source=source, relevance_score=0) for source in sources]


def _slot(slots: Sequence[Optional[int]], index: int) -> int:
    if index < len(slots) and slots[index] is not None:
        return slots[index]
    return 0


class RelevanceRanker:
    """Annotates candidates with scorer-provided relevance and sorts them."""

    def __init__(
        self,
        scorer: Optional[ScorerPort],
        claim_max_chars: int = DEFAULT_CLAIM_MAX_CHARS,
    ) -> None:
        self._scorer = scorer
        self._claim_max_chars = claim_max_chars

    async def rank(self, claim: str, sources: Sequence[CandidateSource]) -> list[ScoredSource]:
        """Return ``sources`` scored 0-100 and sorted by descending score."""

        if self._scorer is None or not sources:
            return _unscored(sources)

        prompt = build_scoring_prompt(claim, sources, self._claim_max_chars)
        try:
            reply = await self._scorer.complete(SYSTEM_PROMPT, prompt)
        except Exception:
            LOGGER.warning("Relevance scoring failed, defaulting %s sources to 0", len(sources), exc_info=True)
            return _unscored(sources)

        slots = parse_score_slots(reply)
        valid = sum(1 for score in slots[: len(sources)] if score is not None)
        if valid != len(sources):
            LOGGER.info("Scorer returned %s valid scores for %s sources", valid, len(sources))

        # Slot i scores candidate i; invalid, missing and extra slots give 0 or are ignored.
        scored = [
            ScoredSource(source=source, relevance_score=_slot(slots, index))
            for index, source in enumerate(sources)
        ]
        # sorted() is stable, so ties keep request order.
        return sorted(scored, key=lambda item: item.relevance_score, reverse=True)
