from __future__ import annotations

import asyncio

from core.models import CandidateSource
from core.ranking import RelevanceRanker, build_scoring_prompt


class FakeScorer:
    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system_prompt: str, prompt: str) -> str:
        self.calls.append((system_prompt, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


def _sources(count: int) -> list[CandidateSource]:
    return [
        CandidateSource(title=f"Title {i}", link=f"https://example.com/{i}", snippet=f"Snippet {i}")
        for i in range(1, count + 1)
    ]


def test_unconfigured_scorer_gives_zero_scores_in_original_order() -> None:
    sources = _sources(5)
    ranked = asyncio.run(RelevanceRanker(None).rank("claim", sources))
    assert len(ranked) == 5
    assert [item.relevance_score for item in ranked] == [0] * 5
    assert [item.source for item in ranked] == sources


def test_empty_candidate_list_skips_the_scorer() -> None:
    scorer = FakeScorer(reply="50")
    assert asyncio.run(RelevanceRanker(scorer).rank("claim", [])) == []
    assert scorer.calls == []


def test_invalid_token_keeps_its_slot_and_candidate_defaults_to_zero() -> None:
    sources = _sources(3)
    scorer = FakeScorer(reply="85, not-a-number, 40")
    ranked = asyncio.run(RelevanceRanker(scorer).rank("claim", sources))
    assert [(item.title, item.relevance_score) for item in ranked] == [
        ("Title 1", 85),
        ("Title 3", 40),
        ("Title 2", 0),
    ]


def test_short_reply_defaults_trailing_candidates_to_zero() -> None:
    ranked = asyncio.run(RelevanceRanker(FakeScorer(reply="30")).rank("claim", _sources(3)))
    assert [(item.title, item.relevance_score) for item in ranked] == [
        ("Title 1", 30),
        ("Title 2", 0),
        ("Title 3", 0),
    ]


def test_extra_scores_are_ignored() -> None:
    ranked = asyncio.run(RelevanceRanker(FakeScorer(reply="10, 90, 70, 60")).rank("claim", _sources(2)))
    assert [(item.title, item.relevance_score) for item in ranked] == [("Title 2", 90), ("Title 1", 10)]


def test_scorer_failure_defaults_whole_batch_to_zero() -> None:
    sources = _sources(3)
    scorer = FakeScorer(error=RuntimeError("rate limited"))
    ranked = asyncio.run(RelevanceRanker(scorer).rank("claim", sources))
    assert [item.relevance_score for item in ranked] == [0, 0, 0]
    assert [item.source for item in ranked] == sources


def test_output_is_sorted_and_in_range() -> None:
    ranked = asyncio.run(RelevanceRanker(FakeScorer(reply="20, 95, 20, 0, 100")).rank("c", _sources(5)))
    scores = [item.relevance_score for item in ranked]
    assert scores == sorted(scores, reverse=True)
    assert all(0 <= score <= 100 for score in scores)


def test_ties_keep_request_order_and_ranking_is_deterministic() -> None:
    sources = _sources(4)
    ranker = RelevanceRanker(FakeScorer(reply="50, 70, 50, 70"))
    first = asyncio.run(ranker.rank("claim", sources))
    second = asyncio.run(ranker.rank("claim", sources))
    assert [item.title for item in first] == ["Title 2", "Title 4", "Title 1", "Title 3"]
    assert first == second


def test_prompt_truncates_claim_and_withholds_links() -> None:
    sources = _sources(2)
    claim = "x" * 50
    scorer = FakeScorer(reply="1, 2")
    asyncio.run(RelevanceRanker(scorer, claim_max_chars=10).rank(claim, sources))

    _, prompt = scorer.calls[0]
    assert "x" * 10 in prompt
    assert "x" * 11 not in prompt
    assert "1. Title 1\n   Snippet 1" in prompt
    assert "2. Title 2\n   Snippet 2" in prompt
    assert "https://example.com" not in prompt


def test_build_scoring_prompt_numbers_every_candidate() -> None:
    prompt = build_scoring_prompt("claim", _sources(3), claim_max_chars=2000)
    for index in (1, 2, 3):
        assert f"{index}. Title {index}" in prompt
