"""Rule-based extraction of checkable details from free text (core domain).

Regular expressions only, no model calls. Results are deduplicated while
keeping first-seen order. Patterns cover English and Russian phrasing because
both show up in forwarded news posts.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List, Sequence

MAX_KEY_CLAIMS = 5
MAX_SEARCH_QUERIES = 3
MIN_CLAIM_CHARS = 20

_DATE_PATTERNS = [
    re.compile(r"\b\d{1,2}[./]\d{1,2}[./]\d{2,4}\b"),
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(
        r"\b(?:January|February|March|April|May|June|July|August|September|October|November|December)"
        r"\s+\d{1,2},?\s+\d{4}\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b\d{1,2}\s+(?:января|февраля|марта|апреля|мая|июня|июля|августа|сентября|октября|ноября|декабря)"
        r"\s+\d{4}\b",
        re.IGNORECASE,
    ),
]

_NUMBER_PATTERNS = [
    # Percentages
    re.compile(r"\b\d+\.?\d*\s*%"),
    # Money amounts
    re.compile(r"\b\d+[\s,.]?\d*\s*(?:руб|₽|USD|\$|EUR|€|долл)", re.IGNORECASE),
    # Grouped thousands
    re.compile(r"\b\d{1,3}(?:[\s,.]?\d{3})+\b"),
    # Any multi-digit number
    re.compile(r"\b\d{2,}\b"),
]

_NAME_PATTERNS = [
    re.compile(r"\b[A-ZА-ЯЁ][a-zа-яё]+\s+[A-ZА-ЯЁ][a-zа-яё]+"),
    re.compile(r"\b(?:ООО|ЗАО|ПАО|АО|LLC|Inc|Corp)\.?\s+[A-ZА-ЯЁ\"«][\w\"»-]*(?:\s+[A-ZА-ЯЁ][\w\"»-]*)*"),
]

_LINK_RE = re.compile(r"https?://\S+", re.IGNORECASE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

CLAIM_KEYWORDS = (
    "утверждает", "заявляет", "сообщает", "объявляет",
    "обнаружено", "найдено", "выявлено", "установлено",
    "результат", "исследование", "анализ", "данные",
    "статистика", "процент", "увеличение", "уменьшение",
    "claims", "states", "reports", "announced",
    "found", "discovered", "revealed", "study",
    "research", "analysis", "data", "statistics",
    "percent", "increase", "decrease",
)


@dataclass(frozen=True)
class TextAnalysis:
    """Everything the rule-based analyser could pull out of a text."""

    key_claims: tuple[str, ...] = ()
    dates: tuple[str, ...] = ()
    numbers: tuple[str, ...] = ()
    names: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    search_queries: tuple[str, ...] = ()


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _find_all(patterns: Sequence[re.Pattern], text: str) -> List[str]:
    return _unique(match.group(0) for pattern in patterns for match in pattern.finditer(text))


def extract_dates(text: str) -> List[str]:
    return _find_all(_DATE_PATTERNS, text)


def extract_numbers(text: str) -> List[str]:
    return _find_all(_NUMBER_PATTERNS, text)


def extract_names(text: str) -> List[str]:
    return [name for name in _find_all(_NAME_PATTERNS, text) if len(name) > 3]


def extract_links(text: str) -> List[str]:
    return _unique(_LINK_RE.findall(text))


def extract_key_claims(text: str) -> List[str]:
    """Pick sentences that look like factual assertions.

    Sentences mentioning a reporting keyword win; without any, the first
    three substantial sentences are used.
    """

    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > MIN_CLAIM_CHARS]
    claims = [s for s in sentences if any(keyword in s.lower() for keyword in CLAIM_KEYWORDS)]
    if not claims:
        claims = sentences[:3]
    return claims[:MAX_KEY_CLAIMS]


def create_search_queries(
    key_claims: Sequence[str],
    dates: Sequence[str],
    names: Sequence[str],
) -> List[str]:
    """Combine the main claim with dates and names into up to three queries."""

    queries: List[str] = []
    if key_claims:
        main_claim = key_claims[0]
        if dates:
            queries.append(f"{main_claim} {dates[0]}")
        if names:
            queries.append(f"{main_claim} {names[0]}")
        queries.append(main_claim)

    if names and dates:
        queries.append(f"{names[0]} {dates[0]}")

    if names and len(queries) < MAX_SEARCH_QUERIES:
        queries.extend(names[:2])

    if not queries:
        words = " ".join(key_claims).split()[:5]
        if words:
            queries.append(" ".join(words))

    return queries[:MAX_SEARCH_QUERIES]


def analyze_text(text: str) -> TextAnalysis:
    """Run every extractor over ``text``."""

    if not text or not text.strip():
        return TextAnalysis()

    key_claims = extract_key_claims(text)
    dates = extract_dates(text)
    names = extract_names(text)
    return TextAnalysis(
        key_claims=tuple(key_claims),
        dates=tuple(dates),
        numbers=tuple(extract_numbers(text)),
        names=tuple(names),
        links=tuple(extract_links(text)),
        search_queries=tuple(create_search_queries(key_claims, dates, names)),
    )
