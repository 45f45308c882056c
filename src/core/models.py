"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types. Every instance lives for a single
pipeline run.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RawMessage:
    """Inbound chat message reduced to what the pipeline needs."""

    chat_id: int
    text: str


@dataclass(frozen=True)
class PostReference:
    """Structured pointer to a Telegram post found inside message text."""

    channel: str
    post_id: int
    is_valid: bool


@dataclass(frozen=True)
class LinkExtraction:
    """Result of scanning a message for embedded post links."""

    text: str
    references: tuple[PostReference, ...]


@dataclass(frozen=True)
class CandidateSource:
    """A single web search result considered as potential evidence."""

    title: str = ""
    link: str = ""
    snippet: str = ""


@dataclass(frozen=True)
class ScoredSource:
    """Candidate source annotated with a 0-100 relevance score."""

    source: CandidateSource
    relevance_score: int

    @property
    def title(self) -> str:
        return self.source.title

    @property
    def link(self) -> str:
        return self.source.link

    @property
    def snippet(self) -> str:
        return self.source.snippet
