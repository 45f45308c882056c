"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for messaging, search and scoring adapters
so that the core can be exercised with fakes and reused with other backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import CandidateSource


class MessengerPort(Protocol):
    """Delivers text to a conversation."""

    async def send_text(self, chat_id: int, text: str, parse_mode: Optional[str] = None) -> None:
        ...


class SearchPort(Protocol):
    """Returns provider-ranked candidate sources for a query.

    Implementations never raise: failures degrade to an empty list.
    """

    async def search(self, query: str, num_results: int = 10) -> list[CandidateSource]:
        ...


class ScorerPort(Protocol):
    """Language-model backend that answers a prompt with free-form text."""

    async def complete(self, system_prompt: str, prompt: str) -> str:
        ...
