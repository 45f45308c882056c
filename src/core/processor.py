"""Core fact-checking pipeline.

This module is integration-agnostic. It only relies on ports for messaging,
search and scoring, enabling webhook, long-lived session and console frontends
without changes here.

The pipeline enforces a strict order, each state replying and stopping when
its precondition fails:
1) Extract post links from the raw text
2) Build a bounded search query
3) Retrieve candidate sources
4) Rank candidates by relevance
5) Select accepted sources (or fall back to unranked results)
6) Report the digest
"""

from __future__ import annotations

import logging
from typing import Sequence

from core import report
from core.config import PipelineConfig
from core.links import extract_post_references
from core.models import RawMessage, ScoredSource
from core.ports import MessengerPort, SearchPort
from core.query import build_search_query
from core.ranking import RelevanceRanker

LOGGER = logging.getLogger(__name__)


def select_accepted(scored: Sequence[ScoredSource], threshold: int, limit: int) -> list[ScoredSource]:
    """Keep sources scoring at least ``threshold``, at most ``limit`` of them.

    ``scored`` is expected sorted by descending score, so the head is the top.
    """

    return [item for item in scored if item.relevance_score >= threshold][:limit]


class FactCheckProcessor:
    """Orchestrates extraction, retrieval, ranking and reporting."""

    def __init__(
        self,
        messenger: MessengerPort,
        search: SearchPort,
        ranker: RelevanceRanker,
        config: PipelineConfig,
    ) -> None:
        self._messenger = messenger
        self._search = search
        self._ranker = ranker
        self._config = config

    async def _reply(self, chat_id: int, text: str) -> None:
        await self._messenger.send_text(chat_id, text, parse_mode=self._config.parse_mode)

    async def _status(self, chat_id: int, text: str) -> None:
        await self._reply(chat_id, report.render_status(text, self._config.parse_mode))

    async def handle(self, message: RawMessage) -> None:
        """Process one message; never raises."""

        try:
            await self._run(message)
        except Exception:
            LOGGER.exception("Error while processing message for chat %s", message.chat_id)
            try:
                await self._status(message.chat_id, report.REPLY_PROCESSING_ERROR)
            except Exception:
                # The primary failure is already logged; this one is only recorded.
                LOGGER.exception("Failed to notify chat %s about the processing error", message.chat_id)

    async def _run(self, message: RawMessage) -> None:
        chat_id = message.chat_id
        mode = self._config.parse_mode

        await self._status(chat_id, report.STATUS_PROCESSING)

        extraction = extract_post_references(message.text)
        if not extraction.text.strip():
            await self._status(chat_id, report.REPLY_NO_TEXT)
            return

        if extraction.references:
            LOGGER.info("Chat %s: %s post reference(s) found", chat_id, len(extraction.references))
            await self._reply(chat_id, report.render_links_found(len(extraction.references), mode))

        query = build_search_query(extraction.text, self._config.query_max_length)
        if not query:
            await self._status(chat_id, report.REPLY_NO_QUERY)
            return

        await self._status(chat_id, report.STATUS_SEARCHING)
        sources = await self._search.search(query, self._config.search_results)
        if not sources:
            LOGGER.warning("Chat %s: search returned no results for %r", chat_id, query)
            await self._reply(chat_id, report.render_missing_search_config(mode))
            return

        await self._status(chat_id, report.STATUS_RANKING)
        scored = await self._ranker.rank(extraction.text, sources)

        accepted = select_accepted(scored, self._config.acceptance_threshold, self._config.max_accepted)
        if not accepted:
            LOGGER.info("Chat %s: no source reached threshold %s", chat_id, self._config.acceptance_threshold)
            fallback = sources[: self._config.fallback_results]
            await self._reply(chat_id, report.render_unranked_digest(fallback, mode))
            return

        await self._reply(chat_id, report.render_digest(accepted, mode))
        LOGGER.info(
            "Chat %s: digest sent with %s source(s), confidence %s%%",
            chat_id,
            len(accepted),
            report.mean_confidence(accepted),
        )
