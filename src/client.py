"""Client factories for factscope.

Credentials are read from the environment (python-dotenv loads a local .env
so secrets stay out of the repo). The messaging credential is mandatory and
checked eagerly; search and scoring credentials are optional and their
absence only degrades the corresponding pipeline step.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from telethon import TelegramClient

from adapters.google_search import GoogleSearchClient
from adapters.openai_scorer import DEFAULT_MODEL, OpenAIScorer
from adapters.telegram_bot_messenger import DEFAULT_API_URL, TelegramBotMessenger
from core.config import DeliveryConfig

LOGGER = logging.getLogger(__name__)


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def bot_token() -> str:
    """Return the bot token or fail fast."""

    load_dotenv()
    token = _first_env("TELEGRAM_BOT_TOKEN", "BOT_TOKEN")
    if not token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")
    return token


def build_messenger(delivery: DeliveryConfig) -> TelegramBotMessenger:
    """Create the Bot API messenger from environment variables."""

    token = bot_token()
    api_url = os.getenv("TELEGRAM_API_URL", DEFAULT_API_URL)
    LOGGER.info("Initializing Bot API messenger")
    return TelegramBotMessenger(token, api_url=api_url, delivery=delivery)


def build_search() -> GoogleSearchClient:
    load_dotenv()
    search = GoogleSearchClient(
        api_key=_first_env("GOOGLE_SEARCH_API_KEY", "SEARCH_API_KEY"),
        cse_id=os.getenv("GOOGLE_CSE_ID"),
    )
    if not search.enabled():
        LOGGER.warning("Search is not configured; every check will report no results")
    return search


def build_scorer() -> Optional[OpenAIScorer]:
    """Create the scorer, or None when no scoring credential is present."""

    load_dotenv()
    api_key = _first_env("OPENAI_API_KEY", "OPENROUTER_API_KEY")
    if not api_key:
        LOGGER.warning("Scoring is not configured; sources will not be ranked")
        return None
    model = os.getenv("AI_MODEL", DEFAULT_MODEL)
    LOGGER.info("Initializing scorer with model %s", model)
    return OpenAIScorer(api_key=api_key, model=model, base_url=os.getenv("OPENAI_BASE_URL") or None)


def build_telethon_client() -> TelegramClient:
    """Create a Telethon client for the long-lived bot session.

    API_ID/API_HASH come from my.telegram.org; the session name defaults to
    "factscope" to create a local .session file.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    session_name = os.getenv("SESSION_NAME", "factscope")

    # Fail fast on missing credentials to avoid an ambiguous login prompt.
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    LOGGER.info("Initializing Telegram client")

    return TelegramClient(session_name, int(api_id), api_hash)
