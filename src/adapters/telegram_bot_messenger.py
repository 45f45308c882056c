"""Telegram Bot API delivery adapter.

Sends replies over HTTPS with a bounded retry: a fixed number of attempts,
a linearly increasing pause between them and a hard timeout per attempt.
Exhausting the attempts raises TelegramDeliveryError to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from core.config import DeliveryConfig

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.telegram.org/bot"

# Core markup modes mapped to Bot API parse_mode values.
PARSE_MODES = {"markdown": "Markdown", "html": "HTML"}


class TelegramDeliveryError(RuntimeError):
    """Raised when the Bot API rejects a call or stays unreachable."""

    def __init__(self, method: str, status_code: Optional[int], detail: str) -> None:
        self.method = method
        self.status_code = status_code
        self.detail = detail
        status = status_code if status_code is not None else "network"
        super().__init__(f"Bot API {method} failed ({status}): {detail}")


def error_detail(response: httpx.Response) -> str:
    """Best available error text: JSON description, body, reason, status."""

    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("description"):
        return str(data["description"])

    body = response.text.strip()
    if body:
        return body
    if response.reason_phrase:
        return response.reason_phrase
    return f"HTTP {response.status_code}"


def _is_retryable(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class TelegramBotMessenger:
    """Messenger adapter that sends messages via the Telegram Bot API."""

    def __init__(
        self,
        bot_token: str,
        api_url: str = DEFAULT_API_URL,
        delivery: Optional[DeliveryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._bot_token = bot_token
        self._api_url = api_url
        self._delivery = delivery or DeliveryConfig()
        self._client = http_client or httpx.AsyncClient()
        self._owns_client = http_client is None
        self._sleep = sleep

    def _endpoint(self, method: str) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"{self._api_url}{self._bot_token}/{method}"

    async def send_text(self, chat_id: int, text: str, parse_mode: Optional[str] = None) -> None:
        """Send ``text`` to ``chat_id`` in the requested markup mode."""

        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        if parse_mode is not None:
            if parse_mode not in PARSE_MODES:
                raise ValueError(f"Unsupported markup mode: {parse_mode}")
            payload["parse_mode"] = PARSE_MODES[parse_mode]
        await self._call("sendMessage", payload)

    async def set_webhook(self, url: str) -> None:
        """Point the bot's webhook at ``url``."""

        await self._call("setWebhook", {"url": url})
        LOGGER.info("Webhook registered")

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        attempts = max(1, self._delivery.attempts)
        last_error = TelegramDeliveryError(method, None, "no attempt made")

        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.post(
                    self._endpoint(method),
                    json=payload,
                    timeout=self._delivery.timeout_seconds,
                )
            except httpx.HTTPError as exc:
                last_error = TelegramDeliveryError(method, None, str(exc) or type(exc).__name__)
                LOGGER.warning("Bot API %s attempt %s/%s failed: %s", method, attempt, attempts, last_error.detail)
            else:
                if response.is_success:
                    try:
                        data = response.json()
                    except ValueError:
                        return {}
                    result = data.get("result") if isinstance(data, dict) else None
                    return result if isinstance(result, dict) else {}

                last_error = TelegramDeliveryError(method, response.status_code, error_detail(response))
                if not _is_retryable(response.status_code):
                    raise last_error
                LOGGER.warning(
                    "Bot API %s attempt %s/%s returned %s: %s",
                    method,
                    attempt,
                    attempts,
                    response.status_code,
                    last_error.detail,
                )

            if attempt < attempts:
                await self._sleep(self._delivery.retry_delay_seconds * attempt)

        raise last_error

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
