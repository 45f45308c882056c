"""Telethon delivery adapter for the long-lived bot session.

Telethon's own Markdown dialect differs from the Bot API one, so this adapter
only accepts the HTML markup mode; the app switches the pipeline to HTML when
it runs through Telethon.
"""

from __future__ import annotations

from typing import Optional

from telethon import TelegramClient


class TelethonMessenger:
    """Messenger adapter that replies through a connected Telethon client."""

    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    async def send_text(self, chat_id: int, text: str, parse_mode: Optional[str] = None) -> None:
        if parse_mode not in (None, "html"):
            raise ValueError("Telethon delivery supports the html markup mode only")
        await self._client.send_message(chat_id, text, parse_mode=parse_mode, link_preview=False)
