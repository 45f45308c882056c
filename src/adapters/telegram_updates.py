"""Telegram-to-core message mapping adapter.

This keeps Bot API payload shapes and Telethon-specific details out of the
core pipeline. Anything that cannot be mapped yields ``None`` and is dropped.
"""

from __future__ import annotations

from typing import Any, Optional

from core.models import RawMessage

UPDATE_MESSAGE_KEYS = ("message", "edited_message")


def _chat_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def message_from_update(payload: Any) -> Optional[RawMessage]:
    """Build a RawMessage from a Bot API update (new or edited message)."""

    if not isinstance(payload, dict):
        return None

    message = None
    for key in UPDATE_MESSAGE_KEYS:
        candidate = payload.get(key)
        if isinstance(candidate, dict):
            message = candidate
            break
    if message is None:
        return None

    chat = message.get("chat")
    if not isinstance(chat, dict):
        return None
    chat_id = _chat_id(chat.get("id"))
    if chat_id is None:
        return None

    text = message.get("text") or message.get("caption") or ""
    if not isinstance(text, str) or not text:
        return None

    return RawMessage(chat_id=chat_id, text=text)


def message_from_telethon(message: Any) -> Optional[RawMessage]:
    """Build a RawMessage from a Telethon Message (text or media caption)."""

    chat_id = _chat_id(getattr(message, "chat_id", None))
    if chat_id is None:
        return None

    # raw_text is the caption for media messages.
    text = getattr(message, "raw_text", None) or ""
    if not text:
        return None

    return RawMessage(chat_id=chat_id, text=text)
