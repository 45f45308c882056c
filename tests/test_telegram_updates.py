from __future__ import annotations

from adapters.telegram_updates import message_from_telethon, message_from_update
from core.models import RawMessage


class DummyMessage:
    def __init__(self, chat_id, raw_text) -> None:
        self.chat_id = chat_id
        self.raw_text = raw_text


def test_new_message_text() -> None:
    payload = {"update_id": 1, "message": {"chat": {"id": 42}, "text": "hello"}}
    assert message_from_update(payload) == RawMessage(chat_id=42, text="hello")


def test_edited_message_caption() -> None:
    payload = {"update_id": 2, "edited_message": {"chat": {"id": -100123}, "caption": "photo claim"}}
    assert message_from_update(payload) == RawMessage(chat_id=-100123, text="photo claim")


def test_updates_without_text_are_dropped() -> None:
    assert message_from_update({"message": {"chat": {"id": 1}, "sticker": {}}}) is None
    assert message_from_update({"message": {"chat": {"id": 1}, "text": ""}}) is None
    assert message_from_update({"callback_query": {}}) is None


def test_malformed_updates_are_dropped() -> None:
    assert message_from_update(None) is None
    assert message_from_update([1, 2]) is None
    assert message_from_update({"message": "text"}) is None
    assert message_from_update({"message": {"text": "no chat"}}) is None
    assert message_from_update({"message": {"chat": {"id": "abc"}, "text": "x"}}) is None
    assert message_from_update({"message": {"chat": {"id": True}, "text": "x"}}) is None


def test_telethon_message_mapping() -> None:
    assert message_from_telethon(DummyMessage(5, "claim")) == RawMessage(chat_id=5, text="claim")
    assert message_from_telethon(DummyMessage(5, "")) is None
    assert message_from_telethon(DummyMessage(None, "claim")) is None
