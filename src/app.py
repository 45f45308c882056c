"""Application entry point for the factscope fact-checking bot."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import asdict, replace
import json
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events
import uvicorn

import settings
from adapters.telegram_updates import message_from_telethon
from adapters.telethon_messenger import TelethonMessenger
from client import bot_token, build_messenger, build_scorer, build_search, build_telethon_client
from core.config import DeliveryConfig, PipelineConfig
from core.models import RawMessage
from core.processor import FactCheckProcessor
from core.ranking import RelevanceRanker
from core.text_analysis import analyze_text
from web import create_app

NAME = "FACTSCOPE"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/factscope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.CONFIG_DIR, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # httpx logs every request URL at INFO, and the Bot API URL embeds the token.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        acceptance_threshold=settings.ACCEPTANCE_THRESHOLD,
        max_accepted=settings.MAX_ACCEPTED,
        fallback_results=settings.FALLBACK_RESULTS,
        search_results=settings.SEARCH_RESULTS,
        query_max_length=settings.QUERY_MAX_LENGTH,
        claim_max_chars=settings.CLAIM_MAX_CHARS,
        parse_mode=settings.PARSE_MODE,
    )


def _delivery_config() -> DeliveryConfig:
    return DeliveryConfig(
        attempts=settings.DELIVERY_ATTEMPTS,
        retry_delay_seconds=settings.DELIVERY_RETRY_DELAY,
        timeout_seconds=settings.DELIVERY_TIMEOUT,
    )


def _build_ranker() -> RelevanceRanker:
    return RelevanceRanker(build_scorer(), claim_max_chars=settings.CLAIM_MAX_CHARS)


class _ConsoleMessenger:
    """Print replies instead of delivering them, for local checks."""

    async def send_text(self, chat_id: int, text: str, parse_mode: Optional[str] = None) -> None:
        print(text)
        print()


def _serve() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting factscope webhook")

    messenger = build_messenger(_delivery_config())
    search = build_search()
    processor = FactCheckProcessor(
        messenger=messenger,
        search=search,
        ranker=_build_ranker(),
        config=_pipeline_config(),
    )

    async def close_clients() -> None:
        await messenger.aclose()
        await search.aclose()

    app = create_app(processor.handle, webhook_path=settings.WEBHOOK_PATH, on_shutdown=close_clients)
    # log_config=None keeps our handlers (and redaction) for uvicorn's loggers too.
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT, log_config=None)


def _poll() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting factscope bot session")

    token = bot_token()
    client = build_telethon_client()
    config = _pipeline_config()
    if config.parse_mode != "html":
        logger.info("Bot session replies use html markup instead of %s", config.parse_mode)
        config = replace(config, parse_mode="html")

    processor = FactCheckProcessor(
        messenger=TelethonMessenger(client),
        search=build_search(),
        ranker=_build_ranker(),
        config=config,
    )

    # New and edited messages run the same pipeline, like the webhook does.
    @client.on(events.NewMessage(incoming=True))
    @client.on(events.MessageEdited(incoming=True))
    async def handler(event) -> None:
        try:
            message = message_from_telethon(event.message)
            if message is None:
                return
            await processor.handle(message)
        except Exception:
            logger.exception("Error while processing message")

    client.start(bot_token=token)
    logger.info("Bot connected. Listening for incoming messages...")
    client.run_until_disconnected()


def _check(text: str) -> None:
    _configure_logging()
    search = build_search()
    processor = FactCheckProcessor(
        messenger=_ConsoleMessenger(),
        search=search,
        ranker=_build_ranker(),
        config=_pipeline_config(),
    )

    async def _run() -> None:
        try:
            await processor.handle(RawMessage(chat_id=0, text=text))
        finally:
            await search.aclose()

    asyncio.run(_run())


def _analyze(text: str) -> None:
    print(json.dumps(asdict(analyze_text(text)), ensure_ascii=False, indent=2))


def _set_webhook(url: str) -> None:
    _configure_logging()
    messenger = build_messenger(_delivery_config())

    async def _register() -> None:
        try:
            await messenger.set_webhook(url)
        finally:
            await messenger.aclose()

    asyncio.run(_register())
    print(f"Webhook set to {url}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="factscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Start the webhook server")
    subparsers.add_parser("poll", help="Run as a long-lived Telethon bot session")

    check_parser = subparsers.add_parser("check", help="Fact-check a text and print the replies")
    check_parser.add_argument("text")

    analyze_parser = subparsers.add_parser("analyze", help="Show dates, numbers, names and claims found in a text")
    analyze_parser.add_argument("text")

    webhook_parser = subparsers.add_parser("set-webhook", help="Register the webhook URL with Telegram")
    webhook_parser.add_argument("url")

    args = parser.parse_args(argv)
    if args.command == "poll":
        _poll()
        return
    if args.command == "check":
        _check(args.text)
        return
    if args.command == "analyze":
        _analyze(args.text)
        return
    if args.command == "set-webhook":
        _set_webhook(args.url)
        return
    _serve()


if __name__ == "__main__":
    main()
