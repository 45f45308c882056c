"""Webhook frontend for factscope.

The webhook always answers ``{"ok": true}`` so Telegram never retries an
update; the pipeline run is detached onto a TaskRunner and the request
returns without waiting for search or scoring.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import json
import logging
from typing import Awaitable, Callable, Coroutine, Optional

from fastapi import FastAPI, Request

from adapters.telegram_updates import message_from_update
from core.models import RawMessage

LOGGER = logging.getLogger(__name__)

OK = {"ok": True}


class TaskRunner:
    """Fire-and-forget tasks whose outcome is still observed and logged."""

    def __init__(self) -> None:
        # Strong references so running tasks are not garbage collected.
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine, name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            LOGGER.warning("Background task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Background task %s failed", task.get_name(), exc_info=exc)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for outstanding tasks, e.g. on shutdown."""

        if not self._tasks:
            return
        LOGGER.info("Waiting for %s background task(s)", len(self._tasks))
        await asyncio.wait(set(self._tasks), timeout=timeout)


def health_payload() -> dict:
    return {
        "status": "ok",
        "message": "Webhook endpoint is ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def create_app(
    handle: Callable[[RawMessage], Awaitable[None]],
    webhook_path: str = "/webhook",
    runner: Optional[TaskRunner] = None,
    on_shutdown: Optional[Callable[[], Awaitable[None]]] = None,
    drain_timeout: Optional[float] = 60.0,
) -> FastAPI:
    """Build the FastAPI app that feeds inbound updates into ``handle``."""

    runner = runner or TaskRunner()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        LOGGER.info("Webhook listening on %s", webhook_path)
        try:
            yield
        finally:
            await runner.drain(drain_timeout)
            if on_shutdown is not None:
                await on_shutdown()
            LOGGER.info("Webhook stopped")

    app = FastAPI(lifespan=lifespan)
    app.state.runner = runner

    @app.post(webhook_path)
    async def webhook(request: Request) -> dict:
        try:
            payload = json.loads(await request.body())
        except ValueError:
            LOGGER.warning("Webhook: invalid or empty JSON body")
            return OK

        message = message_from_update(payload)
        if message is None:
            LOGGER.debug("Webhook: update without a text message ignored")
            return OK

        runner.spawn(handle(message), name=f"factcheck:{message.chat_id}")
        return OK

    @app.get(webhook_path)
    async def webhook_health() -> dict:
        return health_payload()

    @app.get("/health")
    async def health() -> dict:
        return health_payload()

    return app
