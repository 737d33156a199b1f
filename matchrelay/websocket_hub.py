from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Protocol

from fastapi import WebSocket

from matchrelay.api.codec import encode_server_message
from matchrelay.api.models import ServerMessage

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """What the lobby needs from a transport connection: a non-blocking send."""

    def send(self, message: ServerMessage) -> None: ...


class WebSocketConnection:
    """Per-socket outbox drained by a dedicated writer task.

    Contract:
      - `send()` never awaits; it only enqueues, so callers may hold the lobby lock.
      - frames leave the socket in the order they were enqueued.
      - a failed write is logged and the rest of the outbox is dropped; the
        reader side of the route notices the close and runs cleanup.

    Payloads are pydantic wire models, serialized with camelCase aliases.
    """

    def __init__(self, websocket: WebSocket, *, label: str = "") -> None:
        self._websocket = websocket
        self.label = label
        self._outbox: asyncio.Queue[ServerMessage] = asyncio.Queue()
        self._writer: asyncio.Task[None] | None = None
        self._closed = False

    def start(self) -> None:
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def send(self, message: ServerMessage) -> None:
        if self._closed:
            return
        self._outbox.put_nowait(message)

    async def aclose(self) -> None:
        self._closed = True
        if self._writer is None:
            return
        self._writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._writer

    async def _drain(self) -> None:
        while True:
            message = await self._outbox.get()
            try:
                await self._websocket.send_text(encode_server_message(message))
            except Exception as e:
                logger.warning("dropping outbound frames for %s: %s", self.label or "connection", e)
                self._closed = True
                return
