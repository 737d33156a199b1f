from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from matchrelay.api.deps import get_lobby
from matchrelay.api.models import LobbyStats
from matchrelay.dispatcher import EventDispatcher
from matchrelay.lobby import Lobby
from matchrelay.websocket_hub import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/")
@router.websocket("/ws")
async def matchmaking_ws(websocket: WebSocket, lobby: Lobby = Depends(get_lobby)) -> None:
    await websocket.accept()
    connection = WebSocketConnection(websocket)
    dispatcher = EventDispatcher(lobby=lobby, connection=connection)
    connection.label = dispatcher.player_id
    connection.start()
    logger.debug("connection opened for %s", dispatcher.player_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(code=message.get("code", 1000))
            # Binary frames carry the same JSON payloads as text frames.
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await dispatcher.on_message(raw)
    except WebSocketDisconnect:
        await dispatcher.on_close()
    except Exception:
        await dispatcher.on_close()
        raise
    finally:
        await connection.aclose()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/stats", response_model=LobbyStats)
async def stats_route(lobby: Lobby = Depends(get_lobby)) -> LobbyStats:
    """Debug endpoint: how many players wait and how many rooms are live."""

    return await lobby.stats()
