from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from matchrelay.api.codec import DecodeError, UnknownMessage, decode_client_message
from matchrelay.api.models import GameOver, JoinMatchmaking, StateUpdate
from matchrelay.lobby import Lobby
from matchrelay.players import PlayerSession, make_player_session
from matchrelay.websocket_hub import Connection

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Routes one connection's inbound events to the lobby.

    Per-connection state: the session (id fixed at connect time, name updated
    on join) and the last room id the client referenced. That room id is only
    a hint; disconnect cleanup looks rooms up by player id.
    """

    def __init__(self, *, lobby: Lobby, connection: Connection) -> None:
        self.lobby = lobby
        self.session: PlayerSession = make_player_session(connection=connection)
        self.last_room_id: str | None = None
        self._handlers: dict[type, Callable[[Any], Awaitable[None]]] = {
            JoinMatchmaking: self._on_join_matchmaking,
            StateUpdate: self._on_state_update,
            GameOver: self._on_game_over,
        }

    @property
    def player_id(self) -> str:
        return self.session.player_id

    async def on_message(self, raw: str | bytes) -> None:
        message = decode_client_message(raw)

        if isinstance(message, DecodeError):
            logger.warning("discarding frame from %s: %s", self.player_id, message.reason)
            return
        if isinstance(message, UnknownMessage):
            logger.debug("ignoring unknown message type %r from %s", message.type, self.player_id)
            return

        await self._handlers[type(message)](message)

    async def on_close(self) -> None:
        await self.lobby.handle_disconnect(self.player_id)
        logger.info("%s disconnected.", self.session.name)

    async def _on_join_matchmaking(self, message: JoinMatchmaking) -> None:
        name = (message.player_name or "").strip() or None
        await self.lobby.join_matchmaking(self.session, name=name)

    async def _on_state_update(self, message: StateUpdate) -> None:
        self.last_room_id = message.room_id
        await self.lobby.relay_state(room_id=message.room_id, sender_id=self.player_id, state=message.state)

    async def _on_game_over(self, message: GameOver) -> None:
        self.last_room_id = message.room_id
        await self.lobby.end_game(room_id=message.room_id, requester_id=self.player_id)
