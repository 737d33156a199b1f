from __future__ import annotations

import asyncio
import logging
from typing import Any

from matchrelay.api.models import (
    GameStart,
    LobbyStats,
    MatchmakingStatus,
    OpponentDisconnected,
    OpponentEndedGame,
    OpponentState,
)
from matchrelay.fsm import RoomFSM
from matchrelay.matchmaking import MatchmakingQueue
from matchrelay.players import PlayerSession
from matchrelay.rooms import Room, RoomRegistry

logger = logging.getLogger(__name__)

QUEUED_STATUS = "In queue..."


class Lobby:
    """Owns the matchmaking queue and the room registry.

    Every public coroutine runs its whole mutation under one lock, so an
    inbound event never observes a half-updated queue or room. Notifications
    are only enqueued on the recipients' connections while the lock is held;
    nothing here awaits socket I/O.
    """

    def __init__(self, *, queue: MatchmakingQueue | None = None, rooms: RoomRegistry | None = None) -> None:
        self.queue = queue if queue is not None else MatchmakingQueue()
        self.rooms = rooms if rooms is not None else RoomRegistry()
        self._lock = asyncio.Lock()

    async def join_matchmaking(self, session: PlayerSession, *, name: str | None = None) -> list[Room]:
        """Queue a session, acknowledge it, then pair as many waiting sessions as possible.

        `name`, when given, replaces the session's display name. Returns the rooms
        created by this call. A session that is already queued or already in a
        room is left untouched.
        """

        async with self._lock:
            if self._is_engaged(session.player_id):
                logger.debug("ignoring join from engaged player %s", session.player_id)
                return []

            if name:
                session.name = name
            self.queue.enqueue(session)
            logger.info("%s joined matchmaking (%s waiting)", session.name, len(self.queue))
            session.connection.send(MatchmakingStatus(status=QUEUED_STATUS, player_id=session.player_id))
            return self._try_pair()

    async def relay_state(self, *, room_id: str, sender_id: str, state: Any) -> bool:
        """Record the sender's latest state and forward it to the opponent only.

        Returns False when nothing was relayed (unknown room or sender not in it).
        """

        async with self._lock:
            room = self.rooms.get(room_id)
            if room is None:
                logger.debug("state update for unknown room %s from %s", room_id, sender_id)
                return False

            opponent = room.opponent_of(sender_id)
            if opponent is None:
                logger.debug("state update for room %s from non-member %s", room_id, sender_id)
                return False

            room.record_state(sender_id, state)
            opponent.connection.send(OpponentState(player_id=sender_id, state=state))
            return True

    async def end_game(self, *, room_id: str, requester_id: str) -> bool:
        """Tell the requester's opponent the game is over and close the room."""

        async with self._lock:
            room = self.rooms.get(room_id)
            if room is None:
                logger.debug("game over for unknown room %s from %s", room_id, requester_id)
                return False

            opponent = room.opponent_of(requester_id)
            if opponent is None:
                logger.debug("game over for room %s from non-member %s", room_id, requester_id)
                return False

            opponent.connection.send(OpponentEndedGame())
            self._close_room(room, reason="game_over")
            return True

    async def handle_disconnect(self, player_id: str) -> Room | None:
        """Drop a departed player from the queue and from its room, if any.

        Returns the room that was closed. Safe to call more than once.
        """

        async with self._lock:
            if self.queue.remove(player_id):
                logger.debug("removed %s from matchmaking queue", player_id)

            room = self.rooms.find_by_player(player_id)
            if room is None:
                return None

            opponent = room.opponent_of(player_id)
            if opponent is not None:
                opponent.connection.send(OpponentDisconnected())
            self._close_room(room, reason="player_left")
            return room

    async def stats(self) -> LobbyStats:
        async with self._lock:
            return LobbyStats(queued=len(self.queue), rooms=len(self.rooms))

    def _is_engaged(self, player_id: str) -> bool:
        return player_id in self.queue or self.rooms.find_by_player(player_id) is not None

    def _try_pair(self) -> list[Room]:
        created: list[Room] = []
        while (pair := self.queue.pop_pair()) is not None:
            a, b = pair
            room = self.rooms.create_room(a, b)
            a.connection.send(GameStart(opponent_id=b.player_id, opponent_name=b.name, room_id=room.room_id))
            b.connection.send(GameStart(opponent_id=a.player_id, opponent_name=a.name, room_id=room.room_id))
            logger.info("Game started in room %s between %s and %s", room.room_id, a.name, b.name)
            created.append(room)
        return created

    def _close_room(self, room: Room, *, reason: str) -> None:
        fsm = RoomFSM(room)
        fsm.send(reason)
        fsm.sync_phase_to_model()
        self.rooms.remove(room.room_id)
        logger.info("Room %s %s", room.room_id, room.phase.value)
