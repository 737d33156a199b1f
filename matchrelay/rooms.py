from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from uuid import uuid4

from matchrelay.players import PlayerSession


class RoomPhase(StrEnum):
    active = "active"
    # Closed phases. A room leaves the registry as soon as it enters one.
    ended = "ended"
    abandoned = "abandoned"


def new_room_id() -> str:
    return f"room-{uuid4().hex}"


@dataclass(slots=True, eq=False)
class Room:
    room_id: str
    players: tuple[PlayerSession, PlayerSession]
    player_states: dict[str, Any] = field(default_factory=dict)
    phase: RoomPhase = RoomPhase.active

    def __post_init__(self) -> None:
        a, b = self.players
        if a.player_id == b.player_id:
            raise ValueError("A room needs two distinct players")

    def has_player(self, player_id: str) -> bool:
        a, b = self.players
        return player_id in (a.player_id, b.player_id)

    def opponent_of(self, player_id: str) -> PlayerSession | None:
        a, b = self.players
        if a.player_id == player_id:
            return b
        if b.player_id == player_id:
            return a
        return None

    def record_state(self, player_id: str, state: Any) -> None:
        if not self.has_player(player_id):
            raise ValueError(f"Player {player_id} is not in room {self.room_id}")
        self.player_states[player_id] = state


class RoomRegistry:
    """Live rooms keyed by id.

    Entries are added only when a pair is matched and removed only when the
    room closes. The lobby serializes every mutation.
    """

    def __init__(self, *, id_factory: Callable[[], str] = new_room_id) -> None:
        self._rooms: dict[str, Room] = {}
        self._id_factory = id_factory

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms.values())

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def create_room(self, a: PlayerSession, b: PlayerSession) -> Room:
        room_id = self._id_factory()
        while room_id in self._rooms:
            room_id = self._id_factory()
        room = Room(room_id=room_id, players=(a, b))
        self._rooms[room_id] = room
        return room

    def get(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def remove(self, room_id: str) -> Room | None:
        return self._rooms.pop(room_id, None)

    def find_by_player(self, player_id: str) -> Room | None:
        return next((r for r in self._rooms.values() if r.has_player(player_id)), None)
