from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from matchrelay.players import PlayerSession


class MatchmakingQueue:
    """FIFO waiting list of sessions seeking an opponent.

    Not thread-safe on its own; the lobby serializes every mutation.
    """

    def __init__(self) -> None:
        self._waiting: deque[PlayerSession] = deque()

    def __len__(self) -> int:
        return len(self._waiting)

    def __iter__(self) -> Iterator[PlayerSession]:
        return iter(self._waiting)

    def __contains__(self, player_id: object) -> bool:
        return any(s.player_id == player_id for s in self)

    def enqueue(self, session: PlayerSession) -> None:
        if session.player_id in self:
            raise ValueError(f"Player already queued: {session.player_id}")
        self._waiting.append(session)

    def pop_pair(self) -> tuple[PlayerSession, PlayerSession] | None:
        """Remove and return the two earliest joiners, or None if fewer than two wait."""

        if len(self._waiting) < 2:
            return None
        first = self._waiting.popleft()
        second = self._waiting.popleft()
        return first, second

    def remove(self, player_id: str) -> bool:
        for session in self._waiting:
            if session.player_id == player_id:
                self._waiting.remove(session)
                return True
        return False

    def player_ids(self) -> list[str]:
        return [s.player_id for s in self]
