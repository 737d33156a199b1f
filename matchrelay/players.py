from __future__ import annotations

import random
from dataclasses import dataclass, field
from uuid import uuid4

from matchrelay.websocket_hub import Connection


def new_player_id() -> str:
    return f"player-{uuid4().hex}"


def placeholder_name(rng: random.Random | None = None) -> str:
    n = rng.randrange(1000) if rng is not None else random.randrange(1000)
    return f"Player {n}"


@dataclass(slots=True, eq=False)
class PlayerSession:
    """Server-side identity for one connected client.

    One session per connection and one connection per session. The id is fixed
    for the session's lifetime; the name may be replaced when the client joins
    matchmaking.
    """

    connection: Connection
    player_id: str = field(default_factory=new_player_id)
    name: str = field(default_factory=placeholder_name)


def make_player_session(*, connection: Connection, name: str | None = None) -> PlayerSession:
    session = PlayerSession(connection=connection)
    if name:
        session.name = name
    return session
