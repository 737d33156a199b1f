from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from matchrelay.api.models import ServerMessage
from matchrelay.dispatcher import EventDispatcher
from matchrelay.lobby import Lobby
from matchrelay.players import PlayerSession, make_player_session


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Pick up HOST/PORT/LOG_LEVEL from the checkout's `.env`, if there is one.

    Skipped when CI is set, unless MATCHRELAY_LOAD_DOTENV_FOR_TESTS=1.
    """

    if os.environ.get("CI") and os.environ.get("MATCHRELAY_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


class RecordingConnection:
    """In-memory stand-in for a socket: remembers every frame sent to it."""

    def __init__(self) -> None:
        self.sent: list[ServerMessage] = []

    def send(self, message: ServerMessage) -> None:
        self.sent.append(message)

    def types(self) -> list[str]:
        return [m.type for m in self.sent]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture()
def make_session() -> Callable[..., PlayerSession]:
    """Factory for sessions bound to a RecordingConnection.

    The connection is reachable as `session.connection`.
    """

    def _make(name: str | None = None) -> PlayerSession:
        return make_player_session(connection=RecordingConnection(), name=name)

    return _make


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """TestClient with a fresh lobby.

    Always used as a context manager: startup creates the lobby and every
    websocket opened through it shares one event loop.
    """

    from matchrelay.api.deps import reset_lobby_for_tests
    from matchrelay.main import app

    reset_lobby_for_tests(app)
    with TestClient(app) as c:
        yield c
    reset_lobby_for_tests(app)


@pytest.fixture()
def make_dispatcher() -> Callable[..., tuple[EventDispatcher, RecordingConnection]]:
    """Factory for a dispatcher wired to a RecordingConnection."""

    def _make(lobby: Lobby) -> tuple[EventDispatcher, RecordingConnection]:
        conn = RecordingConnection()
        return EventDispatcher(lobby=lobby, connection=conn), conn

    return _make
