from __future__ import annotations

from fastapi import FastAPI
from fastapi.requests import HTTPConnection

from matchrelay.lobby import Lobby


def init_lobby(app: FastAPI) -> Lobby:
    """Create the process-wide lobby once and keep it on `app.state`.

    Safe to call multiple times; subsequent calls return the existing instance.
    """

    lobby = getattr(app.state, "lobby", None)
    if lobby is None:
        lobby = Lobby()
        app.state.lobby = lobby
    return lobby


def reset_lobby_for_tests(app: FastAPI) -> None:
    app.state.lobby = None


def get_lobby(conn: HTTPConnection) -> Lobby:
    lobby = getattr(conn.app.state, "lobby", None)
    if lobby is None:
        raise RuntimeError("Lobby not initialized. Call init_lobby() at startup.")
    return lobby
