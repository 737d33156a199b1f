from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import pytest

from matchrelay.dispatcher import EventDispatcher
from matchrelay.lobby import Lobby

MakeDispatcher = Callable[[Lobby], tuple[EventDispatcher, Any]]


@pytest.mark.asyncio
async def test_full_match_through_dispatchers(make_dispatcher: MakeDispatcher) -> None:
    lobby = Lobby()
    ann, ann_conn = make_dispatcher(lobby)
    bo, bo_conn = make_dispatcher(lobby)

    await ann.on_message(json.dumps({"type": "JOIN_MATCHMAKING", "playerName": "Ann"}))
    await bo.on_message(json.dumps({"type": "JOIN_MATCHMAKING", "playerName": "Bo"}))

    assert ann_conn.types() == ["MATCHMAKING_STATUS", "GAME_START"]
    assert ann_conn.sent[0].player_id == ann.player_id  # type: ignore[union-attr]
    start = ann_conn.sent[1]
    assert start.opponent_id == bo.player_id  # type: ignore[union-attr]
    assert start.opponent_name == "Bo"  # type: ignore[union-attr]
    room_id = start.room_id  # type: ignore[union-attr]

    ann_conn.clear()
    bo_conn.clear()
    await ann.on_message(json.dumps({"type": "PLAYER_STATE_UPDATE", "roomId": room_id, "state": {"x": 1}}))

    assert ann_conn.sent == []
    assert bo_conn.types() == ["PLAYER_STATE_UPDATE"]
    assert bo_conn.sent[0].model_dump(by_alias=True) == {
        "type": "PLAYER_STATE_UPDATE",
        "playerId": ann.player_id,
        "state": {"x": 1},
    }
    assert ann.last_room_id == room_id

    await bo.on_message(json.dumps({"type": "GAME_OVER", "roomId": room_id}))
    assert ann_conn.types() == ["OPPONENT_ENDED_GAME"]
    assert bo.last_room_id == room_id
    assert len(lobby.rooms) == 0


@pytest.mark.asyncio
async def test_blank_name_keeps_default(make_dispatcher: MakeDispatcher) -> None:
    lobby = Lobby()
    ann, _ = make_dispatcher(lobby)
    default_name = ann.session.name

    await ann.on_message(json.dumps({"type": "JOIN_MATCHMAKING", "playerName": "   "}))

    assert ann.session.name == default_name
    assert ann.player_id in lobby.queue


@pytest.mark.asyncio
async def test_malformed_and_unknown_frames_are_dropped(
    make_dispatcher: MakeDispatcher, caplog: pytest.LogCaptureFixture
) -> None:
    lobby = Lobby()
    ann, ann_conn = make_dispatcher(lobby)

    with caplog.at_level(logging.DEBUG, logger="matchrelay.dispatcher"):
        await ann.on_message("{nope")
        await ann.on_message(json.dumps({"type": "GAME_OVER"}))
        await ann.on_message(json.dumps({"type": "CHAT", "text": "hi"}))

    assert ann_conn.sent == []
    assert len(lobby.queue) == 0
    assert any("discarding frame" in r.message for r in caplog.records)
    assert any("unknown message type" in r.message for r in caplog.records)

    # The connection keeps working afterwards.
    await ann.on_message(json.dumps({"type": "JOIN_MATCHMAKING", "playerName": "Ann"}))
    assert ann_conn.types() == ["MATCHMAKING_STATUS"]


@pytest.mark.asyncio
async def test_close_cleans_up_by_player_id_not_cached_room(make_dispatcher: MakeDispatcher) -> None:
    lobby = Lobby()
    ann, ann_conn = make_dispatcher(lobby)
    bo, _ = make_dispatcher(lobby)
    await ann.on_message(json.dumps({"type": "JOIN_MATCHMAKING", "playerName": "Ann"}))
    await bo.on_message(json.dumps({"type": "JOIN_MATCHMAKING", "playerName": "Bo"}))
    ann_conn.clear()

    # Bo never referenced the room, so the cached hint is empty.
    assert bo.last_room_id is None
    await bo.on_close()
    await bo.on_close()

    assert ann_conn.types() == ["OPPONENT_DISCONNECTED"]
    assert len(lobby.rooms) == 0
