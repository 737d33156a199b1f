from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClientMessageType(StrEnum):
    join_matchmaking = "JOIN_MATCHMAKING"
    player_state_update = "PLAYER_STATE_UPDATE"
    game_over = "GAME_OVER"


class WireModel(BaseModel):
    """Base for every frame on the socket: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -- client -> server --------------------------------------------------------


class JoinMatchmaking(WireModel):
    type: Literal["JOIN_MATCHMAKING"]

    # Absent or blank keeps the server-generated default name.
    player_name: str | None = None


class StateUpdate(WireModel):
    type: Literal["PLAYER_STATE_UPDATE"]
    room_id: str

    # Opaque to the server; relayed as-is.
    state: Any


class GameOver(WireModel):
    type: Literal["GAME_OVER"]
    room_id: str


ClientMessage = Annotated[Union[JoinMatchmaking, StateUpdate, GameOver], Field(discriminator="type")]


# -- server -> client --------------------------------------------------------


class MatchmakingStatus(WireModel):
    type: Literal["MATCHMAKING_STATUS"] = "MATCHMAKING_STATUS"
    status: str
    player_id: str


class GameStart(WireModel):
    type: Literal["GAME_START"] = "GAME_START"
    opponent_id: str
    opponent_name: str
    room_id: str


class OpponentState(WireModel):
    type: Literal["PLAYER_STATE_UPDATE"] = "PLAYER_STATE_UPDATE"
    player_id: str
    state: Any


class OpponentDisconnected(WireModel):
    type: Literal["OPPONENT_DISCONNECTED"] = "OPPONENT_DISCONNECTED"


class OpponentEndedGame(WireModel):
    type: Literal["OPPONENT_ENDED_GAME"] = "OPPONENT_ENDED_GAME"


ServerMessage = Union[MatchmakingStatus, GameStart, OpponentState, OpponentDisconnected, OpponentEndedGame]


class LobbyStats(BaseModel):
    queued: int
    rooms: int


class InfoResponse(BaseModel):
    name: str
    version: str
