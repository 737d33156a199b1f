from __future__ import annotations

from statemachine import State, StateMachine

from matchrelay.rooms import Room, RoomPhase


class RoomFSM(StateMachine):
    """FSM wrapper around a Room's lifecycle.

    - active -> ended: a player sent game-over
    - active -> abandoned: a player's connection closed

    Both closed phases are final; the lobby drops the room from the registry
    right after the transition.
    """

    active = State(RoomPhase.active.value, value=RoomPhase.active.value, initial=True)
    ended = State(RoomPhase.ended.value, value=RoomPhase.ended.value, final=True)
    abandoned = State(RoomPhase.abandoned.value, value=RoomPhase.abandoned.value, final=True)

    game_over = active.to(ended)
    player_left = active.to(abandoned)

    def __init__(self, room: Room):
        self.room = room
        super().__init__(start_value=room.phase.value)

    def sync_phase_to_model(self) -> None:
        self.room.phase = RoomPhase(str(self.current_state.value))
