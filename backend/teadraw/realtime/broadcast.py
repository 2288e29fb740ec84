from __future__ import annotations

from typing import Optional

from flask_socketio import SocketIO


class BroadcastGateway:
    """Room-wide fan-out and single-recipient delivery over Socket.IO.

    Emits to one room go through the same server queue, so events reach each
    member in the order they were sent.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self._socketio = socketio
        self._namespace = namespace

    def to_room(self, room_id: str, event: str, payload: dict, skip_sid: Optional[str] = None) -> None:
        self._socketio.emit(event, payload, to=room_id, skip_sid=skip_sid, namespace=self._namespace)

    def to_player(self, player_id: str, event: str, payload: dict) -> None:
        # Every connection sits in a personal room named after its sid.
        self._socketio.emit(event, payload, to=player_id, namespace=self._namespace)
