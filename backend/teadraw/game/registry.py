from __future__ import annotations

from threading import RLock
from typing import Callable, Optional

from .session import GameSession


class RoomRegistry:
    """Rooms by id, plus which room each connection currently sits in.

    Rooms are created on first join and kept around when they empty out.
    """

    def __init__(self, session_factory: Callable[[str], GameSession]) -> None:
        self._factory = session_factory
        self._lock = RLock()
        self._rooms: dict[str, GameSession] = {}
        self._membership: dict[str, str] = {}

    def get_or_create(self, room_id: str) -> GameSession:
        with self._lock:
            session = self._rooms.get(room_id)
            if session is None:
                session = self._factory(room_id)
                self._rooms[room_id] = session
            return session

    def get(self, room_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._rooms.get(room_id)

    def list_rooms(self) -> list[GameSession]:
        with self._lock:
            return list(self._rooms.values())

    def bind(self, player_id: str, room_id: str) -> Optional[str]:
        """Bind a connection to a room; returns the room it was in before, if different."""
        with self._lock:
            previous = self._membership.get(player_id)
            self._membership[player_id] = room_id
            return previous if previous != room_id else None

    def unbind(self, player_id: str) -> Optional[str]:
        with self._lock:
            return self._membership.pop(player_id, None)

    def session_for(self, player_id: str) -> Optional[GameSession]:
        with self._lock:
            room_id = self._membership.get(player_id)
            return self._rooms.get(room_id) if room_id else None
