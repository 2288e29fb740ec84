from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..game.registry import RoomRegistry


logger = logging.getLogger(__name__)

MAX_NICKNAME_LEN = 16


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def _validate_nickname(name: str) -> bool:
    if len(name) > MAX_NICKNAME_LEN:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in name or ">" in name:
        return False
    # No control characters.
    for ch in name:
        if ord(ch) < 32:
            return False
    return True


def register_socketio_handlers(socketio: SocketIO, registry: RoomRegistry, default_room_id: str) -> None:
    @socketio.on("join-room")
    def on_join_room(data=None):
        payload = _payload(data)
        sid = request.sid
        room_id = str(payload.get("roomId") or default_room_id).strip() or default_room_id
        nickname = str(payload.get("nickname") or "").strip() or f"玩家{sid[:6]}"
        team_id = payload.get("teamId")

        if not _validate_nickname(nickname):
            emit("room-error", {"error": "invalid_nickname"})
            return

        previous = registry.bind(sid, room_id)
        if previous:
            old = registry.get(previous)
            leave_room(previous)
            if old is not None:
                old.leave(sid)

        session = registry.get_or_create(room_id)
        join_room(room_id)
        session.join(sid, nickname, team_id if isinstance(team_id, str) else None)

    @socketio.on("draw-stroke")
    def on_draw_stroke(data=None):
        session = registry.session_for(request.sid)
        if session is None:
            return
        session.submit_stroke(request.sid, data)

    @socketio.on("clear-canvas")
    def on_clear_canvas(data=None):
        session = registry.session_for(request.sid)
        if session is None:
            return
        session.clear_canvas(request.sid)

    @socketio.on("submit-guess")
    def on_submit_guess(data=None):
        session = registry.session_for(request.sid)
        if session is None:
            return
        session.submit_guess(request.sid, _payload(data).get("guess"))

    @socketio.on("restart-game")
    def on_restart_game(data=None):
        session = registry.session_for(request.sid)
        if session is None:
            return
        logger.info("%s requested a restart of room %s", request.sid, session.room_id)
        session.restart()

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("Client connected: %s", request.sid)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        sid = request.sid
        room_id = registry.unbind(sid)
        if room_id:
            session = registry.get(room_id)
            if session is not None:
                session.leave(sid)
        logger.info("Client disconnected: %s", sid)
