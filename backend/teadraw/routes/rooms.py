from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms")
def list_rooms():
    rooms = current_app.extensions["teadraw"]["registry"].list_rooms()
    payload = []
    for session in rooms:
        state = session.snapshot()
        payload.append({"roomId": session.room_id, "players": len(state["players"]), "round": state["round"]})
    return jsonify({"rooms": payload})


@bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    session = current_app.extensions["teadraw"]["registry"].get(room_id)
    if not session:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(session.snapshot())
