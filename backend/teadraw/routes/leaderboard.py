from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

bp = Blueprint("leaderboard", __name__)


@bp.get("/leaderboard")
def get_leaderboard():
    leaderboard = current_app.extensions["teadraw"]["leaderboard"]
    try:
        limit = int(request.args.get("limit", leaderboard.top_n))
    except ValueError:
        limit = leaderboard.top_n

    return jsonify({"players": leaderboard.top_players(limit), "teams": leaderboard.team_rankings()})


@bp.get("/leaderboard/players/<nickname>")
def get_player_standing(nickname: str):
    entry = current_app.extensions["teadraw"]["leaderboard"].entry(nickname)
    if entry is None:
        return jsonify({"error": "player_not_found"}), 404
    return jsonify(entry.to_dict())
