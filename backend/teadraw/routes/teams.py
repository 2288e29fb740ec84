from __future__ import annotations

from flask import Blueprint, jsonify

from ..game.teams import TEAMS

bp = Blueprint("teams", __name__)


@bp.get("/teams")
def list_teams():
    return jsonify({"teams": [t.to_dict() for t in TEAMS.values()]})
