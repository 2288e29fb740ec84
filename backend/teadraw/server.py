from __future__ import annotations

import sys
from typing import Optional

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from .config import Config
from .game.clock import Scheduler
from .game.leaderboard import Leaderboard
from .game.models import GameSettings
from .game.registry import RoomRegistry
from .game.session import GameSession
from .realtime.broadcast import BroadcastGateway
from .realtime.handlers import register_socketio_handlers
from .realtime.scheduler import SocketIOScheduler
from .routes.health import bp as health_bp
from .routes.leaderboard import bp as leaderboard_bp
from .routes.rooms import bp as rooms_bp
from .routes.teams import bp as teams_bp


def _async_mode(configured: str) -> str:
    if configured:
        return configured
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config, scheduler: Optional[Scheduler] = None) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", "")),
    )

    settings = GameSettings.from_config(app.config)
    gateway = BroadcastGateway(socketio)
    leaderboard = Leaderboard(top_n=app.config.get("LEADERBOARD_TOP_N", 10))
    timers = scheduler or SocketIOScheduler(socketio)

    registry = RoomRegistry(
        lambda room_id: GameSession(room_id, gateway, timers, leaderboard, settings)
    )
    app.extensions["teadraw"] = {"registry": registry, "leaderboard": leaderboard}

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(teams_bp, url_prefix="/api")
    app.register_blueprint(leaderboard_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, registry, app.config.get("DEFAULT_ROOM_ID", "default-room"))

    return app, socketio
