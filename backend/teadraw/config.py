import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS / Socket.IO handshake
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Server
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3001"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game
    DEFAULT_ROOM_ID = os.environ.get("DEFAULT_ROOM_ID", "default-room")
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "30"))
    REVEAL_DURATION_SEC = int(os.environ.get("REVEAL_DURATION_SEC", "6"))
    MAX_ROUNDS = int(os.environ.get("MAX_ROUNDS", "10"))
    TICK_INTERVAL_SEC = float(os.environ.get("TICK_INTERVAL_SEC", "1.0"))
    LEADERBOARD_TOP_N = int(os.environ.get("LEADERBOARD_TOP_N", "10"))
    RESET_SCORES_ON_RESTART = os.environ.get("RESET_SCORES_ON_RESTART", "0") == "1"
