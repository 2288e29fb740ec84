from __future__ import annotations

import logging
from typing import Any, Callable

from flask_socketio import SocketIO

from ..game.clock import TimerHandle


logger = logging.getLogger(__name__)


class SocketIOScheduler:
    """Deferred callbacks on Socket.IO background tasks, so nothing sleeps on a handler."""

    def __init__(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle()

        def _runner() -> None:
            self._socketio.sleep(delay)
            if handle.cancelled:
                return
            try:
                callback(*args)
            except Exception:
                logger.exception("Deferred callback %r failed", callback)

        self._socketio.start_background_task(_runner)
        return handle
