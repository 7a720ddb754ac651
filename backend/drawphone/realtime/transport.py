from __future__ import annotations

import logging
from threading import Lock
from typing import Any

from flask_socketio import SocketIO

logger = logging.getLogger(__name__)


class SocketIOTransport:
    """Addressing primitives over a Flask-SocketIO server.

    Every emit is fire-and-forget: a failed delivery is logged and dropped.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self.socketio = socketio
        self.namespace = namespace
        self._connections: set[str] = set()
        self._lock = Lock()

    def _emit(self, event: str, data: Any = None, **kwargs: Any) -> None:
        args = () if data is None else (data,)
        try:
            self.socketio.emit(event, *args, namespace=self.namespace, **kwargs)
        except Exception:
            logger.warning("Dropped %s emission (%s)", event, kwargs, exc_info=True)

    def send(self, sid: str, event: str, data: Any = None) -> None:
        self._emit(event, data, to=sid)

    def send_to_group(self, group: str, event: str, data: Any = None, skip_sid: str | None = None) -> None:
        self._emit(event, data, to=group, skip_sid=skip_sid)

    def broadcast(self, event: str, data: Any = None) -> None:
        self._emit(event, data)

    def join_group(self, sid: str, group: str) -> None:
        self.socketio.server.enter_room(sid, group, namespace=self.namespace)

    def leave_group(self, sid: str, group: str) -> None:
        self.socketio.server.leave_room(sid, group, namespace=self.namespace)

    def add_connection(self, sid: str) -> None:
        with self._lock:
            self._connections.add(sid)

    def remove_connection(self, sid: str) -> None:
        with self._lock:
            self._connections.discard(sid)

    def connections(self) -> list[str]:
        with self._lock:
            return sorted(self._connections)
