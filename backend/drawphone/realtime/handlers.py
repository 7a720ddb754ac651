from __future__ import annotations

from typing import Any

from flask import request
from flask_socketio import SocketIO

from . import events
from .coordinator import Coordinator


def register_socketio_handlers(socketio: SocketIO, coordinator: Coordinator) -> None:
    @socketio.on("connect")
    def on_connect(auth: Any = None):
        coordinator.submit(request.sid, events.CONNECT)

    @socketio.on("disconnect")
    def on_disconnect(reason: Any = None):
        coordinator.submit(request.sid, events.DISCONNECT)

    def _forward(event: str):
        def handler(data: Any = None):
            coordinator.submit(request.sid, event, data)

        handler.__name__ = "on_" + event.replace("-", "_")
        return handler

    for event in events.INBOUND_EVENTS:
        socketio.on_event(event, _forward(event))
