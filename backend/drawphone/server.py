from __future__ import annotations

from dataclasses import dataclass

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.store import RoomStore
from .realtime.coordinator import Coordinator
from .realtime.handlers import register_socketio_handlers
from .realtime.transport import SocketIOTransport
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .utils.logs import configure_logging


@dataclass
class Runtime:
    store: RoomStore
    transport: SocketIOTransport
    coordinator: Coordinator


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    logger = configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE") or None,
        ping_timeout=app.config.get("PING_TIMEOUT_SEC", 30),
        ping_interval=app.config.get("PING_INTERVAL_SEC", 10),
        max_http_buffer_size=app.config.get("MAX_HTTP_BUFFER_SIZE", 1_000_000),
    )

    store = RoomStore(code_length=app.config.get("ROOM_CODE_LENGTH", 4))
    transport = SocketIOTransport(socketio)
    coordinator = Coordinator(
        store,
        transport,
        default_max_rounds=app.config.get("DEFAULT_MAX_ROUNDS", 3),
        min_players=app.config.get("MIN_PLAYERS", 2),
        require_host_ready=app.config.get("REQUIRE_HOST_READY", True),
        nickname_max_length=app.config.get("NICKNAME_MAX_LENGTH", 16),
    )
    app.extensions["drawphone"] = Runtime(store=store, transport=transport, coordinator=coordinator)

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, coordinator)

    logger.info("Socket.IO server initialized (async_mode=%s)", socketio.async_mode)
    logger.info("Allowed origins: %s", cors_origins if isinstance(cors_origins, str) else ", ".join(cors_origins))

    return app, socketio
