import os
import sys


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) == "1"


def _default_async_mode() -> str:
    # eventlet has known compatibility issues on Windows and newer Python
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def parse_origins(raw: str) -> str | list[str]:
    raw = (raw or "").strip()
    if not raw or raw == "*":
        return "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3001"))

    # CORS: comma separated list, "*" allows any origin
    CORS_ORIGINS = parse_origins(os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = _flag("TRUST_PROXY_HEADERS", "1")

    # Socket.IO transport
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip() or _default_async_mode()
    PING_TIMEOUT_SEC = int(os.environ.get("PING_TIMEOUT_SEC", "30"))
    PING_INTERVAL_SEC = int(os.environ.get("PING_INTERVAL_SEC", "10"))
    MAX_HTTP_BUFFER_SIZE = int(os.environ.get("MAX_HTTP_BUFFER_SIZE", "1000000"))

    # Game
    DEFAULT_MAX_ROUNDS = int(os.environ.get("DEFAULT_MAX_ROUNDS", "3"))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "2"))
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "4"))
    NICKNAME_MAX_LENGTH = int(os.environ.get("NICKNAME_MAX_LENGTH", "16"))
    REQUIRE_HOST_READY = _flag("REQUIRE_HOST_READY", "1")
