from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from .. import __version__

bp = Blueprint("health", __name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@bp.get("/health")
def health():
    return jsonify(
        {
            "status": "ok",
            "message": "Drawphone Socket.IO server is running",
            "version": __version__,
            "timestamp": _timestamp(),
        }
    )


@bp.get("/status")
def status():
    # Live connection ids, for operational debugging only.
    transport = current_app.extensions["drawphone"].transport
    sockets = [{"id": sid, "connected": True} for sid in transport.connections()]
    return jsonify(
        {
            "status": "ok",
            "connections": {"count": len(sockets), "sockets": sockets},
            "timestamp": _timestamp(),
        }
    )
