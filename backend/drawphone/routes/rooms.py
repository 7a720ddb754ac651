from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game import service

bp = Blueprint("rooms", __name__)


def _store():
    return current_app.extensions["drawphone"].store


@bp.get("/rooms")
def list_rooms():
    return jsonify({"rooms": service.lobby_listing(_store())})


@bp.get("/rooms/<code>")
def get_room(code: str):
    room = _store().find_by_code(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    # Drawing payloads can be large; only the socket channel carries them.
    return jsonify(service.room_public_state(room, include_drawings=False))
