from __future__ import annotations

import random
import string
from threading import RLock

from .models import Player, Room


CODE_ALPHABET = string.ascii_uppercase


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class RoomStore:
    """In-memory registry of every active room.

    Rooms are keyed by their internal id with a secondary index on the
    human-facing code. The store is the only owner of room records.
    """

    def __init__(self, code_length: int = 4, rng: random.Random | None = None) -> None:
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._code_index: dict[str, str] = {}
        self._code_length = code_length
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def generate_code(self) -> str:
        with self._lock:
            while True:
                code = "".join(self._rng.choices(CODE_ALPHABET, k=self._code_length))
                if code not in self._code_index:
                    return code

    def create(self, room: Room) -> Room:
        with self._lock:
            if room.code in self._code_index:
                raise ValueError(f"room code already in use: {room.code}")
            self._rooms[room.id] = room
            self._code_index[room.code] = room.id
            return room

    def delete(self, room_id: str) -> bool:
        with self._lock:
            room = self._rooms.pop(room_id, None)
            if room is None:
                return False
            if self._code_index.get(room.code) == room_id:
                del self._code_index[room.code]
            return True

    def get(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def find_by_code(self, code: str) -> Room | None:
        with self._lock:
            room_id = self._code_index.get(normalize_code(code))
            if room_id is None:
                return None
            return self._rooms.get(room_id)

    def find_by_player(self, player_id: str) -> tuple[Room, Player] | None:
        # MVP linear scan
        with self._lock:
            for room in self._rooms.values():
                player = room.get_player(player_id)
                if player is not None:
                    return room, player
            return None

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def list_lobby_rooms(self) -> list[dict]:
        with self._lock:
            return [
                {"code": r.code, "playerCount": len(r.players), "locked": r.locked}
                for r in self._rooms.values()
                if r.phase == "lobby"
            ]
