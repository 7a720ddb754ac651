"""Event coordinator: the room protocol state machine.

Inbound messages are appended to a FIFO inbox and drained by whichever
caller holds the processing lock, one message at a time. A message's
validate, mutate and emit steps always finish before the next message is
looked at, so room records never see interleaved read-modify-writes.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Protocol

from ..game import service
from ..game.models import Player, Room
from ..game.results import Err, Result, not_found
from ..game.service import Departure, PhaseChange
from ..game.store import RoomStore
from . import events

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def send(self, sid: str, event: str, data: Any = None) -> None: ...

    def send_to_group(self, group: str, event: str, data: Any = None, skip_sid: str | None = None) -> None: ...

    def broadcast(self, event: str, data: Any = None) -> None: ...

    def join_group(self, sid: str, group: str) -> None: ...

    def leave_group(self, sid: str, group: str) -> None: ...

    def add_connection(self, sid: str) -> None: ...

    def remove_connection(self, sid: str) -> None: ...


@dataclass(frozen=True)
class InboundMessage:
    sid: str
    event: str
    payload: Any = None


def _as_dict(payload: Any) -> dict:
    return payload if isinstance(payload, dict) else {}


class Coordinator:
    def __init__(
        self,
        store: RoomStore,
        transport: Transport,
        *,
        default_max_rounds: int = 3,
        min_players: int = 2,
        require_host_ready: bool = True,
        nickname_max_length: int = 16,
    ) -> None:
        self.store = store
        self.transport = transport
        self.default_max_rounds = default_max_rounds
        self.min_players = min_players
        self.require_host_ready = require_host_ready
        self.nickname_max_length = nickname_max_length

        self._inbox: deque[InboundMessage] = deque()
        self._lock = RLock()

        # Handlers that need the caller's current room receive (sid, room, player, payload).
        self._room_handlers: dict[str, Callable[[str, Room, Player, Any], None]] = {
            events.TOGGLE_READY: self._on_toggle_ready,
            events.START_GAME: self._on_start_game,
            events.SUBMIT_SENTENCE: self._on_submit_sentence,
            events.SUBMIT_DRAWING: self._on_submit_drawing,
            events.UPDATE_ROOM_SETTINGS: self._on_update_room_settings,
            events.KICK_PLAYER: self._on_kick_player,
            events.TOGGLE_ROOM_LOCK: self._on_toggle_room_lock,
            events.START_PRESENTATION: self._on_start_presentation,
            events.SHOW_RESULT: self._on_show_result,
            events.END_PRESENTATION: self._on_end_presentation,
            events.RESET_GAME: self._on_reset_game,
        }
        self._handlers: dict[str, Callable[[str, Any], None]] = {
            events.CONNECT: self._on_connect,
            events.DISCONNECT: self._on_disconnect,
            events.CREATE_ROOM: self._on_create_room,
            events.JOIN_ROOM: self._on_join_room,
            events.LEAVE_ROOM: self._on_leave_room,
            events.GET_ACTIVE_ROOMS: self._on_get_active_rooms,
        }

    # ---- inbox ----

    def submit(self, sid: str, event: str, payload: Any = None) -> None:
        self._inbox.append(InboundMessage(sid=sid, event=event, payload=payload))
        with self._lock:
            while self._inbox:
                self._process(self._inbox.popleft())

    def _process(self, message: InboundMessage) -> None:
        try:
            self._dispatch(message)
        except Exception:
            if message.event == events.DISCONNECT:
                logger.exception("Error handling disconnect of %s", message.sid)
                return
            logger.exception("Error handling %s from %s", message.event, message.sid)
            failure = events.FAILURE_MESSAGES.get(message.event, "Internal server error")
            self.transport.send(message.sid, events.ERROR, {"message": failure})

    def _dispatch(self, message: InboundMessage) -> None:
        handler = self._handlers.get(message.event)
        if handler is not None:
            handler(message.sid, message.payload)
            return

        room_handler = self._room_handlers.get(message.event)
        if room_handler is None:
            logger.warning("Unknown event %r from %s", message.event, message.sid)
            self._reject(message.sid, message.event, not_found(f"Unknown event: {message.event}"))
            return

        found = self.store.find_by_player(message.sid)
        if found is None:
            self._reject(message.sid, message.event, not_found("You are not in a room"))
            return
        room, player = found
        room_handler(message.sid, room, player, message.payload)

    # ---- emission helpers ----

    def _reject(self, sid: str, event: str, err: Err) -> None:
        logger.debug("Rejected %s from %s: %s (%s)", event, sid, err.message, err.kind.value)
        self.transport.send(sid, events.ERROR, {"message": err.message})

    def _room_state(self, room: Room) -> dict:
        return service.room_public_state(room)

    def _broadcast_room_updated(self, room: Room) -> None:
        self.transport.send_to_group(room.id, events.ROOM_UPDATED, self._room_state(room))

    def _broadcast_active_rooms(self) -> None:
        self.transport.broadcast(events.ACTIVE_ROOMS, service.lobby_listing(self.store))

    def _broadcast_phase_change(self, room: Room, change: PhaseChange) -> None:
        self.transport.send_to_group(
            room.id, events.PHASE_CHANGED, {"phase": change.phase, "currentRound": change.round}
        )

    def _announce_departure(self, sid: str, departure: Departure) -> None:
        if departure.room_deleted:
            return
        self.transport.send_to_group(
            departure.room.id,
            events.PLAYER_LEFT,
            {"playerId": sid, "updatedRoom": self._room_state(departure.room)},
        )
        if departure.phase_change is not None:
            self._broadcast_phase_change(departure.room, departure.phase_change)

    def _depart(self, sid: str, room: Room, player: Player) -> None:
        logger.info("Player %s leaving room: %s", player.nickname, room.code)
        departure = service.remove_player(self.store, room, sid)
        self.transport.leave_group(sid, room.id)
        if departure is not None:
            self._announce_departure(sid, departure)

    def _leave_current_room(self, sid: str) -> bool:
        found = self.store.find_by_player(sid)
        if found is None:
            return False
        self._depart(sid, *found)
        return True

    # ---- connection lifecycle ----

    def _on_connect(self, sid: str, payload: Any) -> None:
        logger.info("New connection: %s", sid)
        self.transport.add_connection(sid)
        self.transport.send(sid, events.ACTIVE_ROOMS, service.lobby_listing(self.store))

    def _on_disconnect(self, sid: str, payload: Any) -> None:
        logger.info("Disconnection: %s", sid)
        self.transport.remove_connection(sid)
        if self._leave_current_room(sid):
            self._broadcast_active_rooms()

    # ---- room lifecycle ----

    def _on_create_room(self, sid: str, payload: Any) -> None:
        data = _as_dict(payload)
        previous = self.store.find_by_player(sid)
        result = service.create_room(
            self.store,
            sid,
            str(data.get("nickname") or ""),
            str(data.get("profilePic", "") or ""),
            max_rounds=self.default_max_rounds,
            nickname_max_length=self.nickname_max_length,
        )
        if isinstance(result, Err):
            self._reject(sid, events.CREATE_ROOM, result)
            return

        room = result.value
        if previous is not None:
            self._depart(sid, *previous)
        self.transport.join_group(sid, room.id)
        self.transport.send(sid, events.ROOM_CREATED, self._room_state(room))
        self._broadcast_active_rooms()

    def _on_join_room(self, sid: str, payload: Any) -> None:
        data = _as_dict(payload)
        previous = self.store.find_by_player(sid)
        result = service.join_room(
            self.store,
            str(data.get("roomCode", "")),
            sid,
            str(data.get("nickname") or ""),
            str(data.get("profilePic", "") or ""),
            nickname_max_length=self.nickname_max_length,
        )
        if isinstance(result, Err):
            self._reject(sid, events.JOIN_ROOM, result)
            return

        room = result.value
        if previous is not None:
            self._depart(sid, *previous)
        player = room.get_player(sid)
        self.transport.join_group(sid, room.id)
        self.transport.send(sid, events.ROOM_JOINED, self._room_state(room))
        self.transport.send_to_group(
            room.id,
            events.PLAYER_JOINED,
            {
                "playerId": sid,
                "nickname": player.nickname,
                "profilePic": player.avatar,
                "updatedRoom": self._room_state(room),
            },
            skip_sid=sid,
        )
        self._broadcast_active_rooms()

    def _on_leave_room(self, sid: str, payload: Any) -> None:
        if self._leave_current_room(sid):
            self._broadcast_active_rooms()

    def _on_get_active_rooms(self, sid: str, payload: Any) -> None:
        self.transport.send(sid, events.ACTIVE_ROOMS, service.lobby_listing(self.store))

    # ---- lobby / readiness ----

    def _on_toggle_ready(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        service.toggle_ready(room, player)
        self._broadcast_room_updated(room)

    def _on_start_game(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.start_game(
            room,
            player,
            min_players=self.min_players,
            require_host_ready=self.require_host_ready,
        )
        if self._rejected(sid, events.START_GAME, result):
            return
        self.transport.send_to_group(room.id, events.GAME_STARTED, self._room_state(room))
        self._broadcast_active_rooms()

    def _on_update_room_settings(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        settings = _as_dict(payload).get("settings")
        result = service.update_settings(room, player, settings if settings is not None else {})
        if self._rejected(sid, events.UPDATE_ROOM_SETTINGS, result):
            return
        self._broadcast_room_updated(room)

    def _on_kick_player(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        target_id = _as_dict(payload).get("playerId")
        result = service.kick_player(self.store, room, player, target_id)
        if self._rejected(sid, events.KICK_PLAYER, result):
            return

        departure: Departure = result.value
        kicked_id = departure.player.id
        self.transport.send(kicked_id, events.PLAYER_KICKED, {"roomCode": room.code, "playerId": kicked_id})
        self.transport.leave_group(kicked_id, room.id)
        self._broadcast_room_updated(room)
        if departure.phase_change is not None:
            self._broadcast_phase_change(room, departure.phase_change)
        self._broadcast_active_rooms()

    def _on_toggle_room_lock(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.toggle_lock(room, player)
        if self._rejected(sid, events.TOGGLE_ROOM_LOCK, result):
            return
        self.transport.send_to_group(
            room.id, events.ROOM_LOCK_CHANGED, {"roomCode": room.code, "locked": room.locked}
        )
        self._broadcast_room_updated(room)
        self._broadcast_active_rooms()

    def _on_reset_game(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.reset_game(room, player)
        if self._rejected(sid, events.RESET_GAME, result):
            return
        self.transport.send_to_group(room.id, events.GAME_RESET, {"roomCode": room.code})
        self._broadcast_room_updated(room)
        self._broadcast_active_rooms()

    # ---- gameplay ----

    def _on_submit_sentence(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.submit_sentence(room, player, _as_dict(payload).get("text"))
        if self._rejected(sid, events.SUBMIT_SENTENCE, result):
            return
        if result.value is not None:
            self._broadcast_phase_change(room, result.value)
        self._broadcast_room_updated(room)

    def _on_submit_drawing(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.submit_drawing(room, player, _as_dict(payload).get("imageData"))
        if self._rejected(sid, events.SUBMIT_DRAWING, result):
            return
        if result.value is not None:
            self._broadcast_phase_change(room, result.value)
        self._broadcast_room_updated(room)

    # ---- presentation ----

    def _on_start_presentation(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.start_presentation(room, player)
        if self._rejected(sid, events.START_PRESENTATION, result):
            return
        self.transport.send_to_group(room.id, events.PRESENTATION_STARTED, service.presentation_state(room))

    def _on_show_result(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        index = payload.get("index") if isinstance(payload, dict) else payload
        result = service.show_result(room, player, index)
        if self._rejected(sid, events.SHOW_RESULT, result):
            return
        self.transport.send_to_group(room.id, events.RESULT_CHANGED, service.presentation_state(room))

    def _on_end_presentation(self, sid: str, room: Room, player: Player, payload: Any) -> None:
        result = service.end_presentation(room, player)
        if self._rejected(sid, events.END_PRESENTATION, result):
            return
        self.transport.send_to_group(room.id, events.PRESENTATION_ENDED, service.presentation_state(room))

    def _rejected(self, sid: str, event: str, result: Result) -> bool:
        if isinstance(result, Err):
            self._reject(sid, event, result)
            return True
        return False
