from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from .models import Drawing, Phase, Player, PresentationState, Room, Sentence
from .results import Ok, Result, forbidden, invalid_phase, not_found, precondition_failed
from .store import RoomStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseChange:
    phase: Phase
    round: int


@dataclass(frozen=True)
class Departure:
    room: Room
    player: Player
    room_deleted: bool
    new_host: Player | None = None
    phase_change: PhaseChange | None = None


def normalize_nickname(nickname: Any, max_length: int = 16) -> str:
    # Never rejects: control characters are dropped and long names cut.
    n = "".join(ch for ch in str(nickname or "") if ord(ch) >= 32).strip()
    return n[:max_length]


def _is_host(room: Room, player: Player) -> bool:
    host = room.host
    return host is not None and host.id == player.id


def _all_submitted(room: Room, entries: list[Sentence] | list[Drawing]) -> bool:
    authors = {e.author_id for e in entries if e.round == room.current_round}
    return bool(room.players) and all(p.id in authors for p in room.players)


def advance_if_complete(room: Room) -> PhaseChange | None:
    """Move to the next phase once every current player has submitted.

    Runs after each submission and after a player leaves mid-round, so a
    departure can complete a round as well.
    """
    if room.phase == "writing":
        if not _all_submitted(room, room.sentences):
            return None
        room.phase = "drawing"
        logger.info("Room %s round %d: writing -> drawing", room.code, room.current_round)
        return PhaseChange(phase=room.phase, round=room.current_round)

    if room.phase == "drawing":
        if not _all_submitted(room, room.drawings):
            return None
        if room.current_round >= room.max_rounds:
            room.phase = "results"
        else:
            room.current_round += 1
            room.phase = "writing"
        logger.info("Room %s: drawing -> %s (round %d)", room.code, room.phase, room.current_round)
        return PhaseChange(phase=room.phase, round=room.current_round)

    return None


def create_room(
    store: RoomStore,
    player_id: str,
    nickname: Any,
    avatar: str = "",
    *,
    max_rounds: int = 3,
    nickname_max_length: int = 16,
) -> Result:
    name = normalize_nickname(nickname, nickname_max_length)

    room = Room(
        id=str(uuid.uuid4()),
        code=store.generate_code(),
        max_rounds=max_rounds,
        players=[Player(id=player_id, nickname=name, avatar=avatar, is_host=True)],
    )
    store.create(room)
    logger.info("Room created: %s (%s) by %s", room.code, room.id, name)
    return Ok(room)


def join_room(
    store: RoomStore,
    code: str,
    player_id: str,
    nickname: Any,
    avatar: str = "",
    *,
    nickname_max_length: int = 16,
) -> Result:
    room = store.find_by_code(code)
    if room is None:
        return not_found("Room not found")
    if room.get_player(player_id) is not None:
        return precondition_failed("You are already in this room")
    if room.locked:
        return precondition_failed("Room is locked")
    if room.phase != "lobby":
        return invalid_phase("Game has already started")

    name = normalize_nickname(nickname, nickname_max_length)
    room.players.append(Player(id=player_id, nickname=name, avatar=avatar))
    logger.info("Player %s joined room: %s", name, room.code)
    return Ok(room)


def remove_player(store: RoomStore, room: Room, player_id: str) -> Departure | None:
    """Remove a player, deleting the room when it empties.

    When the host leaves, the earliest remaining player (join order) becomes
    host. Leaving mid-round may complete the round for everyone else.
    """
    player = room.get_player(player_id)
    if player is None:
        return None

    room.players.remove(player)

    if not room.players:
        store.delete(room.id)
        logger.info("Room %s is empty, removing", room.code)
        return Departure(room=room, player=player, room_deleted=True)

    new_host = None
    if player.is_host:
        new_host = room.players[0]
        new_host.is_host = True
        logger.info("New host assigned in %s: %s", room.code, new_host.nickname)

    return Departure(
        room=room,
        player=player,
        room_deleted=False,
        new_host=new_host,
        phase_change=advance_if_complete(room),
    )


def toggle_ready(room: Room, player: Player) -> Result:
    player.is_ready = not player.is_ready
    return Ok(player.is_ready)


def start_game(
    room: Room,
    player: Player,
    *,
    min_players: int = 2,
    require_host_ready: bool = True,
) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can start the game")
    if room.phase != "lobby":
        return invalid_phase("Game has already started")

    must_be_ready = [p for p in room.players if require_host_ready or p.id != player.id]
    if not all(p.is_ready for p in must_be_ready):
        return precondition_failed("Not all players are ready")
    if len(room.players) < min_players:
        return precondition_failed(f"Need at least {min_players} players to start")

    room.phase = "writing"
    room.current_round = 1
    logger.info("Game started in room %s with %d players", room.code, len(room.players))
    return Ok(PhaseChange(phase=room.phase, round=room.current_round))


def submit_sentence(room: Room, player: Player, text: Any) -> Result:
    if room.phase != "writing":
        return invalid_phase("Cannot submit sentence in current game state")

    t = str(text or "").strip()
    if not t:
        return precondition_failed("Sentence cannot be empty")
    if any(s.author_id == player.id and s.round == room.current_round for s in room.sentences):
        return precondition_failed("You have already submitted a sentence this round")

    room.sentences.append(Sentence(author_id=player.id, text=t, round=room.current_round))
    return Ok(advance_if_complete(room))


def submit_drawing(room: Room, player: Player, image_data: Any) -> Result:
    if room.phase != "drawing":
        return invalid_phase("Cannot submit drawing in current game state")

    if not isinstance(image_data, str) or not image_data:
        return precondition_failed("Drawing cannot be empty")
    if any(d.author_id == player.id and d.round == room.current_round for d in room.drawings):
        return precondition_failed("You have already submitted a drawing this round")

    room.drawings.append(Drawing(author_id=player.id, image_data=image_data, round=room.current_round))
    return Ok(advance_if_complete(room))


def _parse_max_rounds(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        return None
    return value if value >= 1 else None


def update_settings(room: Room, player: Player, settings: Any) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can update room settings")
    if not isinstance(settings, dict):
        return precondition_failed("Invalid settings")

    raw = settings.get("maxRounds")
    if raw is not None:
        max_rounds = _parse_max_rounds(raw)
        if max_rounds is None:
            return precondition_failed("maxRounds must be a positive integer")
        room.max_rounds = max_rounds

    return Ok(room)


def kick_player(store: RoomStore, room: Room, player: Player, target_id: Any) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can kick players")

    target = room.get_player(str(target_id or ""))
    if target is None:
        return not_found("Player not found")
    if target.id == player.id:
        return forbidden("Cannot kick yourself")

    departure = remove_player(store, room, target.id)
    logger.info("Player %s kicked from room %s", target.nickname, room.code)
    return Ok(departure)


def toggle_lock(room: Room, player: Player) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can lock/unlock the room")
    room.locked = not room.locked
    return Ok(room.locked)


def start_presentation(room: Room, player: Player) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can start presentation mode")
    if room.phase != "results":
        return invalid_phase("Presentation mode only available in results phase")
    room.presentation = PresentationState(active=True, current_index=0)
    return Ok(room.presentation)


def show_result(room: Room, player: Player, index: Any) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can control the presentation")
    if not room.presentation.active:
        return invalid_phase("Presentation mode not active")

    # Not bounded by the number of results; the client owns that.
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        return precondition_failed("Invalid result index")
    room.presentation.current_index = index
    return Ok(room.presentation)


def end_presentation(room: Room, player: Player) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can end presentation mode")
    if not room.presentation.active:
        return invalid_phase("Presentation mode not active")
    room.presentation = PresentationState()
    return Ok(room.presentation)


def reset_game(room: Room, player: Player) -> Result:
    if not _is_host(room, player):
        return forbidden("Only the host can reset the game")

    room.phase = "lobby"
    room.current_round = 0
    room.sentences = []
    room.drawings = []
    room.presentation = PresentationState()
    for p in room.players:
        p.is_ready = False
    logger.info("Room %s reset to lobby", room.code)
    return Ok(room)


def presentation_state(room: Room) -> dict:
    return {"active": room.presentation.active, "currentIndex": room.presentation.current_index}


def room_public_state(room: Room, include_drawings: bool = True) -> dict:
    payload = {
        "id": room.id,
        "code": room.code,
        "players": [
            {
                "id": p.id,
                "nickname": p.nickname,
                "profilePic": p.avatar,
                "isHost": p.is_host,
                "isReady": p.is_ready,
            }
            for p in room.players
        ],
        "gameState": room.phase,
        "currentRound": room.current_round,
        "maxRounds": room.max_rounds,
        "createdAt": room.created_at.isoformat(),
        "locked": room.locked,
        "sentences": [
            {"playerId": s.author_id, "text": s.text, "round": s.round} for s in room.sentences
        ],
        "presentationMode": presentation_state(room),
    }

    if include_drawings:
        payload["drawings"] = [
            {"playerId": d.author_id, "imageData": d.image_data, "round": d.round} for d in room.drawings
        ]
    else:
        payload["drawingCount"] = len(room.drawings)

    return payload


def lobby_listing(store: RoomStore) -> list[dict]:
    return store.list_lobby_rooms()
