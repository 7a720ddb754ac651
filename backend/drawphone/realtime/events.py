from __future__ import annotations

# Transport lifecycle (not client-issued)
CONNECT = "connect"
DISCONNECT = "disconnect"

# Inbound
CREATE_ROOM = "create-room"
JOIN_ROOM = "join-room"
LEAVE_ROOM = "leave-room"
TOGGLE_READY = "toggle-ready"
START_GAME = "start-game"
SUBMIT_SENTENCE = "submit-sentence"
SUBMIT_DRAWING = "submit-drawing"
UPDATE_ROOM_SETTINGS = "update-room-settings"
KICK_PLAYER = "kick-player"
TOGGLE_ROOM_LOCK = "toggle-room-lock"
START_PRESENTATION = "start-presentation"
SHOW_RESULT = "show-result"
END_PRESENTATION = "end-presentation"
RESET_GAME = "reset-game"
GET_ACTIVE_ROOMS = "get-active-rooms"

INBOUND_EVENTS = (
    CREATE_ROOM,
    JOIN_ROOM,
    LEAVE_ROOM,
    TOGGLE_READY,
    START_GAME,
    SUBMIT_SENTENCE,
    SUBMIT_DRAWING,
    UPDATE_ROOM_SETTINGS,
    KICK_PLAYER,
    TOGGLE_ROOM_LOCK,
    START_PRESENTATION,
    SHOW_RESULT,
    END_PRESENTATION,
    RESET_GAME,
    GET_ACTIVE_ROOMS,
)

# Outbound
ROOM_CREATED = "room-created"
ROOM_JOINED = "room-joined"
PLAYER_JOINED = "player-joined"
PLAYER_LEFT = "player-left"
ROOM_UPDATED = "room-updated"
GAME_STARTED = "game-started"
PHASE_CHANGED = "phase-changed"
PLAYER_KICKED = "player-kicked"
ROOM_LOCK_CHANGED = "room-lock-changed"
PRESENTATION_STARTED = "presentation-started"
RESULT_CHANGED = "result-changed"
PRESENTATION_ENDED = "presentation-ended"
GAME_RESET = "game-reset"
ACTIVE_ROOMS = "active-rooms"
ERROR = "error"

# Generic error text sent when a handler fails unexpectedly.
FAILURE_MESSAGES = {
    CREATE_ROOM: "Failed to create room",
    JOIN_ROOM: "Failed to join room",
    LEAVE_ROOM: "Failed to leave room",
    TOGGLE_READY: "Failed to toggle ready status",
    START_GAME: "Failed to start game",
    SUBMIT_SENTENCE: "Failed to submit sentence",
    SUBMIT_DRAWING: "Failed to submit drawing",
    UPDATE_ROOM_SETTINGS: "Failed to update room settings",
    KICK_PLAYER: "Failed to kick player",
    TOGGLE_ROOM_LOCK: "Failed to toggle room lock",
    START_PRESENTATION: "Failed to start presentation mode",
    SHOW_RESULT: "Failed to show result",
    END_PRESENTATION: "Failed to end presentation mode",
    RESET_GAME: "Failed to reset game",
    GET_ACTIVE_ROOMS: "Failed to list active rooms",
}
