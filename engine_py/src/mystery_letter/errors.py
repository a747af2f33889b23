# engine_py/src/mystery_letter/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Turn ownership
NOT_YOUR_TURN = "NOT_YOUR_TURN"
ROUND_NOT_ACTIVE = "ROUND_NOT_ACTIVE"
PLAYER_ELIMINATED = "PLAYER_ELIMINATED"
UNKNOWN_PARTICIPANT = "UNKNOWN_PARTICIPANT"

# Rule violations
MUST_PLAY_FORCED_CARD = "MUST_PLAY_FORCED_CARD"
CANNOT_DISCARD_LOSING_CARD = "CANNOT_DISCARD_LOSING_CARD"
ILLEGAL_GUESS = "ILLEGAL_GUESS"
GUESS_REQUIRED = "GUESS_REQUIRED"
CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
INVALID_TARGET = "INVALID_TARGET"
DRAW_REQUIRED = "DRAW_REQUIRED"

# Resources
INSUFFICIENT_PLAYERS = "INSUFFICIENT_PLAYERS"
DECK_EMPTY = "DECK_EMPTY"
HAND_ALREADY_FULL = "HAND_ALREADY_FULL"
ROOM_FULL = "ROOM_FULL"
ROUND_IN_PROGRESS = "ROUND_IN_PROGRESS"
INVALID_BOT_CONFIG = "INVALID_BOT_CONFIG"

# Authorization
NOT_HOST = "NOT_HOST"
HOST_ALREADY_CLAIMED = "HOST_ALREADY_CLAIMED"
UNKNOWN_TARGET = "UNKNOWN_TARGET"
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
NOT_IN_ROOM = "NOT_IN_ROOM"

INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
