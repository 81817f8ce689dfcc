"""Game constants shared between client and server."""

from enum import Enum


class Mark(str, Enum):
    SPADES = "Spades"
    DIAMONDS = "Diamonds"
    CLUBS = "Clubs"
    HEARTS = "Hearts"


# The fixed deck every mark and guess is drawn from
MARKS = [Mark.SPADES, Mark.DIAMONDS, Mark.CLUBS, Mark.HEARTS]


class Role(str, Enum):
    JACK = "Jack"


# Timing (milliseconds, as sent to clients)
ROUND_DURATION_MS = 5 * 60 * 1000
CONFINEMENT_DURATION_MS = 1 * 60 * 1000

# Session
INITIAL_BOT_COUNT = 3
BOT_ID_PREFIX = "bot_"

# Arena the transport tracks positions in
ARENA_WIDTH = 800
ARENA_HEIGHT = 600

# Server
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3000

# Messages
ELIMINATED_REASON = "Wrong guess or no guess submitted"
SURVIVED_MESSAGE = "Correct guess! You survive to the next round."
SURVIVORS_WIN_MESSAGE = "Jack of Hearts eliminated. All surviving players win!"
JACK_WINS_MESSAGE = "Only two players remain with the Jack of Hearts. Jack wins!"


class Phase(str, Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    CONFINED = "confined"
    EVALUATED = "evaluated"
    GAME_OVER = "game_over"


class Outcome(str, Enum):
    CONTINUE = "continue"
    SURVIVORS_WIN = "survivors"
    JACK_WINS = "jack"


class MessageType(str, Enum):
    # Client -> Server
    SUBMIT_GUESS = "submit_guess"
    PLAYER_READY = "player_ready"
    CHAT_MESSAGE = "chat_message"
    PLAYER_MOVEMENT = "player_movement"
    # Server -> Client
    WELCOME = "welcome"
    CURRENT_PLAYERS = "current_players"
    NEW_PLAYER = "new_player"
    DISCONNECT_PLAYER = "disconnect_player"
    PLAYER_MOVED = "player_moved"
    WAITING_ROOM_UPDATE = "waiting_room_update"
    GAME_STARTING = "game_starting"
    ROUND_STARTED = "round_started"
    CONFINEMENT_STARTED = "confinement_started"
    JACK_ASSIGNED = "jack_assigned"
    JACK_ROLE = "jack_role"
    BOT_GUESS = "bot_guess"
    GUESS_RECEIVED = "guess_received"
    ELIMINATED = "eliminated"
    SURVIVED = "survived"
    GAME_OVER = "game_over"
    ERROR = "error"
