"""Game constants shared between the server and its clients."""

from enum import Enum

# Board
GRID_SIZE = 9

# Units
MAX_HP = 10
MOVE_RANGE = 3
ATTACK_RANGE = 1

# Combat
DIE_SIDES = 6
BOOSTED_DAMAGE = 5

# Power-ups
HEAL_AMOUNT = 3
POWERUP_SPAWN_CHANCE = 0.3
MAX_POWERUPS = 3

# Roster / chat
MAX_CLIENTS = 10
MAX_CHAT_LENGTH = 200
MAX_NAME_LENGTH = 20

# Server
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8765
OUTBOX_SIZE = 64


class Role(str, Enum):
    PLAYER_A = "player_a"
    PLAYER_B = "player_b"
    SPECTATOR = "spectator"

    @property
    def is_player(self) -> bool:
        return self in (Role.PLAYER_A, Role.PLAYER_B)

    def opponent(self) -> "Role":
        if self == Role.PLAYER_A:
            return Role.PLAYER_B
        if self == Role.PLAYER_B:
            return Role.PLAYER_A
        raise ValueError("Spectators have no opponent")


PLAYER_ROLES = (Role.PLAYER_A, Role.PLAYER_B)

# Fixed opposing corners, (x, y)
SPAWN_POSITIONS = {
    Role.PLAYER_A: (0, 0),
    Role.PLAYER_B: (GRID_SIZE - 1, GRID_SIZE - 1),
}

# Chat sender tag for server-generated notices
SYSTEM_SENDER = "system"


class PowerUpType(str, Enum):
    HEAL = "heal"
    ATTACK_BOOST = "attack_boost"


class CombatPhase(str, Enum):
    IDLE = "idle"
    AWAITING_ATTACKER_ROLL = "awaiting_attacker_roll"
    AWAITING_DEFENDER_ROLL = "awaiting_defender_roll"


class ActionType(str, Enum):
    JOIN = "join"
    LEAVE = "leave"
    MOVE = "move"
    ATTACK = "attack"
    ROLL = "roll"
    RESET = "reset"
    CHAT = "chat"
    SET_NAME = "setName"


class ClientMessageType(str, Enum):
    MOVE = "move"
    ATTACK = "attack"
    ROLL = "roll"
    RESET = "reset"
    CHAT = "chat"
    SET_NAME = "setName"


class ServerMessageType(str, Enum):
    ASSIGNED = "assigned"
    STATE = "state"
    ERROR = "error"
    CHAT = "chat"
    COMBAT_START = "combat_start"
    COMBAT_ROLLED = "combat_rolled"
    COMBAT = "combat"
    COMBAT_BOOSTED = "combat_boosted"
