"""Serializable data classes for game entities.

Used by the server to build snapshots and by clients to read them back.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from shared.constants import Role, PowerUpType, CombatPhase, GRID_SIZE


@dataclass
class PowerUp:
    type: PowerUpType
    x: int
    y: int

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {"type": self.type.value, "x": self.x, "y": self.y}

    @staticmethod
    def from_dict(d: dict) -> PowerUp:
        return PowerUp(type=PowerUpType(d["type"]), x=d["x"], y=d["y"])


@dataclass
class UnitState:
    role: Role
    x: int
    y: int
    hp: int
    max_hp: int
    attack_boost: bool = False
    alive: bool = True

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "x": self.x,
            "y": self.y,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "attack_boost": self.attack_boost,
            "alive": self.alive,
        }

    @staticmethod
    def from_dict(d: dict) -> UnitState:
        return UnitState(
            role=Role(d["role"]),
            x=d["x"],
            y=d["y"],
            hp=d["hp"],
            max_hp=d["max_hp"],
            attack_boost=d.get("attack_boost", False),
            alive=d.get("alive", True),
        )


@dataclass
class CombatState:
    """Public view of a pending combat. Dice are never part of it."""
    phase: CombatPhase
    attacker: Role
    defender: Role
    attacker_rolled: bool = False
    defender_rolled: bool = False

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "attacker": self.attacker.value,
            "defender": self.defender.value,
            "attacker_rolled": self.attacker_rolled,
            "defender_rolled": self.defender_rolled,
        }

    @staticmethod
    def from_dict(d: dict) -> CombatState:
        return CombatState(
            phase=CombatPhase(d["phase"]),
            attacker=Role(d["attacker"]),
            defender=Role(d["defender"]),
            attacker_rolled=d.get("attacker_rolled", False),
            defender_rolled=d.get("defender_rolled", False),
        )


@dataclass
class GameStateSnapshot:
    """Full game state sent to clients."""
    board: list[list[Optional[Role]]]
    turn: Role
    winner: Optional[Role]
    units: dict[Role, UnitState]
    power_ups: list[PowerUp] = field(default_factory=list)
    players: dict[Role, Optional[str]] = field(default_factory=dict)
    spectators: int = 0
    combat: Optional[CombatState] = None
    grid_size: int = GRID_SIZE

    def to_dict(self) -> dict:
        return {
            "grid_size": self.grid_size,
            "board": [[cell.value if cell else None for cell in row] for row in self.board],
            "turn": self.turn.value,
            "winner": self.winner.value if self.winner else None,
            "units": {role.value: u.to_dict() for role, u in self.units.items()},
            "power_ups": [p.to_dict() for p in self.power_ups],
            "players": {role.value: name for role, name in self.players.items()},
            "spectators": self.spectators,
            "combat": self.combat.to_dict() if self.combat else None,
        }

    @staticmethod
    def from_dict(d: dict) -> GameStateSnapshot:
        return GameStateSnapshot(
            board=[[Role(cell) if cell else None for cell in row] for row in d["board"]],
            turn=Role(d["turn"]),
            winner=Role(d["winner"]) if d.get("winner") else None,
            units={Role(k): UnitState.from_dict(v) for k, v in d["units"].items()},
            power_ups=[PowerUp.from_dict(p) for p in d.get("power_ups", [])],
            players={Role(k): v for k, v in d.get("players", {}).items()},
            spectators=d.get("spectators", 0),
            combat=CombatState.from_dict(d["combat"]) if d.get("combat") else None,
            grid_size=d.get("grid_size", GRID_SIZE),
        )
