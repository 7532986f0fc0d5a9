"""Core game state and rule enforcement.

Every rule method either mutates the state and returns a result dict, or
raises ValidationError without touching anything.
"""

import random
from typing import Any, Optional
from shared.constants import (
    Role, PLAYER_ROLES, SPAWN_POSITIONS, MAX_HP,
    MOVE_RANGE, ATTACK_RANGE, BOOSTED_DAMAGE, POWERUP_SPAWN_CHANCE, MAX_POWERUPS,
)
from shared.errors import ValidationError
from shared.grid_utils import chebyshev_distance
from shared.models import PowerUp, GameStateSnapshot
from server.grid import Grid
from server.unit import Unit
from server.combat import CombatMachine, PendingCombat
from server.powerups import maybe_spawn, collect_at


class GameState:
    """Authoritative game state. Mutated only by the actor."""

    def __init__(self, rng: Optional[random.Random] = None,
                 spawn_chance: float = POWERUP_SPAWN_CHANCE,
                 max_power_ups: int = MAX_POWERUPS,
                 max_hp: int = MAX_HP):
        self.rng = rng or random.Random()
        self.spawn_chance = spawn_chance
        self.max_power_ups = max_power_ups
        self.max_hp = max_hp
        self.grid = Grid()
        self.units: dict[Role, Unit] = {}
        self.turn: Role = Role.PLAYER_A
        self.winner: Optional[Role] = None
        self.power_ups: list[PowerUp] = []
        self.combat = CombatMachine()
        # Slot holders are client sessions; None means vacant
        self.players: dict[Role, Any] = {role: None for role in PLAYER_ROLES}
        self.reset_board()

    # -- lifecycle --------------------------------------------------------

    def reset_board(self):
        """Put both units back at their spawns and clear everything else."""
        self.grid.clear_all()
        self.winner = None
        self.power_ups.clear()
        self.combat.reset()
        self.turn = Role.PLAYER_A
        self.units = {}
        for role in PLAYER_ROLES:
            x, y = SPAWN_POSITIONS[role]
            self.units[role] = Unit(role, x, y, max_hp=self.max_hp)
            self.grid.place(role, x, y)

    # -- roster slots -----------------------------------------------------

    def assign_slot(self, client) -> Role:
        """Seat `client` in the first vacant player slot, else spectator."""
        for role in PLAYER_ROLES:
            if self.players[role] is None:
                self.players[role] = client
                return role
        return Role.SPECTATOR

    def vacate_slot(self, client) -> Optional[Role]:
        for role in PLAYER_ROLES:
            if self.players[role] is client:
                self.players[role] = None
                return role
        return None

    def swap_slots(self):
        a, b = self.players[Role.PLAYER_A], self.players[Role.PLAYER_B]
        self.players[Role.PLAYER_A], self.players[Role.PLAYER_B] = b, a

    # -- validation helpers -----------------------------------------------

    def _require_can_act(self, role: Role):
        if not role.is_player:
            raise ValidationError("Spectators cannot act")
        if self.winner is not None:
            raise ValidationError("Game is over")
        if self.combat.active:
            raise ValidationError("A combat is in progress")
        if self.turn != role:
            raise ValidationError("Not your turn")

    def _require_in_bounds(self, x: int, y: int):
        if not self.grid.in_bounds(x, y):
            raise ValidationError("Position is off the board")

    def _advance_turn(self) -> Optional[PowerUp]:
        """Pass the turn to the other side and run the spawn roll."""
        self.turn = self.turn.opponent()
        return maybe_spawn(self.grid, self.power_ups, self.rng,
                           chance=self.spawn_chance, limit=self.max_power_ups)

    def _eliminate_if_dead(self, unit: Unit, victor: Role):
        if not unit.alive:
            self.grid.clear(unit.x, unit.y)
            self.winner = victor

    # -- actions ----------------------------------------------------------

    def move(self, role: Role, x: int, y: int) -> dict:
        self._require_can_act(role)
        self._require_in_bounds(x, y)
        unit = self.units[role]
        distance = chebyshev_distance(unit.x, unit.y, x, y)
        if distance == 0:
            raise ValidationError("You are already there")
        if distance > MOVE_RANGE:
            raise ValidationError(f"Too far: you can move at most {MOVE_RANGE} squares")
        if self.grid.is_occupied(x, y):
            raise ValidationError("Cell is occupied")

        self.grid.clear(unit.x, unit.y)
        unit.move_to(x, y)
        self.grid.place(role, x, y)
        collected = collect_at(unit, self.power_ups)
        spawned = self._advance_turn()
        return {"role": role.value, "x": x, "y": y,
                "collected": collected, "spawned": spawned}

    def attack(self, role: Role, x: int, y: int) -> dict:
        """Start a combat against the unit at (x, y).

        Returns {"boosted": True, "result": {...}} for an immediate boosted
        hit, or {"boosted": False, "combat": PendingCombat} when the dice
        must still be revealed.
        """
        self._require_can_act(role)
        self._require_in_bounds(x, y)
        defender_role = role.opponent()
        attacker = self.units[role]
        defender = self.units[defender_role]
        if not defender.alive or defender.position != (x, y):
            raise ValidationError("No enemy at that position")
        if chebyshev_distance(attacker.x, attacker.y, x, y) > ATTACK_RANGE:
            raise ValidationError("Target is out of range")

        if attacker.consume_boost():
            return {"boosted": True, "result": self._resolve_boosted(attacker, defender)}

        combat = self.combat.begin(role, defender_role, self.rng)
        return {"boosted": False, "combat": combat}

    def _resolve_boosted(self, attacker: Unit, defender: Unit) -> dict:
        defender.take_damage(BOOSTED_DAMAGE)
        self._eliminate_if_dead(defender, attacker.role)
        spawned = None
        if self.winner is None:
            spawned = self._advance_turn()
        return {
            "attacker": attacker.role.value,
            "defender": defender.role.value,
            "damage": BOOSTED_DAMAGE,
            "defender_hp": defender.hp,
            "game_winner": self.winner.value if self.winner else None,
            "spawned": spawned,
        }

    def roll(self, role: Role) -> Optional[dict]:
        """Reveal `role`'s die in the pending combat.

        Returns None for a duplicate reveal. Otherwise returns
        {"reveal": {...}, "result": None | {...}}; `result` is filled once
        the second die is revealed and the stored outcome has been applied.
        """
        combat = self.combat.pending
        revealed, resolved = self.combat.reveal(role)
        if not revealed:
            return None
        if resolved is None:
            return {"reveal": combat.reveal_payload(), "result": None}
        return {"reveal": resolved.reveal_payload(), "result": self._apply_combat(resolved)}

    def _apply_combat(self, combat: PendingCombat) -> dict:
        loser = self.units[combat.loser]
        loser.take_damage(combat.damage)
        self._eliminate_if_dead(loser, combat.winner)
        spawned = None
        if self.winner is None:
            spawned = self._advance_turn()
        result = combat.result_payload()
        result["loser_hp"] = loser.hp
        result["game_winner"] = self.winner.value if self.winner else None
        result["spawned"] = spawned
        return result

    # -- snapshots --------------------------------------------------------

    def get_snapshot(self, spectators: int = 0) -> GameStateSnapshot:
        players = {}
        for role in PLAYER_ROLES:
            client = self.players[role]
            players[role] = client.display_name if client is not None else None
        return GameStateSnapshot(
            board=self.grid.to_rows(),
            turn=self.turn,
            winner=self.winner,
            units={role: unit.to_state() for role, unit in self.units.items()},
            power_ups=list(self.power_ups),
            players=players,
            spectators=spectators,
            combat=self.combat.to_state(),
            grid_size=self.grid.size,
        )
