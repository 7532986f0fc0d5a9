"""Two-phase combat: outcome fixed at attack time, revealed one roll at a time."""

import random
from dataclasses import dataclass
from typing import Optional
from shared.constants import Role, CombatPhase, DIE_SIDES
from shared.errors import ValidationError
from shared.models import CombatState


@dataclass
class PendingCombat:
    """An attack whose dice are already rolled but not yet revealed."""
    attacker: Role
    defender: Role
    attacker_roll: int
    defender_roll: int
    winner: Role
    loser: Role
    damage: int
    attacker_rolled: bool = False
    defender_rolled: bool = False

    def involves(self, role: Role) -> bool:
        return role in (self.attacker, self.defender)

    def reveal_payload(self) -> dict:
        """Cumulative reveal state; dice appear only for sides that have rolled."""
        payload = {
            "attacker": self.attacker.value,
            "defender": self.defender.value,
            "attacker_rolled": self.attacker_rolled,
            "defender_rolled": self.defender_rolled,
        }
        if self.attacker_rolled:
            payload["attacker_roll"] = self.attacker_roll
        if self.defender_rolled:
            payload["defender_roll"] = self.defender_roll
        return payload

    def result_payload(self) -> dict:
        return {
            "attacker": self.attacker.value,
            "defender": self.defender.value,
            "attacker_roll": self.attacker_roll,
            "defender_roll": self.defender_roll,
            "winner": self.winner.value,
            "loser": self.loser.value,
            "damage": self.damage,
        }


def roll_combat(attacker: Role, defender: Role, rng: random.Random) -> PendingCombat:
    """Roll both dice and decide the outcome now.

    Higher die wins and a tie goes to the attacker. The loser takes the
    difference between the dice, never less than 1.
    """
    attacker_roll = rng.randint(1, DIE_SIDES)
    defender_roll = rng.randint(1, DIE_SIDES)
    if attacker_roll >= defender_roll:
        winner, loser = attacker, defender
    else:
        winner, loser = defender, attacker
    damage = max(1, abs(attacker_roll - defender_roll))
    return PendingCombat(
        attacker=attacker,
        defender=defender,
        attacker_roll=attacker_roll,
        defender_roll=defender_roll,
        winner=winner,
        loser=loser,
        damage=damage,
    )


class CombatMachine:
    """Idle -> awaiting attacker roll -> awaiting defender roll -> idle.

    Holds at most one PendingCombat. Boosted attacks never pass through here.
    """

    def __init__(self):
        self.phase: CombatPhase = CombatPhase.IDLE
        self.pending: Optional[PendingCombat] = None

    @property
    def active(self) -> bool:
        return self.phase != CombatPhase.IDLE

    def begin(self, attacker: Role, defender: Role, rng: random.Random) -> PendingCombat:
        if self.active:
            raise ValidationError("A combat is already in progress")
        self.pending = roll_combat(attacker, defender, rng)
        self.phase = CombatPhase.AWAITING_ATTACKER_ROLL
        return self.pending

    def reveal(self, role: Role) -> tuple[bool, Optional[PendingCombat]]:
        """Reveal `role`'s die.

        Returns (revealed, resolved). `revealed` is False for a duplicate
        reveal. `resolved` is the finished record once both sides have
        rolled, at which point the machine is back to idle.
        """
        combat = self.pending
        if combat is None:
            raise ValidationError("No combat in progress")
        if not combat.involves(role):
            raise ValidationError("You are not part of this combat")

        if role == combat.attacker:
            if combat.attacker_rolled:
                return False, None
            combat.attacker_rolled = True
            self.phase = CombatPhase.AWAITING_DEFENDER_ROLL
            return True, None

        if combat.defender_rolled:
            return False, None
        if not combat.attacker_rolled:
            raise ValidationError("The attacker must roll first")
        combat.defender_rolled = True
        self.reset()
        return True, combat

    def reset(self):
        self.phase = CombatPhase.IDLE
        self.pending = None

    def to_state(self) -> Optional[CombatState]:
        if self.pending is None:
            return None
        return CombatState(
            phase=self.phase,
            attacker=self.pending.attacker,
            defender=self.pending.defender,
            attacker_rolled=self.pending.attacker_rolled,
            defender_rolled=self.pending.defender_rolled,
        )
