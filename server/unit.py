"""Unit model: position, hit points, attack boost."""

from shared.constants import MAX_HP, Role
from shared.models import UnitState


class Unit:
    """Server-side unit owned by one player role."""

    def __init__(self, role: Role, x: int, y: int, max_hp: int = MAX_HP):
        self.role = role
        self.x = x
        self.y = y
        self.max_hp = max_hp
        self.hp: int = max_hp
        self.attack_boost: bool = False

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def move_to(self, x: int, y: int):
        self.x = x
        self.y = y

    def take_damage(self, amount: int) -> int:
        """Apply damage clamped at zero. Returns the HP actually lost."""
        before = self.hp
        self.hp = max(0, self.hp - amount)
        return before - self.hp

    def heal(self, amount: int) -> int:
        """Restore HP clamped at max. Returns the HP actually gained."""
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def consume_boost(self) -> bool:
        had_boost = self.attack_boost
        self.attack_boost = False
        return had_boost

    def to_state(self) -> UnitState:
        return UnitState(
            role=self.role,
            x=self.x,
            y=self.y,
            hp=self.hp,
            max_hp=self.max_hp,
            attack_boost=self.attack_boost,
            alive=self.alive,
        )
