"""Power-up spawning and collection."""

import random
from typing import Optional
from shared.constants import (
    PowerUpType, POWERUP_SPAWN_CHANCE, MAX_POWERUPS, HEAL_AMOUNT,
)
from shared.models import PowerUp


def free_cells(grid, power_ups: list[PowerUp]) -> list[tuple[int, int]]:
    """Cells with neither a unit marker nor a power-up."""
    taken = {p.position for p in power_ups}
    return [cell for cell in grid.empty_cells() if cell not in taken]


def maybe_spawn(grid, power_ups: list[PowerUp], rng: random.Random,
                chance: float = POWERUP_SPAWN_CHANCE,
                limit: int = MAX_POWERUPS) -> Optional[PowerUp]:
    """Run one spawn roll. Appends to `power_ups` and returns the new one, if any."""
    if rng.random() >= chance:
        return None
    if len(power_ups) >= limit:
        return None
    cells = free_cells(grid, power_ups)
    if not cells:
        return None
    x, y = rng.choice(cells)
    power_up = PowerUp(type=rng.choice([PowerUpType.HEAL, PowerUpType.ATTACK_BOOST]), x=x, y=y)
    power_ups.append(power_up)
    return power_up


def collect_at(unit, power_ups: list[PowerUp]) -> Optional[dict]:
    """Consume the power-up under `unit`, if any, and return a collection event."""
    for power_up in power_ups:
        if power_up.position == unit.position:
            break
    else:
        return None

    power_ups.remove(power_up)
    event = {
        "type": "power_up_collected",
        "role": unit.role.value,
        "power_up": power_up.type.value,
        "x": power_up.x,
        "y": power_up.y,
    }
    if power_up.type == PowerUpType.HEAL:
        event["healed"] = unit.heal(HEAL_AMOUNT)
        event["hp"] = unit.hp
    else:
        unit.attack_boost = True
    return event
