"""Server configuration: defaults from constants, overridable via environment."""

import os
from dataclasses import dataclass
from shared.constants import (
    DEFAULT_HOST, DEFAULT_PORT, MAX_CLIENTS, POWERUP_SPAWN_CHANCE, OUTBOX_SIZE,
)

ENV_PREFIX = "GRIDCLASH_"


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_clients: int = MAX_CLIENTS
    spawn_chance: float = POWERUP_SPAWN_CHANCE
    outbox_size: int = OUTBOX_SIZE

    @staticmethod
    def from_env(environ=None) -> "ServerConfig":
        """Build a config from GRIDCLASH_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = ServerConfig()
        try:
            config = ServerConfig(
                host=env.get(ENV_PREFIX + "HOST", defaults.host),
                port=int(env.get(ENV_PREFIX + "PORT", defaults.port)),
                max_clients=int(env.get(ENV_PREFIX + "MAX_CLIENTS", defaults.max_clients)),
                spawn_chance=float(env.get(ENV_PREFIX + "SPAWN_CHANCE", defaults.spawn_chance)),
                outbox_size=int(env.get(ENV_PREFIX + "OUTBOX_SIZE", defaults.outbox_size)),
            )
        except ValueError as e:
            raise ValueError(f"Invalid {ENV_PREFIX}* setting: {e}") from e
        config.validate()
        return config

    def validate(self):
        if self.max_clients < 1:
            raise ValueError("max_clients must be at least 1")
        if not 0.0 <= self.spawn_chance <= 1.0:
            raise ValueError("spawn_chance must be between 0 and 1")
        if self.outbox_size < 1:
            raise ValueError("outbox_size must be at least 1")
