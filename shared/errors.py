"""Error kinds raised across the server."""


class GameError(Exception):
    """Base class for all game-level errors."""


class ValidationError(GameError):
    """An action is illegal against the current game state.

    Reported privately to the requester; the state is left untouched.
    """


class CapacityError(GameError):
    """The roster is full; the connection is told and then dropped."""


class MalformedInputError(GameError):
    """An inbound frame could not be parsed into a known action."""
