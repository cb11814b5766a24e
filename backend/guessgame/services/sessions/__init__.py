"""Session domain services: the in-memory store and round timers.

This package holds the game state machine used by the Socket.IO
handlers and HTTP routes, keeping transport concerns separated from
core game mechanics.
"""

from .manager import GameSessionManager, SessionError, SessionExistsError
from .timers import RoundTimer

__all__ = [
    'GameSessionManager',
    'RoundTimer',
    'SessionError',
    'SessionExistsError',
]
