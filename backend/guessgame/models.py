from dataclasses import dataclass, field
from typing import List, Optional

GAME_MASTER = 'game-master'
PLAYER = 'player'
ROLES = (GAME_MASTER, PLAYER)

DEFAULT_ATTEMPTS = 3


@dataclass
class User:
    id: str  # Socket.IO sid of the owning connection
    name: str
    role: str = PLAYER
    score: int = 0
    attempts_left: int = DEFAULT_ATTEMPTS

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'role': self.role,
            'score': self.score,
            'attemptsLeft': self.attempts_left,
        }


def create_user(user_id: str, name: str, role: str = PLAYER) -> User:
    if role not in ROLES:
        raise ValueError(f"unknown role: {role}")
    return User(id=user_id, name=name, role=role)


@dataclass
class GameSession:
    id: str
    game_master: User
    players: List[User] = field(default_factory=list)
    question: Optional[str] = None
    answer: Optional[str] = None  # lowercased; only set while started
    started: bool = False
    winner: Optional[User] = None
    expires_at: Optional[int] = None  # epoch milliseconds
    round_number: int = 0  # bumped on every round start
    timer: Optional[object] = field(default=None, repr=False)

    def find_player(self, user_id: str) -> Optional[User]:
        for p in self.players:
            if p.id == user_id:
                return p
        return None

    def to_dict(self):
        """Client-facing view broadcast on every ``session-update``.

        The answer is left out; clients learn it from ``game-ended``.
        """
        return {
            'id': self.id,
            'gameMaster': self.game_master.to_dict(),
            'players': [p.to_dict() for p in self.players],
            'question': self.question,
            'started': self.started,
            'winner': self.winner.to_dict() if self.winner else None,
            'expiresAt': self.expires_at,
            'round': self.round_number,
        }
