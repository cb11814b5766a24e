import logging
import threading
import time
from typing import Dict, List, Optional

from guessgame.models import GAME_MASTER, DEFAULT_ATTEMPTS, GameSession, User


class SessionError(Exception):
    pass


class SessionExistsError(SessionError):
    def __init__(self, session_id: str):
        super().__init__(f"session {session_id} already exists")
        self.session_id = session_id


class GameSessionManager:
    """In-memory table of game sessions keyed by session id.

    The manager is owned by the application (see ``create_app``) rather
    than living at module level, so every app, and every test, gets an
    isolated table. Callers that need a validate-then-mutate sequence to
    be atomic hold ``lock`` around it; each method also takes the lock
    itself, so single calls are always safe.
    """

    def __init__(self, max_attempts: int = DEFAULT_ATTEMPTS, winner_bonus: int = 10,
                 min_players: int = 2, logger: Optional[logging.Logger] = None):
        self.max_attempts = max_attempts
        self.winner_bonus = winner_bonus
        self.min_players = min_players
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}
        # connection id -> session id, kept in step with participant lists
        self._members: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id) -> bool:
        return session_id in self._sessions

    def sessions(self) -> List[GameSession]:
        with self.lock:
            return list(self._sessions.values())

    def get_session(self, session_id: str) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    def session_of(self, user_id: str) -> Optional[str]:
        return self._members.get(user_id)

    def create_session(self, session_id: str, game_master: User) -> GameSession:
        with self.lock:
            if session_id in self._sessions:
                raise SessionExistsError(session_id)
            game_master.role = GAME_MASTER
            session = GameSession(id=session_id, game_master=game_master, players=[game_master])
            self._sessions[session_id] = session
            self._members[game_master.id] = session_id
            self.logger.info(f"[session-create] session={session_id} master={game_master.id}")
            return session

    def join_session(self, session_id: str, user: User) -> bool:
        with self.lock:
            session = self._sessions.get(session_id)
            if not session or session.started:
                return False
            if session.find_player(user.id):
                return False
            session.players.append(user)
            self._members[user.id] = session_id
            self.logger.info(f"[session-join] session={session_id} user={user.id} players={len(session.players)}")
            return True

    def leave_session(self, session_id: str, user_id: str) -> None:
        with self.lock:
            session = self._sessions.get(session_id)
            if not session:
                return
            remaining = [p for p in session.players if p.id != user_id]
            if len(remaining) == len(session.players):
                return
            session.players = remaining
            if self._members.get(user_id) == session_id:
                del self._members[user_id]
            self.logger.info(f"[session-leave] session={session_id} user={user_id} players={len(remaining)}")

            if not remaining:
                self.clear_timer(session_id)
                del self._sessions[session_id]
                self.logger.info(f"[session-delete] session={session_id}")
            elif session.game_master.id == user_id:
                session.game_master = remaining[0]
                session.game_master.role = GAME_MASTER
                self.logger.info(f"[session-master] session={session_id} master={session.game_master.id}")

    def start_game(self, session_id: str, question: str, answer: str, duration: float = 60) -> bool:
        with self.lock:
            session = self._sessions.get(session_id)
            if not session or session.started or len(session.players) < self.min_players:
                return False
            # A leftover handle from an earlier round must never end this one
            self.clear_timer(session_id)
            session.question = question
            session.answer = answer.strip().lower()
            session.started = True
            session.round_number += 1
            session.winner = None
            for p in session.players:
                p.attempts_left = self.max_attempts
            session.expires_at = int((time.time() + duration) * 1000)
            self.logger.info(
                f"[round-start] session={session_id} players={len(session.players)} duration={duration}s"
            )
            return True

    def end_game(self, session_id: str) -> None:
        with self.lock:
            self.clear_timer(session_id)
            session = self._sessions.get(session_id)
            if not session:
                return
            session.started = False
            session.question = None
            session.answer = None
            session.winner = None
            session.expires_at = None
            self.logger.info(f"[round-end] session={session_id}")

    def set_winner(self, session_id: str, winner_id: str) -> None:
        with self.lock:
            session = self._sessions.get(session_id)
            if not session:
                return
            winner = session.find_player(winner_id)
            if winner:
                session.winner = winner
                winner.score += self.winner_bonus

    def consume_attempt(self, session_id: str, user_id: str) -> int:
        """Charge one wrong guess to a participant; returns attempts left."""
        with self.lock:
            session = self._sessions.get(session_id)
            user = session.find_player(user_id) if session else None
            if not user:
                return 0
            user.attempts_left = max(0, user.attempts_left - 1)
            return user.attempts_left

    def set_timer(self, session_id: str, timer) -> None:
        with self.lock:
            session = self._sessions.get(session_id)
            if not session:
                timer.cancel()
                return
            if session.timer is not None and session.timer is not timer:
                session.timer.cancel()
            session.timer = timer
            self.logger.info(f"[timer-set] session={session_id} deadline={getattr(timer, 'deadline', None)}")

    def clear_timer(self, session_id: str) -> None:
        with self.lock:
            session = self._sessions.get(session_id)
            if not session or session.timer is None:
                return
            session.timer.cancel()
            session.timer = None
            self.logger.info(f"[timer-cancel] session={session_id}")

    def shutdown(self) -> None:
        """Cancel every pending timer and drop all sessions."""
        with self.lock:
            for session_id in list(self._sessions):
                self.clear_timer(session_id)
            self._sessions.clear()
            self._members.clear()
