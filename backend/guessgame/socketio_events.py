from uuid import uuid4

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from guessgame import socketio
from guessgame.models import GAME_MASTER, PLAYER, create_user
from guessgame.services.sessions import RoundTimer, SessionExistsError


def handle_connect():
    # Clients compare this id against participant ids in session-update
    emit('connected', {'id': _get_sid()})


def handle_disconnect(reason=None):
    manager = _manager()
    sid = _get_sid()
    with manager.lock:
        session_id = manager.session_of(sid)
        if not session_id:
            return
        current_app.logger.info(f"[disconnect] user={sid} session={session_id} reason={reason}")
        manager.leave_session(session_id, sid)
        broadcast_session(manager, session_id, _namespace())


def handle_create_session(data):
    data = _payload(data)
    name = _text(data, 'name')
    if not name:
        return _failure('Name is required.')

    manager = _manager()
    sid = _get_sid()
    session_id = str(uuid4())
    with manager.lock:
        previous = manager.session_of(sid)
        try:
            manager.create_session(session_id, create_user(sid, name, GAME_MASTER))
        except SessionExistsError as exc:
            current_app.logger.warning(f"[session-create] {exc}")
            return _failure('Unable to create session.')
        _leave_previous(manager, sid, previous)
        join_room(session_id)
        broadcast_session(manager, session_id, _namespace())
    return {'success': True, 'sessionId': session_id}


def handle_join_session(data):
    data = _payload(data)
    session_id = _text(data, 'sessionId')
    name = _text(data, 'name')
    if not name:
        return _failure('Name is required.')

    manager = _manager()
    sid = _get_sid()
    with manager.lock:
        previous = manager.session_of(sid)
        if not manager.join_session(session_id, create_user(sid, name, PLAYER)):
            return _failure('Unable to join session.')
        _leave_previous(manager, sid, previous)
        join_room(session_id)
        broadcast_session(manager, session_id, _namespace())
    return {'success': True}


def handle_start_game(data):
    data = _payload(data)
    session_id = _text(data, 'sessionId')
    question = _text(data, 'question')
    answer = _text(data, 'answer')

    manager = _manager()
    sid = _get_sid()
    namespace = _namespace()
    with manager.lock:
        session = manager.get_session(session_id)
        if not session or session.game_master.id != sid or len(session.players) < manager.min_players:
            return _failure('Not authorized or not enough players.')
        if not question or not answer:
            return _failure('Question and answer are required.')

        duration = float(current_app.config.get('ROUND_DURATION_SEC', 60))
        if not manager.start_game(session_id, question, answer, duration):
            return _failure('Game could not be started.')

        app = current_app._get_current_object()
        timer = RoundTimer(socketio, duration, expire_round, app, session_id, session.round_number)
        timer.start()
        manager.set_timer(session_id, timer)

        socketio.emit('game-started', {'question': question, 'expiresAt': session.expires_at},
                      to=session_id, namespace=namespace)
        broadcast_session(manager, session_id, namespace)
    return {'success': True}


def handle_guess(data):
    data = _payload(data)
    session_id = _text(data, 'sessionId')
    guess = _text(data, 'guess')

    manager = _manager()
    sid = _get_sid()
    namespace = _namespace()
    with manager.lock:
        session = manager.get_session(session_id)
        if not session or not session.started or not session.answer:
            return _failure('Game not in progress.')
        user = session.find_player(sid)
        if not user or user.attempts_left <= 0 or session.winner:
            return _failure('No attempts left or game already won.')
        if not guess:
            return _failure('Guess is required.')

        if guess.lower() == session.answer:
            answer = session.answer
            manager.set_winner(session_id, sid)
            current_app.logger.info(f"[guess] session={session_id} user={sid} correct=True")
            socketio.emit('game-ended', {'answer': answer, 'winner': user.to_dict()},
                          to=session_id, namespace=namespace)
            manager.end_game(session_id)
            broadcast_session(manager, session_id, namespace)
            return {'success': True, 'correct': True}

        attempts_left = manager.consume_attempt(session_id, sid)
        current_app.logger.info(f"[guess] session={session_id} user={sid} correct=False left={attempts_left}")
        broadcast_session(manager, session_id, namespace)
    return {'success': True, 'correct': False, 'attemptsLeft': attempts_left}


def handle_leave_session(data):
    data = _payload(data)
    manager = _manager()
    sid = _get_sid()
    with manager.lock:
        session_id = _text(data, 'sessionId') or manager.session_of(sid)
        if not session_id:
            return _failure('Session id is required.')
        manager.leave_session(session_id, sid)
        leave_room(session_id)
        broadcast_session(manager, session_id, _namespace())
    return {'success': True}


def expire_round(app, session_id: str, expected_round: int) -> None:
    """Force-end a round whose countdown elapsed without a winner.

    Runs on the timer's background task, outside any request context.
    """
    manager = app.extensions['guessgame']
    namespace = app.config.get('SOCKETIO_NAMESPACE', '/')
    with manager.lock:
        session = manager.get_session(session_id)
        if not session or not session.started or session.round_number != expected_round:
            app.logger.info(f"[timer-abort] session={session_id} round no longer current")
            return
        app.logger.info(f"[timer-fire] session={session_id} round={expected_round}")
        answer = session.answer
        socketio.emit('game-ended', {'answer': answer, 'winner': None}, to=session_id, namespace=namespace)
        manager.end_game(session_id)
        broadcast_session(manager, session_id, namespace)


def broadcast_session(manager, session_id: str, namespace: str) -> None:
    session = manager.get_session(session_id)
    payload = session.to_dict() if session else None
    socketio.emit('session-update', payload, to=session_id, namespace=namespace)


# ---- helpers ----

def _manager():
    return current_app.extensions['guessgame']


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/')


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ''


def _failure(message: str) -> dict:
    return {'success': False, 'error': message}


def _leave_previous(manager, sid: str, previous) -> None:
    # One session per connection: drop the old membership after a successful switch
    if not previous:
        return
    manager.leave_session(previous, sid)
    leave_room(previous)
    broadcast_session(manager, previous, _namespace())


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the game protocol handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-session', handle_create_session, namespace=namespace)
    socketio.on_event('join-session', handle_join_session, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('guess', handle_guess, namespace=namespace)
    socketio.on_event('leave-session', handle_leave_session, namespace=namespace)
