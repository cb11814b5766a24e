from flask import Blueprint, jsonify
from guessgame import get_session_manager

api = Blueprint('api', __name__)


@api.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'sessions': len(get_session_manager())})


@api.route('/sessions/<string:session_id>', methods=['GET'])
def get_session_state(session_id):
    """
    Returns the public state of a session, the same view clients
    receive in ``session-update``.
    """
    manager = get_session_manager()
    with manager.lock:
        session = manager.get_session(session_id)
        if not session:
            return jsonify({'error': 'Session not found'}), 404
        return jsonify(session.to_dict())
