import os

from flask import Blueprint, current_app, jsonify, send_from_directory

main = Blueprint('main', __name__)


def _static_dir():
    static_dir = current_app.config.get('STATIC_DIR') or ''
    return os.path.abspath(static_dir) if static_dir else None


@main.route('/', defaults={'path': ''})
@main.route('/<path:path>')
def index(path):
    """Serve the client bundle; unknown paths fall back to index.html."""
    if path.startswith('api/'):
        return jsonify({'error': 'Not found'}), 404
    static_dir = _static_dir()
    if static_dir and os.path.isdir(static_dir):
        if path and os.path.isfile(os.path.join(static_dir, path)):
            return send_from_directory(static_dir, path)
        if os.path.isfile(os.path.join(static_dir, 'index.html')):
            return send_from_directory(static_dir, 'index.html')
    return jsonify({'message': 'Welcome to the guessing game server!'})
