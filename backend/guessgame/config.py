import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Listening address for the Socket.IO server
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    # Round countdown (seconds)
    ROUND_DURATION_SEC = float(os.environ.get('ROUND_DURATION_SEC', '60'))
    # Guesses allowed per participant per round
    MAX_ATTEMPTS = int(os.environ.get('MAX_ATTEMPTS', '3'))
    # Points granted to the first correct guesser
    WINNER_BONUS = int(os.environ.get('WINNER_BONUS', '10'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Comma separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Production bundle of the web client
    STATIC_DIR = os.environ.get('STATIC_DIR', 'dist/app')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
