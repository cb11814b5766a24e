import click

from guessgame import create_app, get_session_manager, socketio


@click.command('guessgame')
@click.option('--host', default=None, help='Interface to bind (defaults to HOST).')
@click.option('--port', type=int, default=None, help='Port to listen on (defaults to PORT, 3001).')
@click.option('--debug/--no-debug', default=False)
def main(host, port, debug):
    """Run the guessing game Socket.IO server."""
    app = create_app()
    host = host or app.config['HOST']
    port = port or app.config['PORT']
    app.logger.info(f"[server] listening at http://{host}:{port}")
    try:
        # Use SocketIO server to enable websockets
        socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)
    finally:
        get_session_manager(app).shutdown()
