import time
from typing import Any, Callable


class RoundTimer:
    """Cancellable deferred action backed by a Socket.IO background task.

    The worker sleeps with ``socketio.sleep`` so it cooperates with
    whichever async mode the server runs under. Cancelling does not
    interrupt the sleep; the worker simply skips the callback on wake-up.
    """

    def __init__(self, socketio, delay: float, callback: Callable[..., Any], *args: Any):
        self.socketio = socketio
        self.delay = max(0.0, float(delay))
        self.callback = callback
        self.args = args
        self.deadline = None
        self.cancelled = False
        self.fired = False
        self._task = None

    def start(self) -> 'RoundTimer':
        self.deadline = time.time() + self.delay
        self._task = self.socketio.start_background_task(self._run)
        return self

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return self._task is not None and not self.cancelled and not self.fired

    def _run(self) -> None:
        self.socketio.sleep(self.delay)
        if self.cancelled:
            return
        self.fired = True
        self.callback(*self.args)
