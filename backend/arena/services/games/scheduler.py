import time
from typing import Callable


class ScheduledTask:
    """Handle for a deferred callback. cancel() is idempotent."""

    def __init__(self, name: str, delay: float):
        self.name = name
        self.delay = delay
        self.deadline = time.time() + delay
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def remaining(self) -> float:
        return max(0.0, self.deadline - time.time())

    def __repr__(self):
        return f"<ScheduledTask {self.name} delay={self.delay} pending={self.pending}>"


class TaskScheduler:
    """Runs callbacks after a delay on Socket.IO background tasks.

    Sleeping goes through socketio.sleep so the worker cooperates with
    whichever async mode the server runs under. A cancelled task wakes up,
    sees its flag and returns without calling back.
    """

    def __init__(self, socketio, logger=None):
        self.socketio = socketio
        self.logger = logger

    def call_later(self, name: str, delay: float, callback: Callable, *args) -> ScheduledTask:
        task = ScheduledTask(name, delay)

        def _worker():
            sleep_for = task.remaining()
            if sleep_for:
                self.socketio.sleep(sleep_for)
            if task.cancelled:
                if self.logger:
                    self.logger.debug(f"[timer-abort] task={task.name} cancelled")
                return
            task.fired = True
            callback(task, *args)

        self.socketio.start_background_task(_worker)
        return task
