"""
Hand work back to the presentation context.

Worker threads never touch windows or user-visible state directly. They
post callables onto a MainQueue, and the thread that owns the UI drains it,
either from the tk loop (attach_tk) or explicitly (drain).
"""
from __future__ import annotations

import queue
import threading
from typing import Callable, Optional

from config import MAIN_QUEUE_POLL_MS
from utils.logger import logger


class MainQueue:
    def __init__(self):
        self._queue: "queue.Queue[tuple]" = queue.Queue()

    def post(self, fn: Callable, *args, **kwargs):
        self._queue.put((fn, args, kwargs))

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self, max_items: Optional[int] = None) -> int:
        """Run queued callables on the calling thread. Returns how many ran."""
        ran = 0
        while max_items is None or ran < max_items:
            try:
                fn, args, kwargs = self._queue.get_nowait()
            except queue.Empty:
                break
            ran += 1
            try:
                fn(*args, **kwargs)
            except Exception as e:
                logger.error(f"Main queue task {getattr(fn, '__name__', fn)} failed: {e}", exc_info=True)
        return ran

    def attach_tk(self, root, interval_ms: int = MAIN_QUEUE_POLL_MS):
        """Drain the queue periodically from a tkinter root's event loop."""
        def _poll():
            self.drain()
            try:
                root.after(interval_ms, _poll)
            except Exception as e:
                logger.debug(f"Main queue polling stopped: {e}")
        root.after(interval_ms, _poll)


class TimerScheduler:
    """
    call_later() backed by threading.Timer; callbacks run on the main queue.

    Timers are fire-and-forget: nothing returned can cancel them.
    """

    def __init__(self, main_queue: MainQueue):
        self.main_queue = main_queue

    def call_later(self, delay: float, callback: Callable):
        timer = threading.Timer(max(0.0, delay), self.main_queue.post, args=(callback,))
        timer.daemon = True
        timer.start()


class TkScheduler:
    """call_later() on a tkinter root's event loop."""

    def __init__(self, root):
        self.root = root

    def call_later(self, delay: float, callback: Callable):
        self.root.after(int(max(0.0, delay) * 1000), callback)
