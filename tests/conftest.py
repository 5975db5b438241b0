"""
Shared pytest fixtures for the ShareShot test suite.

Provides a temporary settings store, an executor that runs work inline, and
a manual scheduler so toasts and uploads run without real timers, windows,
clipboard or network.
"""

import os
import tempfile
from concurrent.futures import Executor, Future

# Keep the app log and settings out of the user's data directory
os.environ.setdefault("SHARESHOT_DATA_DIR", tempfile.mkdtemp(prefix="shareshot-tests-"))

import pytest
from PIL import Image

from core.settings_store import SettingsStore


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class ManualScheduler:
    """call_later() that only fires when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._pending = []

    def call_later(self, delay, callback):
        self._pending.append((self.now + delay, callback))

    @property
    def pending(self):
        return len(self._pending)

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [item for item in self._pending if item[0] <= target]
            if not due:
                break
            item = min(due, key=lambda i: i[0])
            self._pending.remove(item)
            self.now = item[0]
            item[1]()
        self.now = target

    def run_all(self):
        while self._pending:
            self.advance(max(when for when, _ in self._pending) - self.now)


@pytest.fixture
def settings(tmp_path):
    return SettingsStore(path=str(tmp_path / "settings.json"))


@pytest.fixture
def inline_executor():
    return InlineExecutor()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "capture.png"
    Image.new("RGB", (64, 48), color="red").save(path)
    return str(path)
