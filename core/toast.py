"""
Toast presentation for a finished capture.

A Toast walks HIDDEN -> FADING_IN -> VISIBLE -> FADING_OUT -> HIDDEN exactly
once. Timing comes from a scheduler with a call_later(delay, callback)
method, so the same state machine drives the tk window and the tests.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, Tuple

from PIL import Image

from config import TOAST_FADE_SECONDS, TOAST_HEIGHT, TOAST_INSET, TOAST_WIDTH
from core.settings_store import SettingsStore
from utils.file_reveal import reveal_in_file_browser
from utils.logger import logger


class ToastState(Enum):
    HIDDEN = "hidden"
    FADING_IN = "fading_in"
    VISIBLE = "visible"
    FADING_OUT = "fading_out"


def toast_origin(
    screen_width: int,
    screen_height: int,
    width: int = TOAST_WIDTH,
    height: int = TOAST_HEIGHT,
    inset: int = TOAST_INSET,
) -> Tuple[int, int]:
    """Top-left window coordinates that pin the toast to the top-right corner."""
    return max(0, screen_width - width - inset), min(inset, max(0, screen_height - height))


class Toast:
    def __init__(
        self,
        thumbnail: Image.Image,
        source_path: str,
        scheduler,
        timeout_seconds: int,
        save_to_disk: bool,
        on_dismiss: Optional[Callable[[], None]] = None,
        reveal: Callable[[str], bool] = reveal_in_file_browser,
    ):
        self.thumbnail: Optional[Image.Image] = thumbnail
        self.source_path = source_path
        self.scheduler = scheduler
        self.timeout_seconds = max(0, int(timeout_seconds))
        self.save_to_disk = save_to_disk
        self.on_dismiss = on_dismiss
        self._reveal = reveal
        self.state = ToastState.HIDDEN
        self.dragging = False
        self.dismissed = False
        self._started = False
        self._listeners: List[Callable[["Toast"], None]] = []

    def add_listener(self, callback: Callable[["Toast"], None]):
        self._listeners.append(callback)

    @property
    def is_rendered(self) -> bool:
        return self.state is not ToastState.HIDDEN and not self.dragging

    def _transition(self, new_state: ToastState):
        logger.debug(f"Toast {self.source_path}: {self.state.value} -> {new_state.value}")
        self.state = new_state
        self._notify()

    def _notify(self):
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Toast listener failed: {e}", exc_info=True)

    def start(self):
        if self._started:
            return
        self._started = True
        self._transition(ToastState.FADING_IN)
        self.scheduler.call_later(TOAST_FADE_SECONDS, self._fade_in_done)

    def _fade_in_done(self):
        self._transition(ToastState.VISIBLE)
        self.scheduler.call_later(self.timeout_seconds, self._timeout_elapsed)

    def _timeout_elapsed(self):
        self._transition(ToastState.FADING_OUT)
        self.scheduler.call_later(TOAST_FADE_SECONDS, self._fade_out_done)

    def _fade_out_done(self):
        self.dragging = False
        self._transition(ToastState.HIDDEN)
        self.thumbnail = None
        if self.dismissed:
            return
        self.dismissed = True
        if self.on_dismiss is not None:
            self.on_dismiss()

    def activate(self) -> bool:
        """Primary click. Reveals the file when it was saved to disk."""
        if self.state is not ToastState.VISIBLE or not self.save_to_disk:
            return False
        return self._reveal(self.source_path)

    def begin_drag(self) -> Optional[str]:
        """Start dragging the toast out; returns the file path to hand over."""
        if self.state is not ToastState.VISIBLE:
            return None
        self.dragging = True
        self._notify()
        return self.source_path

    def end_drag(self):
        if not self.dragging:
            return
        self.dragging = False
        self._notify()

    def release(self) -> bool:
        """Button released: a drop ends the drag, otherwise it was a click."""
        if self.dragging:
            self.end_drag()
            return False
        return self.activate()


class ToastPresenter:
    def __init__(self, settings: SettingsStore, scheduler, reveal: Callable[[str], bool] = reveal_in_file_browser):
        self.settings = settings
        self.scheduler = scheduler
        self.reveal = reveal
        self._renderers: List[Callable[[Toast], None]] = []

    def add_renderer(self, renderer: Callable[[Toast], None]):
        """Register a callable that attaches a view to each new toast."""
        self._renderers.append(renderer)

    def present(
        self,
        thumbnail: Optional[Image.Image],
        source_path: str,
        on_dismiss: Optional[Callable[[], None]] = None,
    ) -> Optional[Toast]:
        if thumbnail is None:
            logger.debug(f"No thumbnail for {source_path}; toast skipped")
            return None

        toast = Toast(
            thumbnail=thumbnail,
            source_path=source_path,
            scheduler=self.scheduler,
            timeout_seconds=self.settings.get("toastTimeout"),
            save_to_disk=self.settings.get("saveToDisk"),
            on_dismiss=on_dismiss,
            reveal=self.reveal,
        )
        for renderer in self._renderers:
            renderer(toast)
        toast.start()
        return toast
