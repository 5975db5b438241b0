"""
Thumbnail toast window
Borderless, always-on-top window in the top-right corner that follows a Toast
"""
import tkinter as tk

from PIL import Image, ImageTk

from config import TOAST_FADE_SECONDS, TOAST_HEIGHT, TOAST_WIDTH
from core.toast import Toast, ToastState, toast_origin
from utils.logger import logger

FADE_STEPS = 10
MAX_ALPHA = 0.95


class ToastWindow:
    """Renders a Toast; all state changes come from the Toast itself."""

    def __init__(self, root: tk.Misc, toast: Toast):
        self.root = root
        self.toast = toast
        self.window = None
        self._photo = None
        self._alpha = 0.0
        toast.add_listener(self._on_state_change)

    def _build(self):
        self.window = tk.Toplevel(self.root)
        self.window.overrideredirect(True)  # Remove window decorations
        self.window.attributes('-topmost', True)
        self.window.attributes('-alpha', 0.0)

        x, y = toast_origin(self.window.winfo_screenwidth(), self.window.winfo_screenheight())
        self.window.geometry(f'{TOAST_WIDTH}x{TOAST_HEIGHT}+{x}+{y}')

        preview = self.toast.thumbnail.copy()
        preview.thumbnail((TOAST_WIDTH - 20, TOAST_HEIGHT - 20), Image.LANCZOS)
        self._photo = ImageTk.PhotoImage(preview)

        label = tk.Label(self.window, image=self._photo, bg='#202020', cursor='hand2')
        label.pack(fill=tk.BOTH, expand=True)

        label.bind('<B1-Motion>', self._on_drag)
        label.bind('<ButtonRelease-1>', lambda e: self.toast.release())

    def _on_drag(self, event):
        if not self.toast.dragging:
            payload = self.toast.begin_drag()
            if payload:
                logger.debug(f"Dragging {payload}")

    def _fade_to(self, target: float):
        step = (target - self._alpha) / FADE_STEPS
        delay = int(TOAST_FADE_SECONDS * 1000 / FADE_STEPS)

        def animate(remaining):
            if self.window is None:
                return
            self._alpha = target if remaining <= 1 else self._alpha + step
            self._apply_alpha()
            if remaining > 1:
                self.window.after(delay, animate, remaining - 1)

        animate(FADE_STEPS)

    def _apply_alpha(self):
        if self.window is None:
            return
        try:
            self.window.attributes('-alpha', 0.0 if self.toast.dragging else self._alpha)
        except tk.TclError as e:
            logger.debug(f"Toast window gone: {e}")

    def _on_state_change(self, toast: Toast):
        state = toast.state
        if state is ToastState.FADING_IN and self.window is None:
            self._build()
            self._fade_to(MAX_ALPHA)
        elif state is ToastState.FADING_OUT:
            self._fade_to(0.0)
        elif state is ToastState.HIDDEN:
            self.close()
        else:
            self._apply_alpha()

    def close(self):
        if self.window is None:
            return
        try:
            self.window.destroy()
        except tk.TclError as e:
            logger.debug(f"Toast window already destroyed: {e}")
        self.window = None
        self._photo = None


def attach_toast_windows(root: tk.Misc):
    """Renderer hook for ToastPresenter.add_renderer()."""
    def _render(toast: Toast):
        ToastWindow(root, toast)
    return _render
