import threading

import pyperclip

from utils.logger import logger

# Single writer at a time; concurrent copies still end last-writer-wins.
_clipboard_lock = threading.Lock()


def copy_to_clipboard(text: str) -> bool:
    """Place plain text on the system clipboard. Returns False if no clipboard is available."""
    with _clipboard_lock:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.error(f"Clipboard unavailable: {e}")
            return False
    logger.debug(f"Copied to clipboard: {text}")
    return True


def read_clipboard() -> str:
    with _clipboard_lock:
        return pyperclip.paste()
