"""
Desktop notifications
Shows a native notification on macOS, Windows and Linux desktops
"""
import shutil
import subprocess
import sys

from utils.logger import logger


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def show_notification(title: str, message: str, duration: int = 5) -> bool:
    """
    Show a native notification

    Args:
        title: Notification title
        message: Notification message
        duration: Duration in seconds where the platform honours it

    Returns:
        True if the notification was handed to the platform
    """
    try:
        if sys.platform == "darwin":
            script = f"display notification {_applescript_quote(message)} with title {_applescript_quote(title)}"
            subprocess.run(["osascript", "-e", script], check=True, capture_output=True, timeout=10)
        elif sys.platform == "win32":
            from win10toast import ToastNotifier
            ToastNotifier().show_toast(title=title, msg=message, duration=duration, threaded=True)
        else:
            if shutil.which("notify-send") is None:
                logger.warning(f"notify-send not found; notification dropped: {title} - {message}")
                return False
            subprocess.run(
                ["notify-send", "-t", str(duration * 1000), title, message],
                check=True,
                capture_output=True,
                timeout=10,
            )
        logger.debug(f"Shown notification: {title} - {message}")
        return True
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"Error showing notification: {e}")
        return False
