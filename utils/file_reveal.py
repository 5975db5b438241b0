import os
import platform
import subprocess

from utils.logger import logger


def reveal_in_file_browser(path: str) -> bool:
    """Select the file in Finder / Explorer, or open its folder elsewhere."""
    if not os.path.exists(path):
        logger.warning(f"Cannot reveal missing file: {path}")
        return False

    system = platform.system()
    if system == "Darwin":
        cmd = ["open", "-R", path]
    elif system == "Windows":
        cmd = ["explorer", f"/select,{os.path.normpath(path)}"]
    else:
        cmd = ["xdg-open", os.path.dirname(os.path.abspath(path))]

    try:
        subprocess.Popen(cmd)
        return True
    except OSError as e:
        logger.error(f"Could not reveal {path}: {e}")
        return False
