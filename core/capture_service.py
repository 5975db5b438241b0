from __future__ import annotations

import os
import subprocess
from datetime import datetime
from enum import Enum
from typing import List, Optional

from PIL import Image, ImageGrab

from core.settings_store import SettingsStore
from utils.capture_types import CaptureArtifact
from utils.logger import logger


class CaptureMode(Enum):
    REGION = "region"
    WINDOW = "window"
    SCREEN = "screen"


_MODE_FLAGS = {
    CaptureMode.REGION: ["-i"],
    CaptureMode.WINDOW: ["-i", "-w"],
    CaptureMode.SCREEN: [],
}


def _pillow_can_write(file_type: str) -> bool:
    fmt = Image.registered_extensions().get(f".{file_type}")
    return fmt is not None and fmt in Image.SAVE


class CaptureService:
    """
    Produces capture artifacts using the configured capture binary.

    Without the binary (non-macOS hosts) screenshots fall back to a
    full-screen Pillow grab and recordings are unavailable.
    """

    def __init__(self, settings: SettingsStore):
        self.settings = settings

    def _target_path(self, dir_key: str, name_key: str, ext: str, now: Optional[datetime] = None) -> str:
        directory = self.settings.get_path(dir_key)
        os.makedirs(directory, exist_ok=True)
        name = (now or datetime.now()).strftime(self.settings.get(name_key))
        return os.path.join(directory, f"{name}.{ext}")

    def _binary(self) -> Optional[str]:
        binary = self.settings.get("captureBinary")
        if binary and os.path.isfile(binary) and os.access(binary, os.X_OK):
            return binary
        return None

    def _run(self, cmd: List[str], path: str, timeout: Optional[float] = None) -> Optional[CaptureArtifact]:
        logger.debug(f"Running capture command: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
        except subprocess.CalledProcessError as e:
            logger.error(f"Capture command failed ({e.returncode}): {e.stderr!r}")
            return None
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Capture command could not run: {e}")
            return None
        if not os.path.isfile(path):
            # interactive captures leave no file when the user presses Esc
            logger.info("Capture cancelled")
            return None
        return CaptureArtifact.from_path(path)

    def capture(self, mode: CaptureMode = CaptureMode.REGION) -> Optional[CaptureArtifact]:
        file_type = self.settings.get("captureFileType")
        path = self._target_path("capturePath", "captureFileName", file_type)

        binary = self._binary()
        if binary is not None:
            cmd = [binary, *_MODE_FLAGS[mode], "-t", file_type, path]
            return self._run(cmd, path)

        if mode is not CaptureMode.SCREEN:
            logger.warning(f"{mode.value} capture needs {self.settings.get('captureBinary')}; grabbing full screen")
        if not _pillow_can_write(file_type):
            logger.warning(f"Pillow cannot write {file_type}; saving the screen grab as png")
            file_type = "png"
            path = os.path.splitext(path)[0] + ".png"
        try:
            img = ImageGrab.grab()
            if file_type == "jpg" and img.mode != "RGB":
                img = img.convert("RGB")
            img.save(path)
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Screen grab failed: {e}")
            return None
        return CaptureArtifact.from_path(path)

    def record(self, seconds: int) -> Optional[CaptureArtifact]:
        """Record the screen for a fixed number of seconds."""
        binary = self._binary()
        if binary is None:
            logger.error(f"Recording needs {self.settings.get('captureBinary')}")
            return None

        path = self._target_path("recordingPath", "recordingFileName", self.settings.get("recordingFileType"))
        cmd = [binary, "-v", f"-V{int(seconds)}"]
        if self.settings.get("recordAudio"):
            cmd.append("-g")
        cmd.append(path)
        return self._run(cmd, path, timeout=seconds + 30)
