"""
Persisted settings for captures, recordings and the uploader.

A SettingsStore is created once at startup and handed to every component
that needs configuration. Each write is persisted immediately to a JSON file
in the app data directory.
"""
from __future__ import annotations

import json
import os
import threading
from copy import deepcopy
from typing import Any, Dict, Optional

from config import DEFAULT_SETTINGS, SETTING_CHOICES, SETTINGS_FILE
from utils.logger import logger


class SettingsStore:
    """
    Key/value settings with documented defaults.

    Reads and writes are guarded by a lock; there is no transaction across
    keys, each set() persists on its own.
    """

    def __init__(self, path: Optional[str] = None, defaults: Optional[Dict[str, Any]] = None):
        self.path = path or SETTINGS_FILE
        self.defaults = deepcopy(defaults if defaults is not None else DEFAULT_SETTINGS)
        self._lock = threading.RLock()
        self._values: Dict[str, Any] = {}
        self._load()

    def _load(self):
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read settings file {self.path}: {e}; using defaults")
            return
        if not isinstance(data, dict):
            logger.error(f"Settings file {self.path} is not an object; using defaults")
            return
        for key, value in data.items():
            if key not in self.defaults:
                logger.debug(f"Ignoring unknown setting '{key}'")
                continue
            try:
                self._values[key] = self._validate(key, value)
            except ValueError as e:
                logger.warning(f"Ignoring stored value for '{key}': {e}")

    def _save(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def _validate(self, key: str, value: Any) -> Any:
        default = self.defaults[key]
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise ValueError(f"{key} must be a boolean, got {value!r}")
        elif isinstance(default, int):
            # whole seconds only
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{key} must not be negative, got {value!r}")
        elif isinstance(default, str):
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string, got {value!r}")
        choices = SETTING_CHOICES.get(key)
        if choices is not None and value not in choices:
            raise ValueError(f"{key} must be one of {', '.join(choices)}, got {value!r}")
        return value

    def _check_key(self, key: str):
        if key not in self.defaults:
            raise KeyError(f"Unknown setting: {key}")

    def get(self, key: str) -> Any:
        self._check_key(key)
        with self._lock:
            if key in self._values:
                return self._values[key]
            return self.defaults[key]

    def get_path(self, key: str) -> str:
        """Return a path-valued setting with ~ expanded."""
        return os.path.expanduser(self.get(key))

    def set(self, key: str, value: Any):
        self._check_key(key)
        value = self._validate(key, value)
        with self._lock:
            self._values[key] = value
            self._save()
        logger.debug(f"Setting '{key}' updated")

    def reset_to_default(self, key: str):
        self._check_key(key)
        with self._lock:
            if key in self._values:
                del self._values[key]
                self._save()
        logger.info(f"Setting '{key}' reset to default")

    def reset_all(self):
        with self._lock:
            self._values.clear()
            self._save()
        logger.info("All settings reset to defaults")

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            merged = deepcopy(self.defaults)
            merged.update(self._values)
            return merged

    def export_to(self, path: str):
        """Write every setting, defaults included, to a JSON file."""
        data = self.as_dict()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"Exported settings to {path}")

    def import_from(self, path: str) -> int:
        """
        Load settings from a JSON file written by export_to().

        Unknown keys and invalid values are skipped. Returns the number of
        settings applied.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path} does not contain a settings object")

        applied = 0
        with self._lock:
            for key, value in data.items():
                if key not in self.defaults:
                    logger.warning(f"Skipping unknown setting '{key}' from {path}")
                    continue
                try:
                    self._values[key] = self._validate(key, value)
                    applied += 1
                except ValueError as e:
                    logger.warning(f"Skipping setting '{key}' from {path}: {e}")
            self._save()
        logger.info(f"Imported {applied} settings from {path}")
        return applied
