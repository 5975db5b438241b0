import os
import sys

APP_NAME = "ShareShot"
APP_VERSION = "1.0.0"


# Uploader
IMGUR_UPLOAD_URL = "https://api.imgur.com/3/upload"
UPLOAD_FILE_PREFIX = "shareshot"
UPLOAD_TIMEOUT_SECONDS = 60

# Worker pool for thumbnail decode, capture tool and uploads
WORKER_THREADS = 4

# Toast
TOAST_WIDTH = 250
TOAST_HEIGHT = 150
TOAST_INSET = 20
TOAST_FADE_SECONDS = 0.2

# Thumbnails
VIDEO_THUMBNAIL_OFFSET_SECONDS = 2.0
VIDEO_EXTENSIONS = ("mov", "mp4", "m4v", "avi", "mkv")

# Main queue polling from the tk loop
MAIN_QUEUE_POLL_MS = 50

CAPTURE_FILE_TYPES = ("png", "jpg", "heic", "tiff", "gif", "pdf", "psd", "tga", "bmp")
RECORDING_FILE_TYPES = ("mov", "mp4")

# Documented defaults, one per persisted setting
DEFAULT_SETTINGS = {
    "capturePath": "~/Pictures/",
    "captureFileName": "shareshot-%Y%m%d-%H%M%S",
    "captureFileType": "png",
    "imgurClientId": "867afe9433c0a53",
    "toastTimeout": 2,
    "saveToDisk": True,
    "recordingPath": "~/Pictures/",
    "recordingFileName": "shareshot-%Y%m%d-%H%M%S",
    "recordingFileType": "mov",
    "recordAudio": True,
    "showRecordingPreview": True,
    "captureBinary": "/usr/sbin/screencapture",
    "uploadMedia": False,
    "menuBarAppIcon": True,
}

# Keys restricted to a fixed set of values
SETTING_CHOICES = {
    "captureFileType": CAPTURE_FILE_TYPES,
    "recordingFileType": RECORDING_FILE_TYPES,
}


def _default_data_dir() -> str:
    if sys.platform == "win32":
        base = os.getenv("APPDATA") or os.path.expanduser("~")
    elif sys.platform == "darwin":
        base = os.path.expanduser("~/Library/Application Support")
    else:
        base = os.getenv("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return os.path.join(base, APP_NAME, "data")


# Data Storage
DATA_DIR = os.getenv("SHARESHOT_DATA_DIR") or _default_data_dir()
SETTINGS_FILE = os.path.join(DATA_DIR, "settings.json")
LOG_FILE = os.path.join(DATA_DIR, "app.log")
