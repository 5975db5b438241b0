import logging
import os
import sys

from config import APP_NAME, DATA_DIR, LOG_FILE


def get_app_data_dir():
    """Return the writable app data directory for the current user."""
    os.makedirs(DATA_DIR, exist_ok=True)
    return DATA_DIR


def setup_logger(name=APP_NAME):
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    get_app_data_dir()

    # File handler
    fh = logging.FileHandler(LOG_FILE, encoding='utf-8')
    fh.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    fh.setFormatter(file_formatter)

    # Console handler (for terminal output) - with safe encoding
    class SafeStreamHandler(logging.StreamHandler):
        """StreamHandler that replaces characters the console cannot encode."""
        def format(self, record):
            msg = super().format(record)
            encoding = getattr(self.stream, "encoding", None) or "ascii"
            return msg.encode(encoding, "replace").decode(encoding)

    ch = SafeStreamHandler(sys.stdout)
    # Show INFO, WARNING, and ERROR logs in console. Full detail still goes to file.
    ch.setLevel(logging.INFO)
    console_formatter = logging.Formatter('%(levelname)s - %(message)s')
    ch.setFormatter(console_formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    return logger


logger = setup_logger()
