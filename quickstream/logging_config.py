"""Logging setup.

The terminal is owned by the UI and by the encoder's passthrough output, so
the default stderr sink is dropped and everything goes to a rotating file:

    Linux: ~/.local/state/quick-stream/log/quick-stream.log
    macOS: ~/Library/Logs/quick-stream/quick-stream.log
"""
from pathlib import Path

import platformdirs
from loguru import logger

from .config import LOG_APP_NAME, LOG_FILENAME


def log_path() -> Path:
    log_dir = Path(platformdirs.user_log_dir(appname=LOG_APP_NAME, ensure_exists=True))
    return log_dir / LOG_FILENAME


def setup_logger(level="INFO"):
    """Configure loguru with a single file sink and return the logger."""
    logger.remove()
    logger.add(
        str(log_path()),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function} | {message} | {extra}",
        rotation="5 MB",
        retention="7 days",
        level=level,
    )
    return logger
