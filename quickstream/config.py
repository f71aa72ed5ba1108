"""Constants, colors and runtime settings"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# ANSI Colors & Styling
C_RESET = "\033[0m"
C_RED = "\033[91m"
C_GREEN = "\033[92m"
C_YELLOW = "\033[93m"
C_BLUE = "\033[94m"
C_CYAN = "\033[96m"
C_GRAY = "\033[90m"
C_BOLD = "\033[1m"
C_DIM = "\033[2m"
C_REVERSE = "\033[7m"

# Terminal control
CLEAR_SCREEN = "\033[2J"
CURSOR_HOME = "\033[H"
CLEAR_LINE = "\033[K"
CLEAR_BELOW = "\033[J"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

# Persisted record
CONFIG_FILENAME = ".quickstream.json"
URLS_KEY = "urls"
PRESETS_KEY = "presets"
LEGACY_PRESETS_KEY = "string"  # older builds wrote presets under this key

# Encoder invocation
DEFAULT_ENCODER = "ffmpeg"
OUTPUT_ARGS = ["-f", "flv"]

# Text entry
URL_CHAR_LIMIT = 200
PRESET_CHAR_LIMIT = 1000
URL_PLACEHOLDER = "rtmp://example.com/live/stream"
DEFAULT_PRESET = (
    "-f v4l2 -framerate 25 -video_size 1920x1080 -i /dev/video0 "
    "-f alsa -i plughw:2,0 libx264 aac -preset veryfast -maxrate 1M "
    "-bufsize 2M -pix_fmt yuv420p -b:a 96k -ar 44100"
)

# Key bindings (normal mode)
KEYS_URL_UP = ("w", "W")
KEYS_URL_DOWN = ("s", "S")
KEYS_PRESET_UP = ("UP",)
KEYS_PRESET_DOWN = ("DOWN",)
KEYS_CONFIRM = ("ENTER",)
KEYS_ADD_URL = ("a",)
KEYS_DELETE_URL = ("A",)
KEYS_ADD_PRESET = ("p",)
KEYS_DELETE_PRESET = ("P",)
KEYS_QUIT = ("q", "CTRL_C")

# Key bindings (edit mode)
KEYS_SAVE = ("ENTER",)
KEYS_CANCEL = ("ESC",)

HELP_NORMAL = "w/s: url • ↑/↓: preset • enter: start • a/p: add • shift+a/p: delete • q: quit"
HELP_EDIT = "Press Enter to save, Esc to cancel"

# Main loop
POLL_INTERVAL = 0.05

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
LOG_APP_NAME = "quick-stream"
LOG_FILENAME = "quick-stream.log"


def default_config_path() -> Path:
    """Resolve ~/.quickstream.json, falling back to the current directory."""
    try:
        home = Path.home()
    except RuntimeError:
        home = Path(".")
    return home / CONFIG_FILENAME


def _env_flag(name: str, default: bool) -> bool:
    value = (os.getenv(name) or "").strip().lower()
    if not value:
        return default
    return value not in ("0", "false", "no", "off")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass
class Settings:
    config_path: Path
    encoder: str = DEFAULT_ENCODER
    detach: bool = True
    reap_timeout: Optional[float] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from QSTREAM_* environment variables."""
        config_path = os.getenv("QSTREAM_CONFIG")
        return cls(
            config_path=Path(config_path).expanduser() if config_path else default_config_path(),
            encoder=os.getenv("QSTREAM_ENCODER", DEFAULT_ENCODER),
            detach=_env_flag("QSTREAM_DETACH", True),
            reap_timeout=_env_float("QSTREAM_REAP_TIMEOUT"),
            log_level=os.getenv("QSTREAM_LOG_LEVEL", "INFO").upper(),
        )
