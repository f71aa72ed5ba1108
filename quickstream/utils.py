"""Utility functions module"""
import re
import shutil

from .config import *

ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def get_terminal_size():
    """Get terminal dimensions."""
    size = shutil.get_terminal_size(fallback=(100, 30))
    return size.columns, size.lines


def visible_len(text):
    return len(ANSI_RE.sub("", text))


def truncate(text, width):
    """Cut plain text to width, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return "…"
    return text[:width - 1] + "…"


def draw_box(body, width, color=C_DIM):
    """Wrap pre-styled body lines in a rounded border of the given outer width."""
    inner = max(1, width - 4)
    lines = [f"{color}╭{'─' * (inner + 2)}╮{C_RESET}"]
    for line in body:
        pad = max(0, inner - visible_len(line))
        lines.append(f"{color}│{C_RESET} {line}{' ' * pad} {color}│{C_RESET}")
    lines.append(f"{color}╰{'─' * (inner + 2)}╯{C_RESET}")
    return lines
