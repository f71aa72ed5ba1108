"""UI rendering module"""
import sys

from .config import *
from .state import Mode
from .utils import get_terminal_size, truncate, draw_box

TITLE = "Quick Stream"


def _list_body(title, items, cursor, confirmed, inner, cursor_color, empty_text):
    body = [f"{C_BOLD}{title}{C_RESET}"]
    if not items:
        body.append(f"{C_DIM}{empty_text}{C_RESET}")
        return body

    for i, item in enumerate(items):
        tag = " ✓" if i == confirmed else ""
        text = truncate(item, inner - 2 - len(tag))
        if i == cursor:
            body.append(f"{cursor_color}{C_BOLD}► {text}{tag}{C_RESET}")
        else:
            body.append(f"{C_GRAY}  {text}{tag}{C_RESET}")
    return body


def _field_line(view, inner):
    """Text field with a block cursor, scrolled so the cursor stays visible."""
    if not view.field_value:
        hint = truncate(view.field_placeholder, inner - 1)
        return f"> {C_REVERSE} {C_RESET}{C_DIM}{hint}{C_RESET}"

    value = view.field_value
    cursor = view.field_cursor
    room = max(1, inner - 3)
    start = max(0, cursor - room + 1)
    shown = value[start:start + room]
    pos = cursor - start
    under = shown[pos] if pos < len(shown) else " "
    return f"> {shown[:pos]}{C_REVERSE}{under}{C_RESET}{shown[pos + 1:]}"


def build_edit_lines(view, cols):
    title = "Add stream URL" if view.mode == Mode.EDITING_URL else "Add stream preset"
    count = f"{len(view.field_value)}/{URL_CHAR_LIMIT if view.mode == Mode.EDITING_URL else PRESET_CHAR_LIMIT}"
    return [
        "",
        f"{C_BLUE}{C_BOLD}{title}{C_RESET}",
        "",
        _field_line(view, cols),
        "",
        f"{C_DIM}{HELP_EDIT}  [{count}]{C_RESET}",
    ]


def build_normal_lines(view, cols):
    width = max(20, cols)
    inner = width - 4

    lines = [f"{C_BLUE}{C_BOLD}{TITLE}{C_RESET}", ""]
    lines.extend(draw_box(
        _list_body("Stream URLs", view.urls, view.url_cursor, view.url_confirmed,
                   inner, C_GREEN, "-No urls-"),
        width, C_GREEN,
    ))
    lines.extend(draw_box(
        _list_body("Presets", view.presets, view.preset_cursor, view.preset_confirmed,
                   inner, C_RED, "-No presets-"),
        width, C_RED,
    ))
    lines.append("")

    if view.stream_pid is not None:
        stream = truncate(f"● Streaming (pid {view.stream_pid}) → {view.stream_url}", width)
        lines.append(f"{C_GREEN}{stream}{C_RESET}")
    else:
        lines.append(f"{C_DIM}○ Idle{C_RESET}")

    lines.append(f"{C_DIM}{truncate(HELP_NORMAL, width)}{C_RESET}")
    lines.append(f"{C_BOLD}Status:{C_RESET} {truncate(view.status_message, width - 8)}")
    return lines


def build_lines(view, cols):
    """Turn a SessionView into display lines. No terminal access."""
    if view.mode == Mode.NORMAL:
        return build_normal_lines(view, cols)
    return build_edit_lines(view, cols)


def render(session, out=None):
    """Render the session at the top of the screen."""
    out = out or sys.stdout
    cols, rows = get_terminal_size()
    lines = build_lines(session.snapshot(), cols)

    out.write(CURSOR_HOME)
    out.write("\n".join(f"{line}{CLEAR_LINE}" for line in lines[:rows]))
    out.write(CLEAR_BELOW)
    out.flush()
