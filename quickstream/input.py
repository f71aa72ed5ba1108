"""Keyboard input: key decoding, text entry and per-mode dispatch"""
import os
import select
import sys

from .config import *
from .state import Mode


class TextField:
    """Single-line text entry with an insertion point."""

    def __init__(self, placeholder="", char_limit=0):
        self.placeholder = placeholder
        self.char_limit = char_limit
        self.value = ""
        self.cursor = 0

    def insert(self, text):
        if self.char_limit:
            room = self.char_limit - len(self.value)
            if room <= 0:
                return
            text = text[:room]
        self.value = self.value[:self.cursor] + text + self.value[self.cursor:]
        self.cursor += len(text)

    def backspace(self):
        if self.cursor > 0:
            self.value = self.value[:self.cursor - 1] + self.value[self.cursor:]
            self.cursor -= 1

    def delete(self):
        if self.cursor < len(self.value):
            self.value = self.value[:self.cursor] + self.value[self.cursor + 1:]

    def move_left(self):
        self.cursor = max(0, self.cursor - 1)

    def move_right(self):
        self.cursor = min(len(self.value), self.cursor + 1)

    def home(self):
        self.cursor = 0

    def end(self):
        self.cursor = len(self.value)

    def handle_key(self, key):
        """Apply an editing key. Returns False for keys it does not use."""
        if key == "BACKSPACE":
            self.backspace()
        elif key == "DELETE":
            self.delete()
        elif key == "LEFT":
            self.move_left()
        elif key == "RIGHT":
            self.move_right()
        elif key == "HOME":
            self.home()
        elif key == "END":
            self.end()
        elif key == "SPACE":
            self.insert(" ")
        elif len(key) == 1 and key.isprintable():
            self.insert(key)
        else:
            return False
        return True


class KeyboardInput:
    """Raw-ish terminal input (cbreak mode) for POSIX terminals."""

    ESCAPE_KEYS = {
        "A": "UP", "B": "DOWN", "C": "RIGHT", "D": "LEFT",
        "H": "HOME", "F": "END",
    }
    TILDE_KEYS = {"1": "HOME", "3": "DELETE", "4": "END", "7": "HOME", "8": "END"}

    def __init__(self, stream=None):
        import termios
        import tty
        self.termios = termios
        self.tty = tty
        self.fd = (stream or sys.stdin).fileno()
        self.old_settings = None

    def __enter__(self):
        try:
            self.old_settings = self.termios.tcgetattr(self.fd)
            self.tty.setcbreak(self.fd)
        except self.termios.error:
            self.old_settings = None
        return self

    def __exit__(self, *args):
        if self.old_settings:
            self.termios.tcsetattr(self.fd, self.termios.TCSADRAIN, self.old_settings)

    def _ready(self, timeout=0.0):
        try:
            return bool(select.select([self.fd], [], [], timeout)[0])
        except (InterruptedError, OSError):
            return False

    def _read(self):
        """Read one character, pulling in every byte of a multi-byte UTF-8 sequence."""
        try:
            data = os.read(self.fd, 1)
            if not data:
                return ""
            lead = data[0]
            if lead >= 0xF0:
                extra = 3
            elif lead >= 0xE0:
                extra = 2
            elif lead >= 0xC0:
                extra = 1
            else:
                extra = 0
            while extra and self._ready(0.05):
                more = os.read(self.fd, 1)
                if not more:
                    break
                data += more
                extra -= 1
        except OSError:
            return ""
        return data.decode("utf-8", errors="replace")

    def get_key(self):
        """Read one key press without blocking; None if nothing is pending."""
        if not self._ready():
            return None
        ch = self._read()
        if not ch:
            return None

        if ch == "\x1b":
            if not self._ready(0.05):
                return "ESC"
            nxt = self._read()
            if nxt not in ("[", "O"):
                return "ESC"
            code = self._read()
            if code in self.ESCAPE_KEYS:
                return self.ESCAPE_KEYS[code]
            if code in self.TILDE_KEYS:
                if self._ready(0.05):
                    self._read()  # trailing '~'
                return self.TILDE_KEYS[code]
            return None

        if ch in ("\r", "\n"):
            return "ENTER"
        if ch in ("\x7f", "\x08"):
            return "BACKSPACE"
        if ch == " ":
            return "SPACE"
        if ch == "\t":
            return "TAB"
        if ch == "\x03":
            return "CTRL_C"
        return ch


def open_url_entry(session):
    session.begin_edit(Mode.EDITING_URL, TextField(URL_PLACEHOLDER, URL_CHAR_LIMIT))


def open_preset_entry(session):
    session.begin_edit(Mode.EDITING_PRESET, TextField(DEFAULT_PRESET, PRESET_CHAR_LIMIT))


def handle_edit_key(session, key):
    """Keys while a text field is open. Only save and cancel are intercepted."""
    field = session.field

    if key in KEYS_CANCEL:
        session.end_edit()
        return

    if key in KEYS_SAVE:
        text = field.value.strip()
        if session.mode == Mode.EDITING_URL:
            if text:
                session.add_url(text)
                session.end_edit()
        elif session.mode == Mode.EDITING_PRESET:
            if text:
                session.add_preset(text)
                session.end_edit()
            elif len(session.presets) == 0:
                # First run: an empty submit takes the built-in preset
                session.add_default_preset()
                session.end_edit()
        return

    field.handle_key(key)


def handle_normal_key(session, key):
    if key in KEYS_QUIT:
        session.quit()
    elif key in KEYS_URL_UP:
        session.urls.move_previous()
    elif key in KEYS_URL_DOWN:
        session.urls.move_next()
    elif key in KEYS_PRESET_UP:
        session.presets.move_previous()
    elif key in KEYS_PRESET_DOWN:
        session.presets.move_next()
    elif key in KEYS_CONFIRM:
        session.confirm()
    elif key in KEYS_ADD_URL:
        open_url_entry(session)
    elif key in KEYS_DELETE_URL:
        session.delete_url()
    elif key in KEYS_ADD_PRESET:
        open_preset_entry(session)
    elif key in KEYS_DELETE_PRESET:
        session.delete_preset()


def handle_key(session, key):
    """Route a decoded key to the handler for the current mode."""
    if key is None:
        return
    if session.mode == Mode.NORMAL:
        handle_normal_key(session, key)
    else:
        handle_edit_key(session, key)


def handle_input(session, keyboard):
    """Drain all pending key presses (non-blocking)."""
    while session.running:
        key = keyboard.get_key()
        if key is None:
            break
        handle_key(session, key)
