"""Session state: list selections, mode, and the stream lifecycle"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from loguru import logger

from .config import DEFAULT_PRESET
from .errors import ConfigWriteError, SpawnError


class Mode(Enum):
    NORMAL = "normal"
    EDITING_URL = "editing_url"
    EDITING_PRESET = "editing_preset"


class ListSelection:
    """Cursor and confirmation over one ordered list.

    ``cursor`` is -1 exactly when the list is empty. ``confirmed`` is -1
    unless the user explicitly confirmed the item under the cursor, and any
    cursor movement clears it.
    """

    def __init__(self, items):
        self.items = items
        self.cursor = 0 if items else -1
        self.confirmed = -1

    def __len__(self):
        return len(self.items)

    def has_cursor(self):
        return 0 <= self.cursor < len(self.items)

    @property
    def current(self):
        return self.items[self.cursor] if self.has_cursor() else None

    def move_next(self):
        if not self.items:
            return
        self.cursor = (self.cursor + 1) % len(self.items)
        self.confirmed = -1

    def move_previous(self):
        if not self.items:
            return
        self.cursor = (self.cursor - 1) % len(self.items)
        self.confirmed = -1

    def confirm(self):
        if not self.has_cursor():
            return False
        self.confirmed = self.cursor
        return True

    def reset_confirmation(self):
        self.confirmed = -1

    def add(self, item):
        """Append a non-blank item and point the cursor at it."""
        if item is None or not item.strip():
            return False
        self.items.append(item)
        self.cursor = len(self.items) - 1
        return True

    def delete(self):
        """Remove the item under the cursor and repair the cursor."""
        if not self.has_cursor():
            return None
        removed = self.items.pop(self.cursor)
        if self.cursor >= len(self.items):
            self.cursor = len(self.items) - 1
        self.confirmed = -1
        return removed


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to the renderer."""
    mode: Mode
    urls: Tuple[str, ...]
    presets: Tuple[str, ...]
    url_cursor: int
    preset_cursor: int
    url_confirmed: int
    preset_confirmed: int
    status_message: str
    stream_pid: Optional[int] = None
    stream_url: Optional[str] = None
    field_value: str = ""
    field_cursor: int = 0
    field_placeholder: str = ""


class Session:
    def __init__(self, record, store, supervisor):
        self.record = record
        self.store = store
        self.supervisor = supervisor
        self.urls = ListSelection(record.urls)
        self.presets = ListSelection(record.presets)
        self.mode = Mode.NORMAL
        self.field = None
        self.running = True
        self.status_message = "Pick a URL and a preset, then press enter."
        self.stream_url = None

    @classmethod
    def create(cls, store, supervisor):
        record = store.load()
        session = cls(record, store, supervisor)
        if store.last_error is not None:
            session.status_message = str(store.last_error)
        return session

    # --- Persistence ---

    def _persist(self):
        try:
            self.store.save(self.record)
        except ConfigWriteError as e:
            logger.error(str(e), operation="save_config", status="failed")
            self.status_message = str(e)
            return False
        return True

    # --- List mutations ---

    def add_url(self, text):
        return self._add(self.urls, text.strip() if text else text, "URL")

    def add_preset(self, text):
        return self._add(self.presets, text.strip() if text else text, "Preset")

    def add_default_preset(self):
        return self._add(self.presets, DEFAULT_PRESET, "Default preset")

    def _add(self, selection, item, label):
        if not selection.add(item):
            return False
        # Indexes shifted under any pending confirmation
        selection.reset_confirmation()
        saved = self._persist()
        logger.info(f"{label} added", operation="add_item", status="success", count=len(selection))
        if saved:
            self.status_message = f"{label} added"
        return True

    def delete_url(self):
        return self._delete(self.urls, "URL")

    def delete_preset(self):
        return self._delete(self.presets, "Preset")

    def _delete(self, selection, label):
        removed = selection.delete()
        if removed is None:
            return False
        saved = self._persist()
        logger.info(f"{label} deleted", operation="delete_item", status="success", count=len(selection))
        if saved:
            self.status_message = f"{label} deleted"
        return True

    # --- Modes ---

    def begin_edit(self, mode, field):
        self.mode = mode
        self.field = field

    def end_edit(self):
        self.mode = Mode.NORMAL
        self.field = None

    # --- Streaming ---

    def confirm(self):
        """Confirm whatever is under each cursor; start once both are confirmed."""
        self.urls.confirm()
        self.presets.confirm()
        if self.urls.confirmed >= 0 and self.presets.confirmed >= 0:
            self.start_stream()
            return True
        if self.urls.confirmed >= 0:
            self.status_message = "URL selected, pick a preset."
        elif self.presets.confirmed >= 0:
            self.status_message = "Preset selected, add a URL."
        else:
            self.status_message = "Nothing to select."
        return False

    def start_stream(self):
        url = self.urls.items[self.urls.confirmed]
        preset = self.presets.items[self.presets.confirmed]
        # The attempt consumes the confirmation pair, success or not
        self.urls.reset_confirmation()
        self.presets.reset_confirmation()
        try:
            self.supervisor.start(url, preset)
        except SpawnError as e:
            self.stream_url = None
            self.status_message = str(e)
            return False
        self.stream_url = url
        self.status_message = f"Streaming to {url}"
        return True

    def quit(self):
        self.supervisor.stop()
        self.stream_url = None
        self.running = False

    def snapshot(self):
        field = self.field
        return SessionView(
            mode=self.mode,
            urls=tuple(self.urls.items),
            presets=tuple(self.presets.items),
            url_cursor=self.urls.cursor,
            preset_cursor=self.presets.cursor,
            url_confirmed=self.urls.confirmed,
            preset_confirmed=self.presets.confirmed,
            status_message=self.status_message,
            stream_pid=self.supervisor.pid if self.supervisor.running else None,
            stream_url=self.stream_url if self.supervisor.running else None,
            field_value=field.value if field else "",
            field_cursor=field.cursor if field else 0,
            field_placeholder=field.placeholder if field else "",
        )
