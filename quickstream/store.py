"""Persisted URL/preset record"""
import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from loguru import logger

from .config import URLS_KEY, PRESETS_KEY, LEGACY_PRESETS_KEY
from .errors import ConfigParseError, ConfigWriteError


@dataclass
class Record:
    urls: List[str] = field(default_factory=list)
    presets: List[str] = field(default_factory=list)

    def to_dict(self):
        # Key order is part of the file format
        return {URLS_KEY: list(self.urls), PRESETS_KEY: list(self.presets)}


def _string_list(data, key, path):
    value = data.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigParseError(path, f"'{key}' must be a list of strings")
    return list(value)


def parse_record(text, path="<memory>"):
    """Parse JSON text into a Record. Raises ConfigParseError."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(path, str(e)) from e

    if not isinstance(data, dict):
        raise ConfigParseError(path, "top level must be an object")

    presets_key = PRESETS_KEY if PRESETS_KEY in data else LEGACY_PRESETS_KEY
    return Record(
        urls=_string_list(data, URLS_KEY, path),
        presets=_string_list(data, presets_key, path),
    )


def _file_mode(path):
    """Keep an existing file's permissions; new files get 0o666 minus the umask."""
    try:
        return path.stat().st_mode & 0o777
    except OSError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class ConfigStore:
    """Loads and saves the Record at a fixed path."""

    def __init__(self, path):
        self.path = Path(path)
        self.last_error = None

    def load(self) -> Record:
        """Read the record.

        A missing file is the normal first-run case and yields an empty
        record. A malformed file is logged, kept in ``last_error`` and also
        yields an empty record.
        """
        self.last_error = None
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No config file, starting empty", operation="load_config",
                         status="missing", path=str(self.path))
            return Record()
        except UnicodeDecodeError as e:
            self.last_error = ConfigParseError(self.path, str(e))
            logger.error(str(self.last_error), operation="load_config", status="failed", path=str(self.path))
            return Record()
        except OSError as e:
            self.last_error = ConfigParseError(self.path, e.strerror or str(e))
            logger.error(str(self.last_error), operation="load_config", status="failed")
            return Record()

        try:
            record = parse_record(text, self.path)
        except ConfigParseError as e:
            self.last_error = e
            logger.error(str(e), operation="load_config", status="failed", path=str(self.path))
            return Record()

        logger.info("Config loaded", operation="load_config", status="success",
                    path=str(self.path), urls=len(record.urls), presets=len(record.presets))
        return record

    def save(self, record: Record) -> None:
        """Overwrite the file with the full record. Raises ConfigWriteError."""
        data = json.dumps(record.to_dict(), indent=2)
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".quickstream-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.chmod(tmp_name, _file_mode(self.path))
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise ConfigWriteError(self.path, e.strerror or str(e)) from e

        logger.debug("Config saved", operation="save_config", status="success",
                     path=str(self.path), urls=len(record.urls), presets=len(record.presets))
