import os
import sys
from unittest.mock import MagicMock

import pytest
from loguru import logger

# Ensure project root is on path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from quickstream.state import Session
from quickstream.store import ConfigStore, Record


@pytest.fixture
def log_messages():
    """Collect loguru records as (level, message) pairs."""
    messages = []
    handler_id = logger.add(lambda m: messages.append((m.record["level"].name, m.record["message"])),
                            level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / ".quickstream.json"


@pytest.fixture
def store(config_path):
    return ConfigStore(config_path)


@pytest.fixture
def supervisor():
    sup = MagicMock()
    sup.running = False
    sup.pid = None
    return sup


@pytest.fixture
def make_session(store, supervisor):
    def _make(urls=(), presets=()):
        return Session(Record(urls=list(urls), presets=list(presets)), store, supervisor)
    return _make
