"""Tests for Session: persistence, dual confirmation and quit."""
import json
import sys
from unittest.mock import MagicMock

from quickstream.errors import ConfigWriteError, SpawnError
from quickstream.processes import ProcessSupervisor
from quickstream.state import Mode, Session
from quickstream.store import ConfigStore, Record


class TestPersistence:

    def test_first_url_is_written(self, store, supervisor, config_path):
        session = Session.create(store, supervisor)
        assert session.urls.cursor == -1

        assert session.add_url("rtmp://x/live/1")
        assert json.loads(config_path.read_text()) == {"urls": ["rtmp://x/live/1"], "presets": []}
        assert session.urls.cursor == 0

    def test_blank_add_does_not_touch_file(self, make_session, config_path):
        session = make_session(urls=["a"])
        session.store.save(session.record)
        before = config_path.read_text()

        assert session.add_url("") is False
        assert session.add_url("   ") is False
        assert config_path.read_text() == before
        assert len(session.urls) == 1

    def test_delete_saves(self, make_session, config_path):
        session = make_session(urls=["a", "b"], presets=["p"])
        session.delete_url()
        assert json.loads(config_path.read_text()) == {"urls": ["b"], "presets": ["p"]}

    def test_add_clears_pending_confirmation(self, make_session):
        session = make_session(urls=["a"])
        session.urls.confirm()
        session.add_url("b")
        assert session.urls.confirmed == -1

    def test_write_failure_keeps_memory_state(self, supervisor, log_messages):
        store = MagicMock(spec=ConfigStore)
        store.save.side_effect = ConfigWriteError("/nope", "Permission denied")
        session = Session(Record(), store, supervisor)

        assert session.add_url("rtmp://x")
        assert session.urls.items == ["rtmp://x"]
        assert "Permission denied" in session.status_message
        assert any(level == "ERROR" for level, _ in log_messages)

    def test_parse_error_shown_on_start(self, store, supervisor, config_path):
        config_path.write_text("{broken")
        session = Session.create(store, supervisor)
        assert session.urls.items == []
        assert "Error parsing config" in session.status_message


class TestDualConfirmation:

    def test_single_list_never_starts(self, make_session, supervisor):
        session = make_session(urls=["rtmp://x/live/1"], presets=[])
        assert session.confirm() is False
        supervisor.start.assert_not_called()
        assert session.urls.confirmed == 0

        session = make_session(urls=[], presets=["-c copy"])
        session.confirm()
        supervisor.start.assert_not_called()

    def test_both_confirmed_starts_and_resets(self, make_session, supervisor):
        session = make_session(urls=["rtmp://x/live/1"], presets=["-re -i in.mp4 -c copy"])
        assert session.confirm() is True
        supervisor.start.assert_called_once_with("rtmp://x/live/1", "-re -i in.mp4 -c copy")
        assert session.urls.confirmed == -1
        assert session.presets.confirmed == -1
        assert session.stream_url == "rtmp://x/live/1"

    def test_uses_cursor_items(self, make_session, supervisor):
        session = make_session(urls=["u1", "u2"], presets=["p1", "p2"])
        session.urls.move_next()
        session.presets.move_previous()
        session.confirm()
        supervisor.start.assert_called_once_with("u2", "p2")

    def test_spawn_failure_still_consumes_confirmation(self, make_session, supervisor):
        supervisor.start.side_effect = SpawnError(["ffmpeg"], "No such file or directory")
        session = make_session(urls=["u"], presets=["p"])

        assert session.confirm() is True
        assert session.urls.confirmed == -1
        assert session.presets.confirmed == -1
        assert session.stream_url is None
        assert "No such file" in session.status_message
        assert session.running

    def test_unspawnable_preset_keeps_session_alive(self, store):
        session = Session(Record(urls=["rtmp://x"], presets=["-c\x00x"]), store,
                          ProcessSupervisor(encoder=sys.executable))
        assert session.confirm() is True
        assert session.running
        assert not session.supervisor.running
        assert "null byte" in session.status_message
        assert session.urls.confirmed == -1

    def test_retry_after_failure_needs_fresh_confirm(self, make_session, supervisor):
        supervisor.start.side_effect = [SpawnError(["ffmpeg"], "boom"), MagicMock()]
        session = make_session(urls=["u"], presets=["p"])
        session.confirm()
        session.confirm()
        assert supervisor.start.call_count == 2


class TestQuit:

    def test_quit_stops_supervisor(self, make_session, supervisor):
        session = make_session(urls=["u"], presets=["p"])
        session.confirm()
        session.quit()
        supervisor.stop.assert_called_once_with()
        assert session.running is False

    def test_snapshot_reflects_mode_and_stream(self, make_session, supervisor):
        supervisor.running = True
        supervisor.pid = 4242
        session = make_session(urls=["u"], presets=["p"])
        session.confirm()
        view = session.snapshot()
        assert view.mode == Mode.NORMAL
        assert view.stream_pid == 4242
        assert view.stream_url == "u"
        assert view.urls == ("u",)
