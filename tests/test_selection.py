"""Tests for ListSelection cursor and confirmation rules."""
import random

import pytest

from quickstream.state import ListSelection


class TestNavigation:

    def test_initial_cursor(self):
        assert ListSelection([]).cursor == -1
        assert ListSelection(["a"]).cursor == 0

    def test_wraps_both_ways(self):
        sel = ListSelection(["a", "b", "c"])
        sel.move_previous()
        assert sel.cursor == 2
        sel.move_next()
        assert sel.cursor == 0

    @pytest.mark.parametrize("length", [1, 2, 5])
    def test_next_then_previous_is_identity(self, length):
        sel = ListSelection([str(i) for i in range(length)])
        for start in range(length):
            sel.cursor = start
            sel.move_next()
            sel.move_previous()
            assert sel.cursor == start
            sel.move_previous()
            sel.move_next()
            assert sel.cursor == start

    def test_empty_list_is_noop(self):
        sel = ListSelection([])
        sel.move_next()
        sel.move_previous()
        assert sel.cursor == -1

    def test_movement_clears_confirmation(self):
        sel = ListSelection(["a", "b"])
        assert sel.confirm()
        assert sel.confirmed == 0
        sel.move_next()
        assert sel.confirmed == -1


class TestConfirm:

    def test_confirm_empty_is_noop(self):
        sel = ListSelection([])
        assert sel.confirm() is False
        assert sel.confirmed == -1

    def test_confirm_records_cursor(self):
        sel = ListSelection(["a", "b"])
        sel.move_next()
        sel.confirm()
        assert sel.confirmed == 1


class TestAddDelete:

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_blank_add_rejected(self, text):
        sel = ListSelection(["a"])
        assert sel.add(text) is False
        assert sel.items == ["a"]
        assert sel.cursor == 0

    def test_add_moves_cursor_to_new_item(self):
        sel = ListSelection([])
        assert sel.add("rtmp://x/live/1")
        assert sel.cursor == 0
        sel.add("rtmp://x/live/2")
        assert sel.cursor == 1

    def test_delete_middle_keeps_position(self):
        sel = ListSelection(["a", "b", "c"])
        sel.cursor = 1
        assert sel.delete() == "b"
        assert sel.cursor == 1
        assert sel.current == "c"

    def test_delete_last_steps_back(self):
        sel = ListSelection(["a", "b", "c"])
        sel.cursor = 2
        sel.delete()
        assert sel.cursor == 1

    def test_delete_only_item_empties_cursor(self):
        sel = ListSelection(["a"])
        sel.confirm()
        sel.delete()
        assert sel.items == []
        assert sel.cursor == -1
        assert sel.confirmed == -1

    def test_delete_empty_is_noop(self):
        sel = ListSelection([])
        assert sel.delete() is None

    def test_cursor_invariant_under_random_edits(self):
        rng = random.Random(7)
        sel = ListSelection(["seed"])
        for step in range(500):
            action = rng.choice(["add", "delete", "delete", "next", "prev"])
            if action == "add":
                sel.add(f"item-{step}")
            elif action == "delete":
                sel.delete()
            elif action == "next":
                sel.move_next()
            else:
                sel.move_previous()
            assert -1 <= sel.cursor <= len(sel.items) - 1
            assert (sel.cursor == -1) == (len(sel.items) == 0)
