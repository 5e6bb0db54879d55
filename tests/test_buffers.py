"""Tests for building components from the host."""

from __future__ import annotations

from bufferbar.buffers import NO_NAME, apply_custom_order, get_components, unique_names
from bufferbar.config import BufferlineOptions
from bufferbar.groups import GroupManager
from bufferbar.host import MemoryHost
from bufferbar.letters import LetterRegistry
from bufferbar.state import BufferlineState
from bufferbar import tabpages


class TestApplyCustomOrder:
    """Tests for merging a manual order with the live id list."""

    def test_no_custom_order(self):
        assert apply_custom_order([3, 1, 2], None) == [3, 1, 2]

    def test_custom_order_wins(self):
        assert apply_custom_order([1, 2, 3], [3, 1, 2]) == [3, 1, 2]

    def test_new_ids_appended_in_host_order(self):
        assert apply_custom_order([1, 2, 3, 4, 5], [3, 1]) == [3, 1, 2, 4, 5]

    def test_closed_ids_ignored(self):
        assert apply_custom_order([1, 3], [5, 3, 9, 1]) == [3, 1]

    def test_duplicates_collapsed(self):
        assert apply_custom_order([1, 2], [2, 2, 1]) == [2, 1]


class TestUniqueNames:
    """Tests for disambiguating file names."""

    def test_distinct_names(self):
        assert unique_names({1: "/a/x.py", 2: "/b/y.py"}) == {1: "x.py", 2: "y.py"}

    def test_duplicates_get_parent(self):
        names = unique_names({1: "/a/x.py", 2: "/b/x.py", 3: "/b/z.py"})
        assert names == {1: "a/x.py", 2: "b/x.py", 3: "z.py"}

    def test_deep_collision(self):
        names = unique_names({1: "/p/a/x.py", 2: "/q/a/x.py"})
        assert names == {1: "p/a/x.py", 2: "q/a/x.py"}

    def test_unnamed_buffers(self):
        assert unique_names({1: "", 2: ""}) == {1: NO_NAME, 2: NO_NAME}


class TestGetComponents:
    """Tests for the buffer and tab builders."""

    def test_buffers_in_host_order(self):
        host = MemoryHost()
        host.open_many(["/w/a.py", "/w/b.py"])
        components = get_components(
            host, BufferlineState(), BufferlineOptions(), LetterRegistry(), GroupManager()
        )
        assert [c.name for c in components] == ["a.py", "b.py"]
        assert components[0].current()
        assert not components[1].current()
        assert all(c.group == "ungrouped" for c in components)

    def test_buffers_follow_custom_sort(self):
        host = MemoryHost()
        host.open_many(["/w/a.py", "/w/b.py", "/w/c.py"])
        state = BufferlineState(custom_sort=[3, 1])
        components = get_components(
            host, state, BufferlineOptions(), LetterRegistry(), GroupManager()
        )
        assert [c.id for c in components] == [3, 1, 2]

    def test_letters_shown_while_picking(self):
        host = MemoryHost()
        host.open_many(["/w/a.py", "/w/b.py"])
        state = BufferlineState(is_picking=True)
        components = get_components(
            host, state, BufferlineOptions(), LetterRegistry(), GroupManager()
        )
        assert [c.letter for c in components] == ["a", "b"]
        assert components[1].text == " b b.py "

    def test_tabs_named_after_focused_buffer(self):
        host = MemoryHost()
        first, second = host.open_many(["/w/a.py", "/w/b.py"])
        host.new_tab(second)
        components = tabpages.get_components(
            host, BufferlineState(), BufferlineOptions(mode="tabs"), LetterRegistry()
        )
        assert [c.text for c in components] == [" 1:a.py ", " 2:b.py "]
        assert components[1].current()
        assert components[0].buffer_id == first
