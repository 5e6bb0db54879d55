"""Tests for sections, truncation and bar rendering."""

from __future__ import annotations

import pytest
from rich.cells import cell_len

from bufferbar.components import Buffer, Component
from bufferbar.config import BufferlineOptions
from bufferbar.host import BufferInfo, TabInfo
from bufferbar.render import (
    Marker,
    Section,
    get_marker_size,
    render_bar,
    render_tab_indicators,
    truncate,
)


def _item(name: str, width: int, current: bool = False) -> Component:
    return Component(id=ord(name), text=name * width, is_current=current)


def _buffers(count: int, current: int, options: BufferlineOptions | None = None) -> list[Buffer]:
    options = options or BufferlineOptions()
    return [
        Buffer.create(
            BufferInfo(id=i, path=f"file{i}.py"),
            name=f"file{i}.py",
            options=options,
            strwidth=cell_len,
            is_current=i == current,
        )
        for i in range(1, count + 1)
    ]


class TestSection:
    """Tests for Section bookkeeping."""

    def test_length_is_sum_of_items(self):
        """A section starts with the summed item lengths."""
        section = Section([_item("a", 3), _item("b", 4)])
        assert section.length == 7
        assert len(section) == 2

    def test_pop_keeps_length_in_step(self):
        """Popping from either end subtracts that item's length."""
        section = Section([_item("a", 3), _item("b", 4), _item("c", 5)])
        first = section.pop_front()
        assert first.text == "aaa"
        assert section.length == 9
        last = section.pop_back()
        assert last.text == "ccccc"
        assert section.length == 4

    def test_pop_empty_returns_none(self):
        """Popping an empty section is a no-op."""
        section = Section()
        assert section.pop_front() is None
        assert section.pop_back() is None
        assert section.length == 0


class TestMarkerSize:
    """Tests for the marker cost function."""

    def test_zero_count_costs_nothing(self):
        assert get_marker_size(0, 4) == 0

    def test_cost_includes_digits(self):
        """The count's digits add to the fixed element size."""
        assert get_marker_size(3, 2) == 3
        assert get_marker_size(12, 2) == 4


class TestTruncate:
    """Tests for the truncation engine."""

    def test_fits_without_dropping(self):
        """A row that fits is returned whole."""
        before = Section([_item("a", 2)])
        current = Section([_item("b", 2, current=True)])
        after = Section([_item("c", 2)])
        line, marker, visible = truncate(before, current, after, 10, Marker())
        assert line == "aabbcc"
        assert [item.text for item in visible] == ["aa", "bb", "cc"]
        assert marker.left_count == marker.right_count == 0

    def test_drops_from_outside_in(self):
        """Six items of width 3 around a width-4 current item collapse to it."""
        before = Section([_item("A", 3), _item("B", 3), _item("C", 3)])
        current = Section([_item("D", 4, current=True)])
        after = Section([_item("E", 3), _item("F", 3)])
        marker = Marker(left_element_size=2, right_element_size=2)

        line, marker, visible = truncate(before, current, after, 10, marker)

        assert [item.text for item in visible] == ["DDDD"]
        assert line == "DDDD"
        assert marker.left_count == 3
        assert marker.right_count == 2
        markers = get_marker_size(3, 2) + get_marker_size(2, 2)
        assert cell_len(line) + markers <= 10

    def test_ties_drop_from_before(self):
        """Equal sides drop from the front of ``before`` first."""
        before = Section([_item("a", 3)])
        current = Section([_item("b", 3, current=True)])
        after = Section([_item("c", 3)])
        _, marker, visible = truncate(before, current, after, 8, Marker())
        assert [item.text for item in visible] == ["bbb", "ccc"]
        assert marker.left_count == 1
        assert marker.right_count == 0

    def test_current_too_wide_gives_empty_line(self):
        """When the current item alone does not fit, nothing is shown."""
        current = Section([_item("x", 12, current=True)])
        line, _, visible = truncate(Section([_item("a", 1)]), current, Section(), 10, Marker())
        assert line == ""
        assert visible == []

    def test_markers_reset_when_unaffordable(self):
        """Counts drop back to zero when the markers cannot fit next to the current item."""
        before = Section([_item("a", 3)])
        current = Section([_item("b", 5, current=True)])
        marker = Marker(left_element_size=4, right_element_size=4)
        line, marker, visible = truncate(before, current, Section(), 6, marker)
        assert [item.text for item in visible] == ["bbbbb"]
        assert line == "bbbbb"
        assert marker.left_count == 0

    @pytest.mark.parametrize("width", range(4, 40))
    def test_current_always_visible_and_width_bound(self, width):
        """For any width that fits the current item, it stays and the row fits."""
        before = Section([_item(c, 3) for c in "ABC"])
        current_item = _item("D", 4, current=True)
        after = Section([_item(c, 3) for c in "EFG"])
        marker = Marker(left_element_size=2, right_element_size=2)
        original = len(before) + len(after)

        line, marker, visible = truncate(before, Section([current_item]), after, width, marker)

        assert current_item in visible
        markers = get_marker_size(marker.left_count, 2) + get_marker_size(marker.right_count, 2)
        assert cell_len(line) + markers <= width
        dropped = original - (len(visible) - 1)
        if marker.left_count or marker.right_count:
            assert marker.left_count + marker.right_count == dropped


class TestRenderBar:
    """Tests for rendering the full bar."""

    def test_everything_fits(self):
        """With room to spare, every buffer is drawn with separators."""
        items = _buffers(2, current=1)
        text, visible = render_bar(items, options=BufferlineOptions(), columns=80)
        assert text == " file1.py | file2.py  "
        assert visible == items

    def test_truncation_markers_drawn(self):
        """Dropped items are replaced by counted markers on each side."""
        items = _buffers(9, current=5)
        text, visible = render_bar(items, options=BufferlineOptions(), columns=40)
        assert items[4] in visible
        assert text.startswith(" < ")
        assert text.endswith(" > ")
        assert cell_len(text) <= 40

    @pytest.mark.parametrize("columns", [12, 20, 33, 50, 71])
    def test_width_bound(self, columns):
        """The rendered bar never exceeds the available columns."""
        items = _buffers(12, current=7)
        text, visible = render_bar(items, options=BufferlineOptions(), columns=columns)
        assert cell_len(text) <= columns
        assert items[6] in visible

    def test_hidden_items_skipped(self):
        """Hidden components are never drawn."""
        items = _buffers(3, current=1)
        items[1].hidden = True
        text, visible = render_bar(items, options=BufferlineOptions(), columns=80)
        assert "file2.py" not in text
        assert items[1] not in visible

    def test_no_current_item(self):
        """Without a current item, the row is truncated from the left only."""
        items = _buffers(3, current=0)
        text, visible = render_bar(items, options=BufferlineOptions(), columns=80)
        assert len(visible) == 3
        assert "file1.py" in text

    def test_tab_indicators_right_aligned(self):
        """Tab numbers sit at the right edge in buffer mode."""
        items = _buffers(2, current=1)
        tabs = [TabInfo(id=1), TabInfo(id=2)]
        text, _ = render_bar(
            items, options=BufferlineOptions(), columns=60, tabs=tabs, current_tab=2
        )
        assert text.endswith(" 1 [2]")
        assert cell_len(text) == 60


class TestTabIndicators:
    """Tests for tab indicators."""

    def test_single_tab_has_none(self):
        assert render_tab_indicators([TabInfo(id=1)], 1, BufferlineOptions()) == ""

    def test_disabled(self):
        options = BufferlineOptions(show_tab_indicators=False)
        assert render_tab_indicators([TabInfo(id=1), TabInfo(id=2)], 1, options) == ""

    def test_not_in_tab_mode(self):
        """Tab mode already shows the tabs themselves."""
        options = BufferlineOptions(mode="tabs")
        assert render_tab_indicators([TabInfo(id=1), TabInfo(id=2)], 1, options) == ""

    def test_current_is_bracketed(self):
        tabs = [TabInfo(id=4), TabInfo(id=7), TabInfo(id=9)]
        assert render_tab_indicators(tabs, 7, BufferlineOptions()) == " 1 [2] 3 "
