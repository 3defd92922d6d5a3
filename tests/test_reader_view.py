"""
Tests for the message ReaderView
"""
from zenmail.core.events import Key, KeyPressed
from zenmail.tui.views.reader import EMPTY_PLACEHOLDER, HEADER_ROWS, ReaderView

from test_helpers import MessageTestHelper


def reader_with(body, width=80, height=14):
    view = ReaderView()
    view.resize(width, height)
    view.set_message(MessageTestHelper.create_message(body=body))
    return view


def numbered(count):
    return "\n".join(f"line {n}" for n in range(count))


class TestSetMessage:
    """Test loading a message into the reader"""

    def test_lines_split_and_offset_reset(self):
        view = reader_with(numbered(30))
        view.scroll(5)
        view.set_message(MessageTestHelper.create_message(body="a\nb"))
        assert view.offset == 0
        assert view.lines == ["a", "b"]

    def test_trailing_blank_lines_trimmed(self):
        assert reader_with("a\n\nb\n\n  \n").lines == ["a", "", "b"]

    def test_empty_body_gets_placeholder(self):
        assert reader_with("").lines == [EMPTY_PLACEHOLDER]
        assert reader_with("\n\n").lines == [EMPTY_PLACEHOLDER]

    def test_crlf_bodies(self):
        assert reader_with("a\r\nb").lines == ["a", "b"]

    def test_clearing(self):
        view = reader_with("a")
        view.set_message(None)
        assert view.message is None
        assert view.render() == ["No message"]


class TestScrolling:
    """Test offset clamping"""

    def test_scroll_clamps_to_bounds(self):
        view = reader_with(numbered(30), height=14)
        assert view.viewport_height == 14 - HEADER_ROWS
        view.scroll(-3)
        assert view.offset == 0
        view.scroll(1000)
        assert view.offset == 30 - view.viewport_height

    def test_short_message_never_scrolls(self):
        view = reader_with("one\ntwo")
        view.scroll(5)
        assert view.offset == 0

    def test_keys(self):
        view = reader_with(numbered(50), height=14)
        view.update(KeyPressed(Key.SCROLL_DOWN))
        view.update(KeyPressed(Key.SCROLL_DOWN))
        assert view.offset == 2
        view.update(KeyPressed(Key.PAGE_DOWN))
        assert view.offset == 2 + view.viewport_height
        view.update(KeyPressed(Key.PAGE_UP))
        view.update(KeyPressed(Key.SCROLL_UP))
        assert view.offset == 1

    def test_growing_window_reclamps_offset(self):
        """Enlarging the terminal never leaves blank rows under the text"""
        view = reader_with(numbered(30), height=14)
        view.scroll(1000)
        view.resize(80, 30)
        assert view.offset == 30 - view.viewport_height
        view.resize(80, 60)
        assert view.offset == 0


class TestRendering:
    """Test the rendered rows"""

    def test_header_rows(self):
        view = reader_with("body")
        rows = view.render()
        assert rows[0] == "Test Subject"
        assert rows[1] == "From: sender@x.com"
        assert rows[2] == "Date: Thu, 02 Oct 2025 10:30"
        assert rows[3] == ""
        assert rows[4] == "body"

    def test_visible_window(self):
        view = reader_with(numbered(30), height=14)
        view.scroll(3)
        rows = view.render()
        assert rows[HEADER_ROWS] == "line 3"
        assert rows[-1] == "line 12"

    def test_long_lines_wrap_on_words(self):
        view = reader_with("alpha beta gamma delta", width=11)
        assert view.render()[HEADER_ROWS:] == ["alpha beta", "gamma delta"]

    def test_long_word_is_not_split(self):
        view = reader_with("x" * 15, width=10)
        assert view.render()[HEADER_ROWS] == "x" * 15

    def test_status_shows_position_for_long_messages(self):
        view = reader_with(numbered(30), height=14)
        assert view.status() == "lines 1-10 of 30"
        assert reader_with("short").status() == "Test Subject"


class TestWrappedScrolling:
    """Test scrolling through bodies whose lines wrap"""

    def wrapped_reader(self):
        body = "\n".join(f"word{n} filler filler filler END{n}" for n in range(6))
        view = ReaderView()
        view.resize(20, 8)
        view.set_message(MessageTestHelper.create_message(body=body))
        return view

    def test_scrolling_reaches_last_line(self):
        view = self.wrapped_reader()
        view.scroll(1000)
        rows = view.render()
        assert any("END5" in row for row in rows)
        assert rows[-1] == view.rows[-1]

    def test_offset_counts_wrapped_rows(self):
        view = self.wrapped_reader()
        assert len(view.rows) > len(view.lines)
        view.scroll(1000)
        assert view.offset == len(view.rows) - view.viewport_height

    def test_rendered_body_fits_viewport(self):
        view = self.wrapped_reader()
        view.scroll(3)
        assert len(view.render()) == HEADER_ROWS + view.viewport_height

    def test_resize_rewraps(self):
        view = self.wrapped_reader()
        view.resize(80, 8)
        assert view.rows == view.lines
        assert view.offset == 0
