"""
Tests for the multi-line TextBuffer editing primitive
"""
import pytest

from zenmail.core.text_buffer import TextBuffer


class TestConstruction:
    """Test buffer creation"""

    def test_empty_buffer_has_one_line(self):
        """An empty buffer still holds a single empty line"""
        buffer = TextBuffer()
        assert buffer.line_count() == 1
        assert buffer.line_at(0) == ""
        assert buffer.cursor == (0, 0)
        assert buffer.is_empty()

    def test_text_is_split_on_newlines(self):
        buffer = TextBuffer("one\ntwo\n")
        assert buffer.lines == ("one", "two", "")
        assert buffer.text == "one\ntwo\n"

    def test_from_lines(self):
        buffer = TextBuffer.from_lines(["a", "b"])
        assert buffer.line_count() == 2
        assert buffer.cursor == (0, 0)

    def test_from_no_lines_keeps_one_line(self):
        assert TextBuffer.from_lines([]).lines == ("",)

    def test_from_lines_rejects_embedded_newlines(self):
        with pytest.raises(ValueError):
            TextBuffer.from_lines(["a\nb"])


class TestEditing:
    """Test insert, delete, split and join"""

    def test_insert_advances_cursor(self):
        buffer = TextBuffer("held")
        buffer.insert_at(0, 2, "l")
        assert buffer.text == "helld"
        assert buffer.cursor == (0, 3)

    def test_insert_at_end_of_line(self):
        buffer = TextBuffer("ab")
        buffer.insert_at(0, 2, "c")
        assert buffer.text == "abc"
        assert buffer.cursor == (0, 3)

    def test_insert_rejects_newline(self):
        with pytest.raises(ValueError):
            TextBuffer("ab").insert_at(0, 1, "\n")

    def test_insert_out_of_bounds(self):
        buffer = TextBuffer("ab")
        with pytest.raises(IndexError):
            buffer.insert_at(0, 3, "x")
        with pytest.raises(IndexError):
            buffer.insert_at(1, 0, "x")

    def test_delete_returns_removed_character(self):
        buffer = TextBuffer("abc")
        assert buffer.delete_at(0, 1) == "b"
        assert buffer.text == "ac"
        assert buffer.cursor == (0, 1)

    def test_delete_past_end_raises(self):
        with pytest.raises(IndexError):
            TextBuffer("abc").delete_at(0, 3)

    def test_split_line_moves_tail_down(self):
        buffer = TextBuffer("hello world")
        buffer.split_line(0, 5)
        assert buffer.lines == ("hello", " world")
        assert buffer.cursor == (1, 0)

    def test_split_at_end_makes_empty_line(self):
        buffer = TextBuffer("abc")
        buffer.split_line(0, 3)
        assert buffer.lines == ("abc", "")
        assert buffer.cursor == (1, 0)

    def test_join_line(self):
        buffer = TextBuffer("foo\nbar")
        buffer.join_line(0)
        assert buffer.lines == ("foobar",)
        assert buffer.cursor == (0, 3)

    def test_join_last_line_raises(self):
        with pytest.raises(IndexError):
            TextBuffer("only").join_line(0)

    @pytest.mark.parametrize("text,line,column", [
        ("hello world", 0, 5),
        ("hello", 0, 0),
        ("hello", 0, 5),
        ("first\nsecond\nthird", 1, 3),
        ("", 0, 0),
    ])
    def test_split_then_join_restores_line_and_cursor(self, text, line, column):
        """Splitting and re-joining at the same point is a no-op"""
        buffer = TextBuffer(text)
        buffer.move_to(line, column)
        before_lines, before_cursor = buffer.lines, buffer.cursor

        buffer.split_line(line, column)
        buffer.join_line(line)

        assert buffer.lines == before_lines
        assert buffer.cursor == before_cursor

    def test_set_text_moves_cursor_to_end(self):
        buffer = TextBuffer()
        buffer.set_text("a\nbcd")
        assert buffer.cursor == (1, 3)


class TestCursorMotion:
    """Test cursor clamping"""

    def test_left_stops_at_column_zero(self):
        buffer = TextBuffer("ab")
        buffer.move_left()
        assert buffer.cursor == (0, 0)

    def test_right_stops_at_line_end(self):
        buffer = TextBuffer("ab")
        for _ in range(5):
            buffer.move_right()
        assert buffer.cursor == (0, 2)

    def test_right_does_not_wrap_to_next_line(self):
        buffer = TextBuffer("ab\ncd")
        buffer.move_to(0, 2)
        buffer.move_right()
        assert buffer.cursor == (0, 2)

    def test_down_clamps_column_to_shorter_line(self):
        buffer = TextBuffer("long line\nab")
        buffer.move_to(0, 8)
        buffer.move_down()
        assert buffer.cursor == (1, 2)

    def test_up_on_first_line_is_noop(self):
        buffer = TextBuffer("ab\ncd")
        buffer.move_to(0, 1)
        buffer.move_up()
        assert buffer.cursor == (0, 1)

    def test_down_on_last_line_is_noop(self):
        buffer = TextBuffer("ab\ncd")
        buffer.move_to(1, 1)
        buffer.move_down()
        assert buffer.cursor == (1, 1)

    def test_home_and_end(self):
        buffer = TextBuffer("abc")
        buffer.move_end()
        assert buffer.cursor == (0, 3)
        buffer.move_home()
        assert buffer.cursor == (0, 0)

    def test_move_to_clamps(self):
        buffer = TextBuffer("abc\nd")
        buffer.move_to(10, 10)
        assert buffer.cursor == (1, 1)
        buffer.move_to(-1, -1)
        assert buffer.cursor == (0, 0)
