"""Editable multi-line text with a two-dimensional cursor."""

from typing import Iterable, List, Tuple


class TextBuffer:
    """An ordered list of lines plus a ``(line, column)`` cursor.

    The buffer always holds at least one line, and the cursor always
    satisfies ``0 <= line < line_count()`` and
    ``0 <= column <= len(line_at(line))``. Every mutating operation ends by
    clamping the cursor back into those bounds.
    """

    def __init__(self, text: str = ""):
        self._lines: List[str] = text.split("\n")
        self._line = 0
        self._column = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "TextBuffer":
        buffer = cls()
        buffer._lines = [line for line in lines] or [""]
        for line in buffer._lines:
            if "\n" in line:
                raise ValueError("Lines must not contain newlines")
        return buffer

    ## Inspection

    @property
    def cursor(self) -> Tuple[int, int]:
        return self._line, self._column

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def line_at(self, index: int) -> str:
        self._check_line(index)
        return self._lines[index]

    def line_count(self) -> int:
        return len(self._lines)

    def current_line(self) -> str:
        return self._lines[self._line]

    def is_empty(self) -> bool:
        return self._lines == [""]

    ## Editing primitives

    def insert_at(self, line: int, column: int, text: str) -> None:
        """Insert ``text`` at ``(line, column)`` and place the cursor after it."""
        if "\n" in text:
            raise ValueError("Use split_line to insert line breaks")
        self._check_position(line, column)

        current = self._lines[line]
        self._lines[line] = current[:column] + text + current[column:]
        self._set_cursor(line, column + len(text))

    def delete_at(self, line: int, column: int) -> str:
        """Delete the character at ``(line, column)``; cursor lands on ``column``.

        Returns the removed character.
        """
        self._check_line(line)
        current = self._lines[line]
        if not 0 <= column < len(current):
            raise IndexError(f"Column {column} out of range for line {line}")

        removed = current[column]
        self._lines[line] = current[:column] + current[column + 1 :]
        self._set_cursor(line, column)
        return removed

    def split_line(self, line: int, column: int) -> None:
        """Break ``line`` at ``column``; the tail becomes the following line.

        The cursor moves to the start of the new line.
        """
        self._check_position(line, column)

        current = self._lines[line]
        self._lines[line] = current[:column]
        self._lines.insert(line + 1, current[column:])
        self._set_cursor(line + 1, 0)

    def join_line(self, line: int) -> None:
        """Append line ``line + 1`` onto ``line`` and remove it.

        The cursor lands on the former end of ``line``, so
        ``split_line(l, c)`` followed by ``join_line(l)`` restores both the
        text and the cursor.
        """
        self._check_line(line)
        if line + 1 >= len(self._lines):
            raise IndexError(f"No line follows line {line}")

        head = self._lines[line]
        self._lines[line] = head + self._lines.pop(line + 1)
        self._set_cursor(line, len(head))

    def set_text(self, text: str) -> None:
        """Replace the whole content and put the cursor at the very end."""
        self._lines = text.split("\n")
        self.move_to_end_of_text()

    ## Cursor motion

    def move_to(self, line: int, column: int) -> None:
        """Move the cursor, clamping into bounds."""
        self._set_cursor(line, column)

    def move_left(self) -> None:
        self._set_cursor(self._line, self._column - 1)

    def move_right(self) -> None:
        self._set_cursor(self._line, self._column + 1)

    def move_up(self) -> None:
        if self._line > 0:
            self._set_cursor(self._line - 1, self._column)

    def move_down(self) -> None:
        if self._line < len(self._lines) - 1:
            self._set_cursor(self._line + 1, self._column)

    def move_home(self) -> None:
        self._column = 0

    def move_end(self) -> None:
        self._column = len(self._lines[self._line])

    def move_to_end_of_text(self) -> None:
        last = len(self._lines) - 1
        self._set_cursor(last, len(self._lines[last]))

    ## Internals

    def _set_cursor(self, line: int, column: int) -> None:
        if not self._lines:
            self._lines = [""]
        self._line = min(max(line, 0), len(self._lines) - 1)
        self._column = min(max(column, 0), len(self._lines[self._line]))

    def _check_line(self, line: int) -> None:
        if not 0 <= line < len(self._lines):
            raise IndexError(f"Line {line} out of range (0..{len(self._lines) - 1})")

    def _check_position(self, line: int, column: int) -> None:
        self._check_line(line)
        if not 0 <= column <= len(self._lines[line]):
            raise IndexError(f"Column {column} out of range for line {line}")

    def __repr__(self) -> str:
        return f"TextBuffer(lines={self._lines!r}, cursor={self.cursor!r})"
