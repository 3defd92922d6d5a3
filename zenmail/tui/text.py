"""Plain-text layout helpers shared by the sub-views."""

from typing import List

CURSOR_GLYPH = "█"


def wrap_line(line: str, width: int) -> List[str]:
    """Greedily pack space-separated words into rows of at most ``width``.

    A word longer than ``width`` gets a row of its own and is not split.
    """
    if width <= 0 or len(line) <= width:
        return [line]

    words = line.split()
    if not words:
        return [line]

    rows = []
    current = words[0]
    for word in words[1:]:
        if len(current) + 1 + len(word) <= width:
            current += " " + word
        else:
            rows.append(current)
            current = word
    rows.append(current)
    return rows


def wrap_text(lines: List[str], width: int) -> List[str]:
    wrapped: List[str] = []
    for line in lines:
        wrapped.extend(wrap_line(line, width))
    return wrapped


def render_cursor(text: str, column: int) -> str:
    """Show the cursor as a block over the cell at ``column``."""
    if column >= len(text):
        return text + CURSOR_GLYPH
    return text[:column] + CURSOR_GLYPH + text[column + 1 :]


def truncate(text: str, width: int) -> str:
    if width <= 0 or len(text) <= width:
        return text
    if width == 1:
        return text[:1]
    return text[: width - 1] + "…"


def cursor_window(text: str, column: int, width: int) -> str:
    """Render the cursor, sliding the row left so the cursor stays in view."""
    shown = render_cursor(text, column)
    if width <= 0 or len(shown) <= width:
        return shown
    start = max(0, column - width + 1)
    return shown[start : start + width]
