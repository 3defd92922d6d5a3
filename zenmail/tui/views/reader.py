"""Read-only, vertically scrolling view of a single message."""

from typing import List, Optional

from zenmail.core.events import Event, Key, KeyPressed, Task
from zenmail.core.models import Message

from ..text import truncate, wrap_text

EMPTY_PLACEHOLDER = "(Empty message)"
# Subject, sender, date and a blank separator above the body
HEADER_ROWS = 4


class ReaderView:
    def __init__(self):
        self.message: Optional[Message] = None
        self.lines: List[str] = []
        # Body lines wrapped to the current width; offsets index into these
        self.rows: List[str] = []
        self.offset = 0
        self.width = 80
        self.height = 20

    def set_message(self, message: Optional[Message]) -> None:
        """Show ``message`` from the top; ``None`` clears the view."""
        self.message = message
        self.offset = 0

        if message is None:
            self.lines = []
            self.rows = []
            return

        # An undecodable body arrives empty and gets the placeholder
        lines = (message.body or "").replace("\r\n", "\n").split("\n")
        while lines and not lines[-1].strip():
            lines.pop()
        self.lines = lines or [EMPTY_PLACEHOLDER]
        self.rows = wrap_text(self.lines, self.width)

    @property
    def viewport_height(self) -> int:
        return max(self.height - HEADER_ROWS, 1)

    @property
    def max_offset(self) -> int:
        return max(0, len(self.rows) - self.viewport_height)

    def scroll(self, delta: int) -> None:
        self.offset = min(max(self.offset + delta, 0), self.max_offset)

    ## Sub-view protocol

    def update(self, event: Event) -> List[Task]:
        if self.message is None or not isinstance(event, KeyPressed):
            return []

        if event.key is Key.SCROLL_UP:
            self.scroll(-1)
        elif event.key is Key.SCROLL_DOWN:
            self.scroll(1)
        elif event.key is Key.PAGE_UP:
            self.scroll(-self.viewport_height)
        elif event.key is Key.PAGE_DOWN:
            self.scroll(self.viewport_height)

        return []

    def resize(self, width: int, height: int) -> None:
        if width != self.width:
            self.rows = wrap_text(self.lines, width)
        self.width = width
        self.height = height
        self.scroll(0)

    def status(self) -> str:
        if self.message is None:
            return ""
        if len(self.rows) <= self.viewport_height:
            return truncate(self.message.subject, max(self.width // 2, 10))
        last = min(self.offset + self.viewport_height, len(self.rows))
        return f"lines {self.offset + 1}-{last} of {len(self.rows)}"

    def render(self) -> List[str]:
        if self.message is None:
            return ["No message"]

        header = [
            truncate(self.message.subject or "(no subject)", self.width),
            truncate(f"From: {self.message.sender}", self.width),
            truncate(f"Date: {self.message.date:%a, %d %b %Y %H:%M}", self.width),
            "",
        ]
        return header + self.rows[self.offset : self.offset + self.viewport_height]
