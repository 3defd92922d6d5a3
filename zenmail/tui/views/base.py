"""Capabilities every sub-view offers to the controller."""

from typing import List, Protocol

from zenmail.core.events import Event, Task


class SubView(Protocol):
    width: int
    height: int

    def update(self, event: Event) -> List[Task]:
        """Apply an input event; return follow-up tasks."""
        ...

    def render(self) -> List[str]:
        """Content rows, at most ``height`` of them."""
        ...

    def resize(self, width: int, height: int) -> None: ...

    def status(self) -> str:
        """Short text for the header bar."""
        ...
