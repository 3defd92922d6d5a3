"""Inbox list: a scrollable, selectable sequence of message summaries."""

from datetime import datetime
from typing import List, Optional, Tuple

from zenmail.core.events import Event, InboxLoaded, Key, KeyPressed, Task
from zenmail.core.models import Message
from zenmail.core.services import MailService
from zenmail.utils.errors import ErrorHandler, ZenMailError
from zenmail.utils.logging import EventType, get_logger, log_event

from ..text import truncate

logger = get_logger(__name__)

DEFAULT_INBOX_LIMIT = 20


class ListView:
    """Message summaries with a single highlighted selection.

    The message sequence is replaced wholesale on every successful refresh.
    At most one refresh is outstanding at a time; while it is in flight,
    selection moves are ignored.
    """

    def __init__(self, service: MailService, limit: int = DEFAULT_INBOX_LIMIT):
        self.service = service
        self.limit = limit
        self.messages: Tuple[Message, ...] = ()
        self.selected = 0
        self.loading = False
        self.error: Optional[ZenMailError] = None
        self.width = 80
        self.height = 20

    ## Refresh

    def refresh(self) -> Optional[Task]:
        """Start loading the inbox; ``None`` if a load is already running."""
        if self.loading:
            logger.debug("Refresh requested while loading, ignoring")
            return None

        self.loading = True
        return Task("list-inbox", self._load)

    async def _load(self) -> InboxLoaded:
        try:
            messages = await self.service.list_inbox(self.limit)
        except Exception as e:
            return InboxLoaded(error=ErrorHandler.as_transport_error(e, "list_inbox"))

        return InboxLoaded(messages=tuple(messages))

    def apply(self, event: InboxLoaded) -> bool:
        """Fold a completed load into the view.

        Returns False when the result is stale (no load was outstanding).
        """
        if not self.loading:
            logger.debug("Discarding inbox result with no outstanding refresh")
            return False

        self.loading = False

        if event.error is not None:
            self.error = event.error
            log_event(
                EventType.INBOX_FAILED,
                f"Inbox refresh failed: {event.error.message}",
                level="WARNING",
                category=event.error.category.value,
            )
            return True

        self.messages = event.messages
        self.error = None
        self.selected = self._clamp(self.selected)
        log_event(EventType.INBOX_LOADED, "Inbox refreshed", count=len(self.messages))
        return True

    ## Selection

    def move_selection(self, delta: int) -> None:
        if self.loading:
            return
        self.selected = self._clamp(self.selected + delta)

    def selected_message(self) -> Optional[Message]:
        if 0 <= self.selected < len(self.messages):
            return self.messages[self.selected]
        return None

    def _clamp(self, index: int) -> int:
        if not self.messages:
            return 0
        return min(max(index, 0), len(self.messages) - 1)

    ## Sub-view protocol

    def update(self, event: Event) -> List[Task]:
        if isinstance(event, InboxLoaded):
            self.apply(event)
            return []

        if not isinstance(event, KeyPressed):
            return []

        if event.key is Key.NAVIGATE_UP:
            self.move_selection(-1)
        elif event.key is Key.NAVIGATE_DOWN:
            self.move_selection(1)
        elif event.key is Key.REFRESH:
            task = self.refresh()
            return [task] if task else []

        return []

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def status(self) -> str:
        if self.loading:
            return "loading…"
        if self.error is not None:
            return "refresh failed"
        count = len(self.messages)
        unread = sum(1 for message in self.messages if message.unread)
        label = "message" if count == 1 else "messages"
        if unread:
            return f"{count} {label}, {unread} unread"
        return f"{count} {label}"

    def render(self, now: Optional[datetime] = None) -> List[str]:
        if self.loading and not self.messages:
            return ["Loading..."]

        if not self.messages:
            return ["No messages"]

        start, end = self.visible_window()
        rows = []
        if start > 0:
            rows.append(f"  ↑ {start} more")
        for index in range(start, end):
            rows.append(self._format_row(index, now))
        if end < len(self.messages):
            rows.append(f"  ↓ {len(self.messages) - end} more")
        return rows

    def visible_window(self) -> Tuple[int, int]:
        """Index range ``[start, end)`` of rows shown around the selection."""
        count = len(self.messages)
        rows = max(self.height, 1)
        if count <= rows:
            return 0, count

        # Leave room for the scroll markers
        capacity = max(rows - 2, 1)
        start = self.selected - capacity // 2
        start = min(max(start, 0), count - capacity)
        return start, start + capacity

    def _format_row(self, index: int, now: Optional[datetime]) -> str:
        message = self.messages[index]
        pointer = ">" if index == self.selected else " "
        unread = "*" if message.unread else " "
        date = message.format_date(now)
        text = f"{pointer}{unread} {message.display_sender} - {message.subject}"
        room = self.width - len(date) - 2
        if room <= 10:
            return truncate(text, self.width)
        return f"{truncate(text, room).ljust(room)}  {date}"
