"""Email domain models"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Tuple

_ANGLE_ADDRESS = re.compile(r"<([^>]+)>")


@dataclass(frozen=True)
class Message:
    """A message as delivered by the provider; never mutated by the UI."""

    id: str
    thread_id: str
    sender: str
    recipient: str
    subject: str
    date: datetime
    body: str = ""
    unread: bool = False
    snippet: str = ""
    labels: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def display_sender(self) -> str:
        """Name part of ``Name <addr>``, or the raw sender."""
        if not self.sender:
            return "Unknown Sender"

        name, sep, _ = self.sender.partition("<")
        if sep:
            name = name.strip().strip('"').strip()
            if name:
                return name

        return self.sender

    @property
    def sender_address(self) -> str:
        """Bare address of the sender."""
        match = _ANGLE_ADDRESS.search(self.sender)
        if match:
            return match.group(1).strip()
        return self.sender.strip()

    def short_subject(self, max_length: int) -> str:
        """Subject truncated with an ellipsis to fit ``max_length``."""
        if len(self.subject) <= max_length:
            return self.subject
        if max_length <= 3:
            return self.subject[:max_length]
        return self.subject[: max_length - 3] + "..."

    def format_date(self, now: Optional[datetime] = None) -> str:
        """Human-readable date relative to ``now``."""
        if now is None:
            now = datetime.now(self.date.tzinfo)

        diff = now - self.date
        if diff < timedelta(hours=24):
            return self.date.strftime("%H:%M")
        elif diff < timedelta(days=7):
            return self.date.strftime("%a %H:%M")
        else:
            return self.date.strftime("%b %d")
