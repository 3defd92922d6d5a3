"""In-memory MailService for demo mode and tests."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from zenmail.core.models import Message
from zenmail.utils.errors import TransportError
from zenmail.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SentMessage:
    to: str
    subject: str
    body: str


class MemoryMailService:
    """Serves a fixed inbox and records sends in ``outbox``.

    Set ``list_error`` or ``send_error`` to make the next calls fail with
    that exception; ``delay`` adds simulated latency in seconds.
    """

    def __init__(self, messages: Sequence[Message] = (), delay: float = 0.0):
        self.messages: List[Message] = list(messages)
        self.delay = delay
        self.outbox: List[SentMessage] = []
        self.list_error: Optional[Exception] = None
        self.send_error: Optional[Exception] = None
        self.list_calls = 0

    async def list_inbox(self, limit: int) -> Sequence[Message]:
        self.list_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.list_error is not None:
            raise self.list_error

        newest_first = sorted(self.messages, key=lambda m: m.date, reverse=True)
        return newest_first[: max(limit, 0)]

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.send_error is not None:
            raise self.send_error

        self.outbox.append(SentMessage(to, subject, body))
        logger.debug(f"Stored sent message {subject!r} in memory outbox")

    def deliver(self, message: Message) -> None:
        """Drop ``message`` into the inbox."""
        self.messages.append(message)

    def fail_next_list(self, message: str = "Simulated inbox failure") -> None:
        self.list_error = TransportError(message)

    def fail_next_send(self, message: str = "Simulated send failure") -> None:
        self.send_error = TransportError(message)

    def recover(self) -> None:
        self.list_error = None
        self.send_error = None


def demo_messages(now: Optional[datetime] = None) -> List[Message]:
    """A small, varied inbox for ``--demo``."""
    now = now or datetime.now().astimezone()

    samples = [
        (
            "Ada Lovelace <ada@analytical.org>",
            "Notes on the engine",
            timedelta(minutes=12),
            True,
            "Hello,\n\nI have finished annotating the translation. The notes\n"
            "are now longer than the original memoir, which I think is\n"
            "for the best.\n\nBest,\nAda",
        ),
        (
            "Grace Hopper <grace@navy.mil>",
            "Re: Compiler meeting",
            timedelta(hours=5),
            True,
            "Thursday works. Bring the nanoseconds.\n\n"
            "> Could we move the compiler meeting to Thursday?",
        ),
        (
            "build-bot@ci.acme.org",
            "Nightly build passed",
            timedelta(days=2),
            False,
            "All 312 checks passed on main.",
        ),
        (
            '"Linus T." <linus@kernel.org>',
            "Patch review",
            timedelta(days=9),
            False,
            "",
        ),
        (
            "Margaret Hamilton <margaret@apollo.space>",
            "Priority displays",
            timedelta(days=20),
            False,
            "\n".join(f"Line {n} of the restart procedure." for n in range(1, 41)),
        ),
    ]

    messages = []
    for index, (sender, subject, age, unread, body) in enumerate(samples, start=1):
        messages.append(
            Message(
                id=str(index),
                thread_id=f"thread-{index}",
                sender=sender,
                recipient="me@zenmail.local",
                subject=subject,
                date=now - age,
                body=body,
                unread=unread,
                snippet=" ".join(body.split())[:100],
            )
        )
    return messages
