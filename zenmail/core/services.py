"""Capability interfaces the application consumes.

The UI never talks to a mail provider directly; it is handed objects that
satisfy these protocols. Concrete implementations live in
``zenmail.providers``.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

from .models import Message


@runtime_checkable
class MailService(Protocol):
    """Remote mailbox access."""

    async def list_inbox(self, limit: int) -> Sequence[Message]:
        """Newest ``limit`` inbox messages, newest first.

        Raises:
            TransportError: on any provider failure
        """
        ...

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text message.

        Raises:
            TransportError: on any provider failure
        """
        ...


class MessageDecoder(Protocol):
    """Turns a raw RFC 5322 message into a ``Message``.

    Implementations absorb body decoding problems and return an empty
    body rather than raising.
    """

    def decode(
        self, raw: bytes, message_id: str, flags: Optional[Sequence[str]] = None
    ) -> Message: ...


class Credentials(Protocol):
    """Source of the secret used to authenticate against the provider."""

    async def refresh(self) -> str:
        """Return a currently valid secret.

        Raises:
            AuthenticationError: if no valid secret can be produced
        """
        ...
