"""Raw RFC 5322 bytes to ``Message``."""

import email
import html
import re
from datetime import datetime
from email import policy
from email.header import decode_header, make_header
from email.message import EmailMessage
from email.utils import parsedate_to_datetime
from typing import Optional, Sequence

from zenmail.core.models import Message
from zenmail.utils.errors import DecodeError
from zenmail.utils.logging import get_logger

logger = get_logger(__name__)

SEEN_FLAG = "\\Seen"
SNIPPET_LENGTH = 100

_TAG = re.compile(r"<[^>]+>")
_BLOCK_END = re.compile(r"</?(br|p|div|tr|li|h[1-6])\b[^>]*>", re.IGNORECASE)
_INVISIBLE = re.compile(r"<(script|style)\b.*?</\1>", re.IGNORECASE | re.DOTALL)
_BLANK_RUNS = re.compile(r"\n{3,}")


def decode_email_header(value) -> str:
    """Decode an RFC 2047 header value, falling back to the raw text."""
    if not value:
        return ""

    try:
        return str(make_header(decode_header(str(value))))
    except (UnicodeDecodeError, LookupError, ValueError):
        return str(value)


def parse_email_date(value) -> datetime:
    """Parse an RFC 2822 date; unparsable or missing dates become now."""
    if value:
        try:
            return parsedate_to_datetime(str(value))
        except (TypeError, ValueError, IndexError):
            logger.debug(f"Unparsable date header: {value!r}")
    return datetime.now().astimezone()


def html_to_text(markup: str) -> str:
    """Crude HTML flattening: drop scripts and tags, unescape entities."""
    text = _INVISIBLE.sub("", markup)
    text = _BLOCK_END.sub("\n", text)
    text = _TAG.sub("", text)
    text = html.unescape(text)
    lines = [line.rstrip() for line in text.splitlines()]
    return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()


class MimeMessageDecoder:
    """Decode raw messages with the stdlib ``email`` package.

    Header problems degrade to raw text and body problems to an empty
    body; ``decode`` never raises for malformed content.
    """

    def decode(
        self, raw: bytes, message_id: str, flags: Optional[Sequence[str]] = None
    ) -> Message:
        parsed = email.message_from_bytes(raw, policy=policy.default)

        try:
            body = self._extract_body(parsed)
        except DecodeError as e:
            logger.warning(f"Message {message_id}: {e.message}", extra=e.details)
            body = ""

        flags = flags or ()
        thread_id = (
            parsed.get("In-Reply-To") or parsed.get("Message-ID") or message_id
        )

        return Message(
            id=message_id,
            thread_id=str(thread_id).strip(),
            sender=decode_email_header(parsed.get("From")),
            recipient=decode_email_header(parsed.get("To")),
            subject=decode_email_header(parsed.get("Subject")),
            date=parse_email_date(parsed.get("Date")),
            body=body,
            unread=SEEN_FLAG not in flags,
            snippet=" ".join(body.split())[:SNIPPET_LENGTH],
            labels=tuple(flag for flag in flags if not flag.startswith("\\")),
        )

    def _extract_body(self, parsed: EmailMessage) -> str:
        """Plain text preferred; HTML flattened when it is the only option.

        Raises:
            DecodeError: if the chosen part cannot be decoded
        """
        part = parsed.get_body(preferencelist=("plain", "html"))
        if part is None:
            return ""

        try:
            content = part.get_content()
        except (LookupError, UnicodeError, ValueError, AssertionError) as e:
            raise DecodeError(
                "Failed to decode message body",
                details={"content_type": part.get_content_type(), "error": str(e)},
            ) from e

        if isinstance(content, bytes):
            charset = part.get_content_charset() or "utf-8"
            content = content.decode(charset, errors="replace")

        if part.get_content_type() == "text/html":
            return html_to_text(content)
        return content.replace("\r\n", "\n")
