"""Compose rules: reply seeding, subject clean-up and submission checks."""

import re
from dataclasses import dataclass
from typing import Iterable, List

from zenmail.utils.errors import InvalidEmailAddressError, MissingRequiredFieldError

from .models import Message
from .validation import EmailValidator

REPLY_PREFIX = "Re: "
FORWARD_PREFIX = "Fwd: "
QUOTE_PREFIX = "> "
ATTRIBUTION_DATE_FORMAT = "%a, %d %b %Y at %H:%M"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_SPACE_RUNS = re.compile(r" {2,}")


def sanitize_subject(subject: str) -> str:
    """Replace control characters with spaces, collapse runs, trim."""
    subject = _CONTROL_CHARS.sub(" ", subject)
    subject = _SPACE_RUNS.sub(" ", subject)
    return subject.strip()


def prepare_reply_subject(original_subject: str) -> str:
    subject = original_subject.strip()
    if subject.lower().startswith("re:"):
        return subject
    return REPLY_PREFIX + subject


def prepare_forward_subject(original_subject: str) -> str:
    subject = original_subject.strip()
    if subject.lower().startswith(("fwd:", "fw:")):
        return subject
    return FORWARD_PREFIX + subject


def attribution_line(message: Message) -> str:
    when = message.date.strftime(ATTRIBUTION_DATE_FORMAT)
    return f"On {when}, {message.display_sender} wrote:"


def reply_body_lines(message: Message) -> List[str]:
    """Body of a reply: two blank lines, attribution, blank, quoted original."""
    quoted = [
        QUOTE_PREFIX + line.rstrip("\r") for line in message.body.split("\n")
    ]
    return ["", "", attribution_line(message), ""] + quoted


@dataclass(frozen=True)
class Submission:
    """The payload handed to ``MailService.send``."""

    recipient: str
    subject: str
    body: str

    @classmethod
    def from_fields(
        cls, recipient: str, subject: str, body_lines: Iterable[str]
    ) -> "Submission":
        return cls(
            recipient=recipient.strip(),
            subject=sanitize_subject(subject),
            body="\n".join(body_lines),
        )

    def validate(self) -> None:
        """Raise a ValidationError subclass describing the first problem."""
        if not self.recipient:
            raise MissingRequiredFieldError("Recipient (To) is required")

        if not EmailValidator.is_valid_email(self.recipient):
            raise InvalidEmailAddressError(f"Invalid email address: {self.recipient}")

        if not self.subject:
            raise MissingRequiredFieldError("Subject is required")

        if not self.body:
            raise MissingRequiredFieldError("Message body is required")
