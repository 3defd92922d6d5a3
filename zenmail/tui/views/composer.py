"""Three-field compose form whose body is a hand-rolled multi-line editor."""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from zenmail.core.compose import Submission, prepare_reply_subject, reply_body_lines
from zenmail.core.events import Event, Key, KeyPressed, SendFinished, Task
from zenmail.core.models import Message
from zenmail.core.services import MailService
from zenmail.core.text_buffer import TextBuffer
from zenmail.utils.errors import ErrorHandler, ValidationError, ZenMailError
from zenmail.utils.logging import EventType, get_logger, log_event

from ..text import cursor_window, truncate

logger = get_logger(__name__)

_form_ids = itertools.count(1)

LABEL_WIDTH = 10
MIN_BODY_ROWS = 3
# To, Subject, blank separator, "Message:" label and the status line
FORM_CHROME_ROWS = 5


class Field(Enum):
    TO = "To"
    SUBJECT = "Subject"
    BODY = "Body"

    def next(self) -> "Field":
        order = list(Field)
        return order[(order.index(self) + 1) % len(order)]

    def previous(self) -> "Field":
        order = list(Field)
        return order[(order.index(self) - 1) % len(order)]


class Outcome(Enum):
    PENDING = "pending"
    SENT = "sent"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class ComposeForm:
    """Recipient, subject and body buffers plus focus and outcome."""

    to: TextBuffer = field(default_factory=TextBuffer)
    subject: TextBuffer = field(default_factory=TextBuffer)
    body: TextBuffer = field(default_factory=TextBuffer)
    focus: Field = Field.TO
    outcome: Outcome = Outcome.PENDING
    error: Optional[ZenMailError] = None
    sending: bool = False
    form_id: int = field(default_factory=lambda: next(_form_ids))

    @classmethod
    def blank(cls) -> "ComposeForm":
        return cls()

    @classmethod
    def reply_to(cls, original: Message) -> "ComposeForm":
        form = cls(
            to=TextBuffer(original.sender),
            subject=TextBuffer(prepare_reply_subject(original.subject)),
            body=TextBuffer.from_lines(reply_body_lines(original)),
            focus=Field.BODY,
        )
        form.to.move_to_end_of_text()
        form.subject.move_to_end_of_text()
        return form

    @property
    def reason(self) -> Optional[str]:
        """Failure description when ``outcome`` is FAILED."""
        if self.outcome is Outcome.FAILED and self.error is not None:
            return self.error.message
        return None

    @property
    def is_finished(self) -> bool:
        return self.outcome in (Outcome.SENT, Outcome.CANCELLED)

    def buffer(self, which: Optional[Field] = None) -> TextBuffer:
        buffers: Dict[Field, TextBuffer] = {
            Field.TO: self.to,
            Field.SUBJECT: self.subject,
            Field.BODY: self.body,
        }
        return buffers[which or self.focus]

    def submission(self) -> Submission:
        return Submission.from_fields(self.to.text, self.subject.text, self.body.lines)

    def fail(self, error: ZenMailError) -> None:
        self.sending = False
        self.outcome = Outcome.FAILED
        self.error = error


class ComposerView:
    """Editing -> sending -> sent | failed, with cancel from any idle state.

    Every keystroke is ignored while a send is in flight; only the matching
    ``SendFinished`` is accepted then.
    """

    def __init__(self, service: MailService):
        self.service = service
        self.form = ComposeForm.blank()
        self.width = 80
        self.height = 20
        self._unreported: Optional[ZenMailError] = None

    ## Session lifecycle

    def start(self, form: ComposeForm) -> List[Task]:
        """Begin a compose session with ``form``; returns its start-up tasks."""
        self.form = form
        self._unreported = None
        logger.debug(f"Compose session {form.form_id} started")
        return []

    def close(self) -> None:
        """Discard the current form."""
        logger.debug(f"Compose session {self.form.form_id} closed ({self.form.outcome.value})")
        self.form = ComposeForm.blank()
        self._unreported = None

    @property
    def is_sending(self) -> bool:
        return self.form.sending

    def consume_error(self) -> Optional[ZenMailError]:
        """Return a failure raised since the last call, once."""
        error, self._unreported = self._unreported, None
        return error

    ## Sub-view protocol

    def update(self, event: Event) -> List[Task]:
        if isinstance(event, SendFinished):
            self.apply(event)
            return []

        if not isinstance(event, KeyPressed) or self.form.sending:
            return []

        key = event.key
        if key is Key.CANCEL:
            self.form.outcome = Outcome.CANCELLED
        elif key is Key.SUBMIT:
            return self.submit()
        elif key is Key.NEXT_FIELD:
            self.focus(self.form.focus.next())
        elif key is Key.PREVIOUS_FIELD:
            self.focus(self.form.focus.previous())
        elif key is Key.ENTER:
            self._enter()
        elif key is Key.BACKSPACE:
            self._backspace()
        elif key is Key.CHARACTER:
            self._insert(event.char or "")
        else:
            self._move(key)

        return []

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def status(self) -> str:
        if self.form.sending:
            return "sending…"
        if self.form.outcome is Outcome.FAILED:
            return "not sent"
        return self.form.focus.value

    ## Focus and editing

    def focus(self, target: Field) -> None:
        self.form.focus = target
        self.form.buffer().move_to_end_of_text()

    def _enter(self) -> None:
        if self.form.focus is not Field.BODY:
            self.focus(self.form.focus.next())
            return

        body = self.form.body
        line, column = body.cursor
        body.split_line(line, column)

    def _backspace(self) -> None:
        buffer = self.form.buffer()
        line, column = buffer.cursor
        if column > 0:
            buffer.delete_at(line, column - 1)
        elif self.form.focus is Field.BODY and line > 0:
            buffer.join_line(line - 1)

    def _insert(self, char: str) -> None:
        # Named keys such as "tab" or "f5" never become text
        if len(char) != 1 or not char.isprintable():
            return
        buffer = self.form.buffer()
        line, column = buffer.cursor
        buffer.insert_at(line, column, char)

    def _move(self, key: Key) -> None:
        buffer = self.form.buffer()
        if key is Key.LEFT:
            buffer.move_left()
        elif key is Key.RIGHT:
            buffer.move_right()
        elif key is Key.HOME:
            buffer.move_home()
        elif key is Key.END:
            buffer.move_end()
        elif self.form.focus is Field.BODY and key is Key.UP:
            buffer.move_up()
        elif self.form.focus is Field.BODY and key is Key.DOWN:
            buffer.move_down()

    ## Submission

    def submit(self) -> List[Task]:
        """Validate and, if the payload is sound, start sending it."""
        submission = self.form.submission()

        try:
            submission.validate()
        except ValidationError as e:
            logger.info(f"Compose validation failed: {e.message}")
            self.form.fail(e)
            self._unreported = e
            return []

        self.form.sending = True
        self.form.outcome = Outcome.PENDING
        self.form.error = None
        form_id = self.form.form_id

        async def send() -> SendFinished:
            try:
                await self.service.send(
                    submission.recipient, submission.subject, submission.body
                )
            except Exception as e:
                return SendFinished(form_id, ErrorHandler.as_transport_error(e, "send"))
            return SendFinished(form_id)

        return [Task("send-message", send)]

    def apply(self, event: SendFinished) -> bool:
        """Fold a send completion into the live form; False if stale."""
        if event.form_id != self.form.form_id or not self.form.sending:
            logger.debug(f"Ignoring stale send result for form {event.form_id}")
            return False

        if event.error is not None:
            log_event(
                EventType.SEND_FAILED,
                f"Send failed: {event.error.message}",
                level="WARNING",
                form_id=event.form_id,
                category=event.error.category.value,
            )
            self.form.fail(event.error)
            self._unreported = event.error
            return True

        self.form.sending = False
        self.form.outcome = Outcome.SENT
        log_event(EventType.MESSAGE_SENT, "Message sent", form_id=self.form.form_id)
        return True

    ## Rendering

    def render(self) -> List[str]:
        if self.form.sending:
            return ["", "✉ Sending..."]

        rows = [
            self._render_field("To:", Field.TO),
            self._render_field("Subject:", Field.SUBJECT),
            "",
            "Message:",
        ]
        rows.extend(self._render_body())
        if self.form.reason:
            rows.append(truncate(f"✗ Not sent: {self.form.reason}", self.width))
        else:
            rows.append("")
        return rows

    def _render_field(self, label: str, which: Field) -> str:
        buffer = self.form.buffer(which)
        text = buffer.text
        if self.form.focus is which:
            text = cursor_window(text, buffer.cursor[1], self.width - LABEL_WIDTH)
        return truncate(f"{label:<{LABEL_WIDTH}}{text}", self.width)

    def body_rows(self) -> int:
        return max(self.height - FORM_CHROME_ROWS, MIN_BODY_ROWS)

    def _render_body(self) -> List[str]:
        body = self.form.body
        rows = self.body_rows()
        cursor_line, cursor_column = body.cursor
        # Scroll just enough to keep the cursor line on screen
        top = max(0, cursor_line - rows + 1)

        lines = []
        for index in range(top, min(top + rows, body.line_count())):
            line = body.line_at(index)
            if self.form.focus is Field.BODY and index == cursor_line:
                lines.append(cursor_window(line, cursor_column, self.width))
            else:
                lines.append(truncate(line, self.width))
        return lines
