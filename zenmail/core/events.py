"""Events delivered to the application and the tasks that produce them."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple, Union

from zenmail.utils.errors import ZenMailError

from .models import Message


class Key(str, Enum):
    """Logical keys; physical bindings live in ``zenmail.tui.keymap``."""

    QUIT = "quit"
    ESCAPE = "escape"
    COMPOSE = "compose"
    REPLY = "reply"
    OPEN = "open"
    REFRESH = "refresh"
    NAVIGATE_UP = "navigate-up"
    NAVIGATE_DOWN = "navigate-down"
    NEXT_FIELD = "next-field"
    PREVIOUS_FIELD = "previous-field"
    SUBMIT = "submit"
    CANCEL = "cancel"
    SCROLL_UP = "scroll-up"
    SCROLL_DOWN = "scroll-down"
    PAGE_UP = "page-up"
    PAGE_DOWN = "page-down"
    CHARACTER = "character"
    ENTER = "enter"
    BACKSPACE = "backspace"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"


@dataclass(frozen=True)
class KeyPressed:
    key: Key
    char: Optional[str] = None

    def __post_init__(self):
        if self.key is Key.CHARACTER and not self.char:
            raise ValueError("CHARACTER key presses need a char")


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class InboxLoaded:
    """Completion of a list refresh."""

    messages: Tuple[Message, ...] = ()
    error: Optional[ZenMailError] = None


@dataclass(frozen=True)
class SendFinished:
    """Completion of a send; ``form_id`` names the form that started it."""

    form_id: int
    error: Optional[ZenMailError] = None


Event = Union[KeyPressed, Resized, InboxLoaded, SendFinished]


@dataclass(frozen=True)
class Task:
    """Detached asynchronous work whose result comes back as an event.

    ``run`` must not raise: failures are reported inside the returned
    completion event.
    """

    name: str
    run: Callable[[], Awaitable[Event]] = field(compare=False)


def char(ch: str) -> KeyPressed:
    """Shorthand for a printed character key press."""
    return KeyPressed(Key.CHARACTER, ch)
