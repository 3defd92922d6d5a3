"""Central dispatcher: owns the view mode, routes events, renders frames."""

from dataclasses import dataclass, field
from typing import List, Optional

from zenmail.core.events import (
    Event,
    InboxLoaded,
    Key,
    KeyPressed,
    Resized,
    SendFinished,
    Task,
)
from zenmail.core.services import MailService
from zenmail.utils.errors import ZenMailError, format_error_message
from zenmail.utils.logging import EventType, get_logger, log_event

from .frame import CHROME_ROWS, Frame
from .keymap import HINTS, RETRY_HINTS
from .modes import ViewMode
from .text import truncate
from .views.base import SubView
from .views.composer import ComposeForm, ComposerView, Outcome
from .views.list_view import DEFAULT_INBOX_LIMIT, ListView
from .views.reader import ReaderView

logger = get_logger(__name__)

# Keys that retry the failed operation instead of just dismissing its error
RETRY_KEYS = {
    ViewMode.LIST: Key.REFRESH,
    ViewMode.COMPOSE: Key.SUBMIT,
}


@dataclass
class AppState:
    """Everything the application knows; mutated only by ``AppController``."""

    list_view: ListView
    reader_view: ReaderView
    composer_view: ComposerView
    mode: ViewMode = ViewMode.LIST
    # Only meaningful while mode is READER or COMPOSE
    previous_mode: Optional[ViewMode] = None
    width: int = 0
    height: int = 0
    ready: bool = False
    running: bool = True
    last_error: Optional[ZenMailError] = None
    views: dict = field(init=False, repr=False)

    def __post_init__(self):
        self.views = {
            ViewMode.LIST: self.list_view,
            ViewMode.READER: self.reader_view,
            ViewMode.COMPOSE: self.composer_view,
        }

    @property
    def active_view(self) -> SubView:
        return self.views[self.mode]

    @property
    def content_height(self) -> int:
        return max(self.height - CHROME_ROWS, 0)


class AppController:
    """Single-threaded state machine behind the terminal UI.

    ``handle_event`` is the only entry point that changes state. It runs
    one event to completion and hands back the asynchronous tasks the
    host must start; each task's result comes back later as another event.
    """

    def __init__(self, service: MailService, inbox_limit: int = DEFAULT_INBOX_LIMIT):
        self.service = service
        self.state = AppState(
            list_view=ListView(service, limit=inbox_limit),
            reader_view=ReaderView(),
            composer_view=ComposerView(service),
        )

    def start(self) -> List[Task]:
        """Tasks to run at start-up: the first inbox load."""
        task = self.state.list_view.refresh()
        return [task] if task else []

    ## Event handling

    def handle_event(self, event: Event) -> List[Task]:
        if isinstance(event, Resized):
            self._resize(event.width, event.height)
            return []

        if isinstance(event, InboxLoaded):
            return self._inbox_loaded(event)

        if isinstance(event, SendFinished):
            return self._send_finished(event)

        if isinstance(event, KeyPressed):
            return self._key_pressed(event)

        logger.warning(f"Unhandled event type: {type(event).__name__}")
        return []

    def _resize(self, width: int, height: int) -> None:
        state = self.state
        state.width = width
        state.height = height
        state.ready = True
        for view in state.views.values():
            view.resize(width, state.content_height)

    def _inbox_loaded(self, event: InboxLoaded) -> List[Task]:
        if not self.state.list_view.apply(event):
            return []

        # Errors render in place of the inbox only; elsewhere the list keeps them
        if self.state.mode is ViewMode.LIST:
            self.state.last_error = event.error
        return []

    def _send_finished(self, event: SendFinished) -> List[Task]:
        composer = self.state.composer_view
        if not composer.apply(event):
            return []

        error = composer.consume_error()
        if error is not None:
            self.state.last_error = error
            return []

        self.state.last_error = None
        if self.state.mode is ViewMode.COMPOSE:
            return self._after_compose()
        return []

    def _key_pressed(self, event: KeyPressed) -> List[Task]:
        state = self.state
        mode = state.mode
        key = event.key

        # Nothing may disturb a form while its message is in flight
        if mode is ViewMode.COMPOSE and state.composer_view.is_sending:
            return []

        if key is Key.QUIT:
            if mode is ViewMode.LIST:
                log_event(EventType.APP_QUIT, "Quit requested from inbox")
                state.running = False
                return []
            return self._go_back()

        if key is Key.ESCAPE and mode in (ViewMode.READER, ViewMode.COMPOSE):
            return self._go_back()

        if mode is ViewMode.LIST:
            if key is Key.COMPOSE:
                return self._enter_compose(ComposeForm.blank())

            if key is Key.REPLY:
                message = state.list_view.selected_message()
                if message is not None:
                    return self._enter_compose(ComposeForm.reply_to(message))
                return []

            if key is Key.OPEN:
                message = state.list_view.selected_message()
                if message is not None:
                    self._switch_to(ViewMode.READER)
                    state.reader_view.set_message(message)
                return []

        if state.last_error is not None:
            state.last_error = None
            if key is not RETRY_KEYS.get(mode):
                return []

        tasks = state.active_view.update(event)

        if mode is ViewMode.COMPOSE:
            error = state.composer_view.consume_error()
            if error is not None:
                state.last_error = error
            tasks.extend(self._after_compose())

        return tasks

    ## Mode transitions

    def _switch_to(self, mode: ViewMode) -> None:
        state = self.state
        state.previous_mode = state.mode
        state.mode = mode
        state.last_error = None
        logger.debug(f"Mode {state.previous_mode.name} -> {mode.name}")

    def _enter_compose(self, form: ComposeForm) -> List[Task]:
        self._switch_to(ViewMode.COMPOSE)
        return self.state.composer_view.start(form)

    def _go_back(self) -> List[Task]:
        state = self.state
        if state.mode is ViewMode.COMPOSE:
            state.composer_view.close()
        if state.mode is ViewMode.READER:
            state.reader_view.set_message(None)

        target = state.previous_mode or ViewMode.LIST
        logger.debug(f"Mode {state.mode.name} -> {target.name}")
        state.mode = target
        state.previous_mode = None
        state.last_error = None
        return []

    def _after_compose(self) -> List[Task]:
        """Leave Compose once the form is sent or cancelled."""
        form = self.state.composer_view.form
        if not form.is_finished:
            return []

        sent = form.outcome is Outcome.SENT
        self._go_back()

        if sent:
            task = self.state.list_view.refresh()
            return [task] if task else []
        return []

    ## Rendering

    def render(self) -> Frame:
        """Compose the frame for the current state; no side effects."""
        state = self.state
        if not state.ready:
            return Frame(header="Loading...")

        view = state.active_view
        status = view.status()
        header = state.mode.title + (f"  ·  {status}" if status else "")

        if state.last_error is not None:
            body = [
                truncate(f"Error: {format_error_message(state.last_error)}", state.width),
                "",
                RETRY_HINTS[state.mode],
            ]
        else:
            body = view.render()

        height = state.content_height
        body = body[:height] + [""] * (height - len(body))

        return Frame(
            header=truncate(header, state.width),
            body=body,
            footer=["", truncate(HINTS[state.mode], state.width)],
        )
