"""Textual host: feeds terminal events to the controller and paints its frames."""

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.message import Message
from textual.screen import Screen
from textual.widgets import Static

from zenmail.core.events import Event, Resized, Task
from zenmail.utils.logging import get_logger

from .controller import AppController
from .keymap import translate_key

logger = get_logger(__name__)


class TaskCompleted(Message):
    """Carries a finished task's completion event back onto the UI loop."""

    def __init__(self, event: Event):
        super().__init__()
        self.event = event


class FrameView(Static, can_focus=True):
    """Paints the controller's frame and forwards every key press to it."""

    DEFAULT_CSS = """
    FrameView {
        width: 100%;
        height: 100%;
    }
    """

    async def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.app.forward_key(event.key, event.character)


class MailScreen(Screen, inherit_bindings=False):
    """The single screen; it owns no bindings so tab reaches the composer."""

    def compose(self) -> ComposeResult:
        yield FrameView(id="frame")


class ZenMailApp(App, inherit_bindings=False):
    TITLE = "ZenMail"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, controller: AppController):
        super().__init__()
        self.controller = controller

    async def on_mount(self) -> None:
        await self.push_screen(MailScreen())
        self.feed(Resized(self.size.width, self.size.height))
        for task in self.controller.start():
            self.start_task(task)
        self.screen.query_one(FrameView).focus()

    ## Event plumbing

    def forward_key(self, key: str, character) -> None:
        """Translate a Textual key for the active mode and feed it."""
        pressed = translate_key(key, character, self.controller.state.mode)
        if pressed is None:
            return
        self.feed(pressed)

    def feed(self, event: Event) -> None:
        """Run one event through the controller, then start tasks and repaint."""
        for task in self.controller.handle_event(event):
            self.start_task(task)

        if not self.controller.state.running:
            self.exit()
            return

        self.redraw()

    def start_task(self, task: Task) -> None:
        async def runner() -> None:
            self.post_message(TaskCompleted(await task.run()))

        logger.debug(f"Starting task {task.name}")
        self.run_worker(runner(), name=task.name, group="mail", exit_on_error=False)

    def redraw(self) -> None:
        frames = self.screen.query(FrameView)
        if not frames:
            return
        frames.first().update(Text(self.controller.render().text()))

    ## Textual handlers

    def on_resize(self, event: events.Resize) -> None:
        self.feed(Resized(event.size.width, event.size.height))

    def on_task_completed(self, message: TaskCompleted) -> None:
        self.feed(message.event)
