"""
Shared test fixtures and configuration for pytest
"""
import os
import tempfile

# Logs and config must never touch the real home directory
os.environ.setdefault("ZENMAIL_HOME", tempfile.mkdtemp(prefix="zenmail-tests-"))

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402

from zenmail.core.events import InboxLoaded, Resized  # noqa: E402
from zenmail.providers.memory import MemoryMailService  # noqa: E402
from zenmail.tui.controller import AppController  # noqa: E402

from test_helpers import MessageTestHelper  # noqa: E402

NOW = datetime(2025, 10, 2, 12, 0)


@pytest.fixture
def now():
    """Fixed reference time for date formatting"""
    return NOW


@pytest.fixture
def sample_message():
    """A single message with a two-line body"""
    return MessageTestHelper.create_message(
        sender="Alice Smith <alice@x.com>",
        subject="Hello",
        body="hi\nthere",
        date=datetime(2025, 10, 1, 9, 30),
    )


@pytest.fixture
def sample_messages():
    """Five messages, newest first"""
    return MessageTestHelper.create_messages(5, now=NOW)


@pytest.fixture
def service(sample_messages):
    """In-memory mail service holding the sample inbox"""
    return MemoryMailService(sample_messages)


@pytest.fixture
def empty_service():
    return MemoryMailService()


@pytest.fixture
def controller(service):
    """Controller sized to 80x24 with no inbox loaded yet"""
    app = AppController(service)
    app.handle_event(Resized(80, 24))
    return app


@pytest.fixture
def loaded_controller(controller, sample_messages):
    """Controller whose first inbox refresh has completed"""
    controller.start()
    controller.handle_event(InboxLoaded(messages=tuple(sample_messages)))
    return controller


@pytest.fixture
def config_path(tmp_path):
    """Path for a throwaway configuration file"""
    return tmp_path / "config.json"
