"""Logging for zenmail.

Everything hangs off the ``zenmail`` logger:

* ``app.log``: every record as one JSON object per line, rotated.
* ``events.log``: only records tagged with an :class:`EventType`, so the
  mail activity of a session (inbox loads, sends, failures) can be read
  without the debug noise.
* an optional Rich console handler for warnings, used before and after
  the full-screen UI but never while it owns the terminal.

Passwords, message bodies and mail addresses are masked before any
handler sees a record.
"""

import json
import logging
import re
from datetime import datetime, timezone
from enum import Enum
from functools import wraps
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, Union

from rich.logging import RichHandler

from .paths import LOGS_DIR

ROOT_LOGGER = "zenmail"
REDACTED = "[REDACTED]"

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class EventType(str, Enum):
    APP_START = "app_start"
    APP_QUIT = "app_quit"
    INBOX_LOADED = "inbox_loaded"
    INBOX_FAILED = "inbox_failed"
    MESSAGE_SENT = "message_sent"
    SEND_FAILED = "send_failed"


def record_data(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed through ``extra`` other than the event tag."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and key != "event_type"
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        event_type = getattr(record, "event_type", None)
        if event_type is not None:
            entry["event_type"] = str(getattr(event_type, "value", event_type))

        data = record_data(record)
        if data:
            entry["data"] = data

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


## Masking


class SensitiveDataMasker:
    """Hide credentials, message content and addresses in log output."""

    # key=value or key: value pairs, as they show up in provider errors
    SECRET_PATTERN = re.compile(
        r'((?:password|passwd|secret|token|authorization)["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)',
        re.IGNORECASE,
    )
    # An IMAP LOGIN command echoed in a server response
    IMAP_LOGIN_PATTERN = re.compile(r"(\bLOGIN\s+\S+\s+)(\S+)", re.IGNORECASE)
    EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

    SENSITIVE_FIELDS = {"password", "passwd", "secret", "token", "authorization", "body"}

    def mask_string(self, text: str) -> str:
        if not text or not isinstance(text, str):
            return text

        masked = self.SECRET_PATTERN.sub(lambda m: m.group(1) + REDACTED, text)
        masked = self.IMAP_LOGIN_PATTERN.sub(lambda m: m.group(1) + REDACTED, masked)
        return self.EMAIL_PATTERN.sub(lambda m: self.mask_email(m.group(0)), masked)

    def mask_value(self, key: str, value: Any) -> Any:
        if key.lower() in self.SENSITIVE_FIELDS:
            return REDACTED
        if isinstance(value, str):
            return self.mask_string(value)
        if isinstance(value, dict):
            return {k: self.mask_value(str(k), v) for k, v in value.items()}
        return value

    @staticmethod
    def mask_email(address: str) -> str:
        """``alice@example.com`` becomes ``a***@e***``."""
        username, _, domain = address.partition("@")
        masked_username = username[0] + "***" if len(username) > 1 else "***"
        return f"{masked_username}@{domain[0]}***"


class SensitiveDataFilter(logging.Filter):
    def __init__(self):
        super().__init__()
        self.masker = SensitiveDataMasker()

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.masker.mask_string(record.msg)

        for key, value in record_data(record).items():
            setattr(record, key, self.masker.mask_value(key, value))

        return True


## Log Manager


class LogManager:
    """Owns the handlers of the ``zenmail`` logger."""

    APP_LOG_BYTES = 5_242_880
    EVENT_LOG_BYTES = 2_048_000

    def __init__(self, log_level: str = "INFO", console: bool = True):
        self.log_level = self._level(log_level)
        self.console = console
        self.root_logger = logging.getLogger(ROOT_LOGGER)
        self.root_logger.setLevel(logging.DEBUG)
        self.root_logger.propagate = False
        self._setup_handlers()

    @staticmethod
    def _level(name: str) -> int:
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Invalid logging level: {name}")
        return level

    def _setup_handlers(self) -> None:
        from .errors import FileSystemError

        sensitive_filter = SensitiveDataFilter()

        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()

        # The full-screen UI draws on stdout, so the console is optional
        if self.console:
            console_handler = RichHandler(show_path=False, markup=False, rich_tracebacks=True)
            console_handler.setLevel(logging.WARNING)
            console_handler.addFilter(sensitive_filter)
            self.root_logger.addHandler(console_handler)

        try:
            LOGS_DIR.mkdir(parents=True, exist_ok=True)
            app_handler = RotatingFileHandler(
                LOGS_DIR / "app.log",
                maxBytes=self.APP_LOG_BYTES,
                backupCount=5,
                encoding="utf-8",
            )
            event_handler = RotatingFileHandler(
                LOGS_DIR / "events.log",
                maxBytes=self.EVENT_LOG_BYTES,
                backupCount=3,
                encoding="utf-8",
            )
        except OSError as e:
            raise FileSystemError(f"Failed to open log files in {LOGS_DIR}: {e}") from e

        app_handler.setLevel(self.log_level)
        app_handler.setFormatter(JSONFormatter())
        app_handler.addFilter(sensitive_filter)

        event_handler.setLevel(logging.INFO)
        event_handler.setFormatter(JSONFormatter())
        event_handler.addFilter(lambda record: hasattr(record, "event_type"))
        event_handler.addFilter(sensitive_filter)

        self.root_logger.addHandler(app_handler)
        self.root_logger.addHandler(event_handler)

    def log_event(
        self,
        event_type: Union[EventType, str],
        message: str,
        level: str = "INFO",
        **data,
    ) -> None:
        data["event_type"] = EventType(event_type)
        self.root_logger.log(self._level(level), message, extra=data)


## Decorators


def _timed(func_name: str, start: datetime) -> str:
    duration = (datetime.now() - start).total_seconds()
    return f"{func_name} ({duration:.3f}s)"


def log_call(func):
    """Log entry, exit and duration of a call at debug level."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        func_name = func.__qualname__
        logger.debug(f"-> {func_name}")
        start = datetime.now()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"<- {_timed(func_name, start)} raised {type(e).__name__}")
            raise
        logger.debug(f"<- {_timed(func_name, start)}")
        return result

    return wrapper


def async_log_call(func):
    """Coroutine version of :func:`log_call`, used around provider I/O."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        func_name = func.__qualname__
        logger.debug(f"-> {func_name} (async)")
        start = datetime.now()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"<- {_timed(func_name, start)} raised {type(e).__name__}")
            raise
        logger.debug(f"<- {_timed(func_name, start)}")
        return result

    return wrapper


## Module-level manager

_log_manager: Optional[LogManager] = None


def init_logging(log_level: str = "INFO", console: bool = True) -> LogManager:
    """Set up (or reconfigure) logging and return the manager.

    The CLI calls this twice: once with the console on for startup errors,
    then with it off just before the UI takes over the terminal.
    """
    global _log_manager

    if (
        _log_manager is None
        or _log_manager.console != console
        or _log_manager.log_level != LogManager._level(log_level)
    ):
        _log_manager = LogManager(log_level, console=console)

    return _log_manager


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if _log_manager is None:
        init_logging()
    if name and not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name or ROOT_LOGGER)


def log_event(event_type: Union[EventType, str], message: str, **data) -> None:
    if _log_manager is None:
        init_logging()
    _log_manager.log_event(event_type, message, **data)
