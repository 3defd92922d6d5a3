"""Command-line entry point: load settings, wire a provider, run the UI."""

import argparse
import asyncio
from typing import List, Optional

from rich.console import Console
from rich.prompt import Prompt

from zenmail.core.services import MailService
from zenmail.providers import (
    ImapSmtpMailService,
    KeyringCredentials,
    MemoryMailService,
    demo_messages,
)
from zenmail.tui.app import ZenMailApp
from zenmail.tui.controller import AppController
from zenmail.utils.config import ConfigManager
from zenmail.utils.errors import (
    MissingConfigError,
    ZenMailError,
    format_error_message,
)
from zenmail.utils.logging import EventType, get_logger, init_logging, log_event

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return number


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="zenmail",
        description="Terminal email client - read the inbox, reply and compose.",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use a built-in sample inbox instead of a mail server",
    )
    parser.add_argument("--config", help="Path to the JSON configuration file")
    parser.add_argument(
        "--limit", type=positive_int, help="Number of inbox messages to load"
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Log file verbosity (default from config)",
    )
    parser.add_argument(
        "--set-password",
        action="store_true",
        help="Store the account password in the system keyring and exit",
    )
    return parser


async def build_service(config_manager: ConfigManager, demo: bool) -> MailService:
    """Create the mail provider; real accounts need a stored password."""
    if demo:
        logger.info("Starting in demo mode")
        return MemoryMailService(demo_messages())

    account = config_manager.config.account
    if not account.email:
        raise MissingConfigError(
            f"No account configured; edit {config_manager.path} or use --demo"
        )

    password = await KeyringCredentials(account.email).refresh()
    return ImapSmtpMailService(account, password)


async def store_password(config_manager: ConfigManager, console: Console) -> int:
    account = config_manager.config.account
    if not account.email:
        raise MissingConfigError(
            f"Set account.email in {config_manager.path} before storing a password"
        )

    secret = Prompt.ask(f"Password for {account.email}", password=True, console=console)
    if not secret:
        console.print("[yellow]No password entered; nothing stored[/yellow]")
        return 1

    await KeyringCredentials(account.email).store(secret)
    console.print(f"[green]Password stored for {account.email}[/green]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code
    """
    console = Console()
    args = setup_argument_parser().parse_args(argv)

    try:
        config_manager = ConfigManager(args.config)
        log_level = args.log_level or config_manager.config.logging.log_level
        init_logging(log_level, console=True)

        if args.set_password:
            return asyncio.run(store_password(config_manager, console))

        demo = args.demo or config_manager.config.ui.demo_mode
        service = asyncio.run(build_service(config_manager, demo))

    except ZenMailError as e:
        logger.error(f"Startup failed: {e.message}")
        console.print(f"[red]Error: {format_error_message(e)}[/red]")
        return 1

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130  # Standard SIGINT exit code

    limit = args.limit or config_manager.config.ui.inbox_limit
    controller = AppController(service, inbox_limit=limit)

    # The full-screen UI owns the terminal from here on
    init_logging(log_level, console=False)
    log_event(EventType.APP_START, "ZenMail started", demo=demo, inbox_limit=limit)

    ZenMailApp(controller).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
