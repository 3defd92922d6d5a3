"""MailService backed by an IMAP mailbox and an SMTP submission server."""

import asyncio
import re
import time
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import List, Optional, Sequence, Tuple

import aioimaplib
import aiosmtplib

from zenmail.core.models import Message
from zenmail.core.services import MessageDecoder
from zenmail.utils.config import AccountConfig
from zenmail.utils.errors import (
    IMAPError,
    InvalidCredentialsError,
    MissingConfigError,
    NetworkTimeoutError,
    SMTPError,
)
from zenmail.utils.logging import async_log_call, get_logger

from .decoder import MimeMessageDecoder

logger = get_logger(__name__)

INBOX = "INBOX"
OK = "OK"
IMPLICIT_TLS_PORT = 465

_FLAGS = re.compile(rb"FLAGS \(([^)]*)\)")


class Timeouts:
    """Timeout values for provider operations (in seconds)."""

    IMAP_LOGIN = 30.0
    IMAP_SELECT = 10.0
    IMAP_SEARCH = 30.0
    IMAP_FETCH = 30.0  # per message
    IMAP_LOGOUT = 5.0
    SMTP_SEND = 60.0  # can be slow for large messages


def parse_fetch_response(lines: Sequence) -> Tuple[Optional[bytes], List[str]]:
    """Pull the literal message bytes and the flag list out of a FETCH reply.

    aioimaplib hands the RFC822 literal back as a ``bytearray`` between the
    ``* n FETCH (...`` line and the closing parenthesis.
    """
    raw = None
    flags: List[str] = []

    for line in lines:
        if isinstance(line, bytearray):
            if raw is None:
                raw = bytes(line)
            continue

        if isinstance(line, str):
            line = line.encode()
        match = _FLAGS.search(line)
        if match:
            flags = match.group(1).decode("ascii", errors="ignore").split()

    return raw, flags


class ImapSmtpMailService:
    """Fresh connection per call; no caching, no retries."""

    def __init__(
        self,
        account: AccountConfig,
        password: str,
        decoder: Optional[MessageDecoder] = None,
    ):
        if not account.imap_server or not account.smtp_server or not account.email:
            raise MissingConfigError(
                "Account is missing its email address or server names",
                details={"email": account.email},
            )

        self.account = account
        self._password = password
        self.decoder = decoder or MimeMessageDecoder()

    ## Listing

    @async_log_call
    async def list_inbox(self, limit: int) -> Sequence[Message]:
        start = time.time()
        client = aioimaplib.IMAP4_SSL(
            host=self.account.imap_server,
            port=self.account.imap_port,
            timeout=self.account.network_timeout,
        )

        try:
            await asyncio.wait_for(
                client.wait_hello_from_server(), timeout=Timeouts.IMAP_LOGIN
            )
            await self._login(client)
            await self._select(client, INBOX)
            uids = await self._search_all(client)

            messages = []
            # UIDs ascend with arrival, so the newest come last
            for uid in reversed(uids[-limit:] if limit > 0 else []):
                message = await self._fetch(client, uid)
                if message is not None:
                    messages.append(message)

        except asyncio.TimeoutError as e:
            raise NetworkTimeoutError(
                "IMAP operation timed out",
                details={"server": self.account.imap_server},
            ) from e

        except OSError as e:
            raise IMAPError(
                f"Could not reach {self.account.imap_server}: {e}",
                details={"server": self.account.imap_server},
            ) from e

        finally:
            await self._logout(client)

        logger.info(
            "Inbox listed",
            extra={
                "count": len(messages),
                "duration_seconds": round(time.time() - start, 2),
            },
        )
        return messages

    async def _login(self, client) -> None:
        response = await asyncio.wait_for(
            client.login(self.account.login, self._password),
            timeout=Timeouts.IMAP_LOGIN,
        )
        if response.result != OK:
            raise InvalidCredentialsError(
                "IMAP login rejected",
                details={"server": self.account.imap_server},
            )

    async def _select(self, client, folder: str) -> None:
        response = await asyncio.wait_for(
            client.select(folder), timeout=Timeouts.IMAP_SELECT
        )
        self._check_response(response, f"select {folder}")

    async def _search_all(self, client) -> List[str]:
        response = await asyncio.wait_for(
            client.uid_search("ALL"), timeout=Timeouts.IMAP_SEARCH
        )
        self._check_response(response, "search")

        # Space-separated UIDs arrive on the first line
        first = response.lines[0] if response.lines else b""
        if isinstance(first, str):
            first = first.encode()
        return [uid.decode() for uid in first.split() if uid.isdigit()]

    async def _fetch(self, client, uid: str) -> Optional[Message]:
        response = await asyncio.wait_for(
            client.uid("fetch", uid, "(FLAGS RFC822)"), timeout=Timeouts.IMAP_FETCH
        )
        self._check_response(response, f"fetch {uid}")

        raw, flags = parse_fetch_response(response.lines)
        if raw is None:
            logger.warning(f"No message body in FETCH reply for UID {uid}")
            return None

        return self.decoder.decode(raw, uid, flags)

    async def _logout(self, client) -> None:
        try:
            await asyncio.wait_for(client.logout(), timeout=Timeouts.IMAP_LOGOUT)
        except (
            asyncio.TimeoutError,
            OSError,
            aioimaplib.Abort,
            aioimaplib.CommandTimeout,
        ) as e:
            logger.debug(f"IMAP logout failed: {e}")

    def _check_response(self, response, operation: str) -> None:
        if response.result == OK:
            return

        detail = response.lines[0] if response.lines else "No response"
        if isinstance(detail, (bytes, bytearray)):
            detail = detail.decode(errors="replace")

        raise IMAPError(
            f"IMAP operation failed: {operation}",
            details={
                "response": str(detail),
                "operation": operation,
                "server": self.account.imap_server,
            },
        )

    ## Sending

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.account.email
        message["To"] = to
        message["Subject"] = subject
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        return message

    @async_log_call
    async def send(self, to: str, subject: str, body: str) -> None:
        message = self.build_message(to, subject, body)
        implicit_tls = self.account.smtp_port == IMPLICIT_TLS_PORT

        logger.info("Sending email", extra={"subject": subject[:50]})

        try:
            await aiosmtplib.send(
                message,
                hostname=self.account.smtp_server,
                port=self.account.smtp_port,
                username=self.account.login,
                password=self._password,
                use_tls=implicit_tls,
                start_tls=self.account.smtp_starttls and not implicit_tls,
                timeout=Timeouts.SMTP_SEND,
            )

        except aiosmtplib.SMTPAuthenticationError as e:
            raise InvalidCredentialsError(
                "SMTP login rejected", details={"server": self.account.smtp_server}
            ) from e

        except (aiosmtplib.SMTPTimeoutError, asyncio.TimeoutError) as e:
            raise NetworkTimeoutError(
                "SMTP send operation timed out",
                details={"server": self.account.smtp_server},
            ) from e

        except aiosmtplib.SMTPException as e:
            raise SMTPError(
                f"Failed to send email: {e}",
                details={"server": self.account.smtp_server},
            ) from e

        except OSError as e:
            raise SMTPError(
                f"Could not reach {self.account.smtp_server}: {e}",
                details={"server": self.account.smtp_server},
            ) from e

        logger.info("Email sent successfully")
