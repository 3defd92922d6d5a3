"""System keyring backed credentials."""

import asyncio

import keyring
from keyring.errors import KeyringError

from zenmail.utils.errors import FileSystemError, MissingCredentialsError
from zenmail.utils.logging import get_logger
from zenmail.utils.paths import KEYRING_SERVICE

logger = get_logger(__name__)


class KeyringCredentials:
    """The account password, stored under ``KEYRING_SERVICE`` in the keyring."""

    def __init__(self, account: str, service: str = KEYRING_SERVICE):
        self.account = account
        self.service = service

    async def refresh(self) -> str:
        """Return the stored password.

        Raises:
            MissingCredentialsError: if the keyring is unusable or empty
        """
        try:
            secret = await asyncio.to_thread(
                keyring.get_password, self.service, self.account
            )
        except KeyringError as e:
            logger.error(f"Keyring retrieval failed: {e}")
            raise MissingCredentialsError(
                "System keyring is unavailable", details={"account": self.account}
            ) from e

        if not secret:
            raise MissingCredentialsError(
                f"No password stored for {self.account}; run with --set-password",
                details={"account": self.account},
            )
        return secret

    async def store(self, secret: str) -> None:
        """Save ``secret`` for this account, replacing any previous value."""
        try:
            await asyncio.to_thread(
                keyring.set_password, self.service, self.account, secret
            )
        except KeyringError as e:
            raise FileSystemError(
                "Could not write to the system keyring",
                details={"account": self.account, "error": str(e)},
            ) from e
        logger.info("Password stored in system keyring")
