"""Email address and compose payload validation."""

from email.utils import parseaddr

from email_validator import EmailNotValidError, validate_email

from zenmail.utils.logging import get_logger

logger = get_logger(__name__)


class EmailValidator:
    """Validate email addresses"""

    @staticmethod
    def extract_address(value: str) -> str:
        """Address part of ``Name <addr>`` or the trimmed value itself."""
        if not value:
            return ""
        _, address = parseaddr(value.strip())
        return address or value.strip()

    @staticmethod
    def is_valid_email(email_address: str) -> bool:
        """Validate email address format (no DNS lookups)."""
        if not email_address or not isinstance(email_address, str):
            return False

        address = EmailValidator.extract_address(email_address)
        if "@" not in address:
            return False

        try:
            validate_email(address, check_deliverability=False)
        except EmailNotValidError as e:
            logger.debug(f"Rejected address: {e}")
            return False

        return True
