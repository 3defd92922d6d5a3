"""Centralized error handling module."""

from enum import Enum
from typing import Any, Dict

from zenmail.utils.logging import get_logger

_logger = None


def _get_logger():
    """Get logger with lazy initialisation."""
    global _logger
    if _logger is None:
        _logger = get_logger(__name__)
    return _logger


## Error Categories


class ErrorCategory(Enum):
    """Categories of errors for better handling."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    DECODE = "decode"
    FILE_SYSTEM = "file_system"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


## Custom Exceptions


class ZenMailError(Exception):
    """Base exception for all zenmail errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise ZenMailError with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Transport Errors


class TransportError(ZenMailError):
    """Base exception for failed provider calls (network, auth, quota)."""

    category = ErrorCategory.NETWORK
    user_message = "A network error occurred"


class IMAPError(TransportError):
    """Exception for IMAP protocol errors."""

    user_message = "Failed to fetch messages from the mail server"


class SMTPError(TransportError):
    """Exception for SMTP protocol errors."""

    user_message = "Failed to send email"


class NetworkTimeoutError(TransportError):
    """Exception for network timeout errors."""

    user_message = "The connection timed out"


## Authentication Errors


class AuthenticationError(TransportError):
    """Base exception for authentication-related errors."""

    category = ErrorCategory.AUTHENTICATION
    user_message = "An authentication error occurred"


class InvalidCredentialsError(AuthenticationError):
    """Exception for invalid login credentials."""

    user_message = "Invalid email or password"


class MissingCredentialsError(AuthenticationError):
    """Exception for missing login credentials."""

    user_message = "Email credentials not configured"


## Validation Errors


class ValidationError(ZenMailError):
    """Base exception for compose payloads rejected before any network call."""

    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


class InvalidEmailAddressError(ValidationError):
    """Exception for invalid email addresses."""

    user_message = "Invalid email address"


class MissingRequiredFieldError(ValidationError):
    """Exception for missing required fields."""

    user_message = "A required field is missing"


## Decode Errors


class DecodeError(ZenMailError):
    """Exception for message content that could not be parsed."""

    category = ErrorCategory.DECODE
    user_message = "Failed to decode message"


## File System Errors


class FileSystemError(ZenMailError):
    """Base exception for file system-related errors."""

    category = ErrorCategory.FILE_SYSTEM
    user_message = "A file system error occurred"


## Configuration Errors


class ConfigurationError(ZenMailError):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class MissingConfigError(ConfigurationError):
    """Exception for missing configuration settings."""

    user_message = "Missing configuration settings"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Error Handler


class ErrorHandler:
    """Centralized error handling and logging."""

    @staticmethod
    def handle(
        error: Exception, context: str = "", log_traceback: bool = True
    ) -> Dict[str, Any]:
        """Handle errors with logging and user-friendly message."""
        if isinstance(error, ZenMailError):
            _get_logger().error(f"{context}: {error.message}", extra=error.details)
            if log_traceback:
                _get_logger().exception(error)
            return error.to_dict()
        else:
            _get_logger().error(f"{context}: {str(error)}")
            if log_traceback:
                _get_logger().exception(error)
            return {
                "error_type": "UnknownError",
                "category": ErrorCategory.UNKNOWN.value,
                "message": str(error),
                "details": {"context": context},
            }

    @staticmethod
    def as_transport_error(error: Exception, context: str = "") -> TransportError:
        """Coerce any provider failure into a TransportError.

        Errors that already belong to the transport family pass through
        unchanged so their category survives.
        """
        if isinstance(error, TransportError):
            return error

        ErrorHandler.handle(error, context, log_traceback=False)
        message = str(error) or error.__class__.__name__
        return TransportError(message, details={"context": context})


## Utility Functions


def format_error_message(error: Exception) -> str:
    """Format an error message for display."""
    if isinstance(error, ZenMailError):
        return error.message
    else:
        return "An unexpected error occurred - check logs for details."
