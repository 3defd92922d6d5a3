"""Concrete collaborators that satisfy the ``zenmail.core.services`` protocols."""

from .credentials import KeyringCredentials
from .decoder import MimeMessageDecoder
from .imap_smtp import ImapSmtpMailService
from .memory import MemoryMailService, demo_messages

__all__ = [
    "KeyringCredentials",
    "MimeMessageDecoder",
    "ImapSmtpMailService",
    "MemoryMailService",
    "demo_messages",
]
