"""ZenMail - a distraction-free terminal email client."""

__version__ = "0.1.0"
