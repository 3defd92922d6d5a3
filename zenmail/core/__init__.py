"""Domain layer: messages, the text buffer, compose rules and capabilities."""

from .models import Message
from .text_buffer import TextBuffer

__all__ = ["Message", "TextBuffer"]
