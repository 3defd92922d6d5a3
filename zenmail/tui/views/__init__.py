"""The three modal sub-views."""

from .base import SubView
from .composer import ComposeForm, ComposerView, Field, Outcome
from .list_view import ListView
from .reader import ReaderView

__all__ = [
    "SubView",
    "ListView",
    "ReaderView",
    "ComposerView",
    "ComposeForm",
    "Field",
    "Outcome",
]
