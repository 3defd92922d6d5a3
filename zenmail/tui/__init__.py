"""Terminal application engine: controller, sub-views and the Textual host."""

from .controller import AppController, AppState, ViewMode

__all__ = ["AppController", "AppState", "ViewMode"]
