"""View mode tags."""

from enum import Enum


class ViewMode(Enum):
    LIST = "Inbox"
    READER = "Reading"
    COMPOSE = "Compose"

    @property
    def title(self) -> str:
        return self.value
