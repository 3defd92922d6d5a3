"""The text frame produced by one render cycle."""

from dataclasses import dataclass, field
from typing import List

# Header row, blank separator and key-hint row
CHROME_ROWS = 3


@dataclass(frozen=True)
class Frame:
    header: str
    body: List[str] = field(default_factory=list)
    footer: List[str] = field(default_factory=list)

    def lines(self) -> List[str]:
        return [self.header, *self.body, *self.footer]

    def text(self) -> str:
        return "\n".join(self.lines())
