"""
Immutable snapshot of one view.tree document.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..indexing.index_builder import read_source
from ..syntax.models import Node
from ..syntax.parser import parse


@dataclass(frozen=True)
class TextDocument:
    """A document's path, text and parse tree, taken at one point in time."""
    path: str
    text: str
    root: Node = field(compare=False, repr=False)

    @classmethod
    def from_text(cls, path: str, text: str) -> 'TextDocument':
        return cls(path, text, parse(text))

    @classmethod
    def from_path(cls, path: str, content: Optional[str] = None) -> 'TextDocument':
        """Load from disk unless unsaved content is supplied."""
        if content is None:
            content = read_source(path)
        return cls.from_text(path, content)

    @property
    def lines(self) -> List[str]:
        return self.root.lines

    def line_at(self, line: int) -> str:
        return self.lines[line] if 0 <= line < len(self.lines) else ''
