"""
Data models for parsed view.tree documents.

Editor coordinates (Position, Range, Location) are 0-based. Node spans are
1-based (line, column, length) and convert to editor coordinates through
``Span.start`` and ``Span.end``.
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ..constants import SIGIL


class NodeKind(Enum):
    """Syntactic role of a parsed node."""
    DOCUMENT = "document"
    COMPONENT_DECLARATION = "component-declaration"
    PROPERTY_DECLARATION = "property-declaration"
    BINDING_OPERATOR = "binding-operator"
    LIST_MARKER = "list-marker"
    DICT_MARKER = "dict-marker"
    STRING_LITERAL = "string-literal"
    PLAIN_TEXT = "plain-text"


@dataclass(frozen=True)
class Position:
    """Editor position: 0-based line and character."""
    line: int
    character: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    """Editor range between two positions."""
    start: Position
    end: Position

    @classmethod
    def at(cls, line: int = 0, character: int = 0) -> 'Range':
        """Empty range at a single position."""
        position = Position(line, character)
        return cls(position, position)

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> 'Range':
        return cls(Position(line, start), Position(line, end))

    def contains(self, position: Position) -> bool:
        if position.line < self.start.line or position.line > self.end.line:
            return False
        if position.line == self.start.line and position.character < self.start.character:
            return False
        if position.line == self.end.line and position.character > self.end.character:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Location:
    """A range inside a file identified by its absolute path."""
    path: str
    range: Range

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "range": self.range.to_dict()}


@dataclass(frozen=True)
class Span:
    """Token location; line and column are 1-based."""
    line: int
    column: int
    length: int

    @property
    def start(self) -> Position:
        return Position(self.line - 1, self.column - 1)

    @property
    def end(self) -> Position:
        return Position(self.line - 1, self.column - 1 + self.length)

    @property
    def range(self) -> Range:
        return Range(self.start, self.end)


@dataclass(frozen=True)
class Binding:
    """
    A binding expressed inline on a property row.

    ``start`` and ``end`` are the 0-based columns of the operator within its row.
    """
    operator: str
    start: int
    end: int
    left: str
    right: str


@dataclass
class StructuralError:
    """A recoverable structural problem found while parsing."""
    line: int  # 0-based
    message: str
    severity: str = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "message": self.message, "severity": self.severity}


@dataclass(eq=False)
class Node:
    """
    A parsed structural unit.

    The document root is synthetic (kind DOCUMENT, depth -1) and additionally
    carries the source rows and the structural errors found while parsing.
    """
    kind: NodeKind
    text: str
    span: Span
    indent_depth: int
    children: List['Node'] = field(default_factory=list)
    lines: List[str] = field(default_factory=list, repr=False)
    errors: List[StructuralError] = field(default_factory=list, repr=False)
    _parent_ref: Optional['weakref.ReferenceType[Node]'] = field(default=None, repr=False)

    @property
    def parent(self) -> Optional['Node']:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def is_root(self) -> bool:
        return self.kind is NodeKind.DOCUMENT

    def add_child(self, child: 'Node') -> 'Node':
        child._parent_ref = weakref.ref(self)
        self.children.append(child)
        return child

    def walk(self) -> Iterator['Node']:
        """Pre-order traversal in document order, excluding self when it is the root."""
        if not self.is_root:
            yield self
        for child in self.children:
            yield from child.walk()

    @property
    def row_head(self) -> 'Node':
        """The first node of the row this node sits on."""
        node = self
        parent = node.parent
        while parent is not None and not parent.is_root and parent.span.line == node.span.line:
            node = parent
            parent = node.parent
        return node

    @property
    def base_class(self) -> Optional[str]:
        """Base class named on a component declaration row, if any."""
        if self.kind is not NodeKind.COMPONENT_DECLARATION:
            return None
        for child in self.children:
            if child.span.line == self.span.line and child.text.startswith(SIGIL):
                return child.text
        return None

    @property
    def properties(self) -> List['Node']:
        """Property declarations directly under a component declaration."""
        return [child for child in self.children
                if child.kind is NodeKind.PROPERTY_DECLARATION and child.span.line != self.span.line]

    def components(self) -> List['Node']:
        """Component declarations at the top level of a document root."""
        return [child for child in self.children if child.kind is NodeKind.COMPONENT_DECLARATION]
