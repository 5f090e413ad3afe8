"""
Structural diagnostics for view.tree documents.

Only well-formedness is checked: indentation, component declarations,
property names and binding rows. Whether referenced components or
properties exist is not this module's concern.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Set

from ..constants import SIGIL, STRING_MARKER
from ..syntax.models import NodeKind, Range
from ..syntax.parser import find_binding, indent_depth, is_identifier
from .document import TextDocument
from .rename import COMPONENT_NAME_PATTERN

ERROR = "error"
WARNING = "warning"

_COMMENT_PREFIX = "--"


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: str = ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {"range": self.range.to_dict(), "message": self.message, "severity": self.severity}


def validate_document(document: TextDocument) -> List[Diagnostic]:
    """Structural problems of a document, in line order."""
    diagnostics = [
        Diagnostic(Range.on_line(error.line, 0, len(document.line_at(error.line))),
                   error.message, error.severity)
        for error in document.root.errors
    ]
    raw_lines = _raw_text_lines(document)

    for line_no, line in enumerate(document.lines):
        stripped = line.strip()
        if not stripped or stripped.startswith(_COMMENT_PREFIX) or line_no in raw_lines:
            continue

        depth = indent_depth(line)
        content = line[depth:]
        if content[:1].isspace():
            diagnostics.append(Diagnostic(
                Range.on_line(line_no, depth, len(line) - len(content.lstrip())),
                "Indentation must use tabs"))
            continue

        if depth == 0:
            diagnostics.extend(_check_declaration(line, line_no))
        else:
            diagnostics.extend(_check_row(line, line_no, depth))

    diagnostics.sort(key=lambda d: (d.range.start.line, d.range.start.character))
    return diagnostics


def _raw_text_lines(document: TextDocument) -> Set[int]:
    """0-based lines holding the continuation text of a bare string literal."""
    return {
        child.span.line - 1
        for node in document.root.walk() if node.kind is NodeKind.STRING_LITERAL
        for child in node.children
    }


def _check_declaration(line: str, line_no: int) -> List[Diagnostic]:
    words = line.split()
    name = words[0]
    name_range = Range.on_line(line_no, 0, len(name))
    if not name.startswith(SIGIL):
        return [Diagnostic(name_range, "Component name must start with '$'")]
    if not COMPONENT_NAME_PATTERN.match(name):
        return [Diagnostic(name_range,
                           "Invalid component name. Use only letters, numbers and underscores")]

    # $name or $name $base
    params = words[1:]
    if len(params) > 1 or (params and not COMPONENT_NAME_PATTERN.match(params[0])):
        start = line.index(params[0], len(name))
        return [Diagnostic(Range.on_line(line_no, start, len(line.rstrip())),
                           "Invalid component parameters", WARNING)]
    return []


def _check_row(line: str, line_no: int, depth: int) -> List[Diagnostic]:
    # Operators inside a string literal are text
    code = line.split(STRING_MARKER, 1)[0]
    binding = find_binding(code)

    if binding is None:
        if depth > 1:
            return []
        head = line[depth:].split()[0]
        if is_identifier(head):
            return []
        return [Diagnostic(Range.on_line(line_no, depth, depth + len(head)), "Invalid property name")]

    left = code[depth:binding.start].strip()
    # A bare operator row binds a list item or a sub-component; direct members need a name
    if (left and not is_identifier(left)) or (not left and depth == 1):
        return [Diagnostic(Range.on_line(line_no, depth, len(line.rstrip())), "Invalid binding syntax")]

    if not binding.right:
        return [Diagnostic(Range.on_line(line_no, binding.start, binding.end),
                           f"Binding operator '{binding.operator}' has nothing to bind to",
                           WARNING)]
    return []
