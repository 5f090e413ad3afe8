"""
Indentation-based parser for view.tree documents.

Every row becomes at least one node so that completion and resolution keep
working on documents that are being edited. The parser records structural
problems on the document root instead of raising.
"""

import logging
import re
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from ..constants import (
    BINDING_OPERATORS, DICT_MARKER, INDENT_CHAR, LIST_MARKER, LOCALIZE_MARKER,
    OVERRIDE_MARKER, SIGIL, STRING_MARKER,
)
from .models import Binding, Node, NodeKind, Span, StructuralError

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r'[^ ]+')
_BINDING = re.compile('|'.join(re.escape(op) for op in BINDING_OPERATORS))
_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_?*]*$')
_BARE_LITERALS = (STRING_MARKER, LOCALIZE_MARKER + STRING_MARKER)


def split_lines(text: str) -> List[str]:
    """Split text into rows, tolerating CRLF line endings."""
    return [line[:-1] if line.endswith('\r') else line for line in text.split('\n')]


def indent_depth(line: str) -> int:
    """Number of leading indent characters."""
    return len(line) - len(line.lstrip(INDENT_CHAR))


def find_binding(text: str) -> Optional[Binding]:
    """
    Find the leftmost binding operator in a row.

    Operators are matched longest-first so ``<=>`` is never read as ``<=``.
    """
    match = _BINDING.search(text)
    if not match:
        return None
    left_tokens = text[:match.start()].split()
    return Binding(
        operator=match.group(0),
        start=match.start(),
        end=match.end(),
        left=left_tokens[-1] if left_tokens else '',
        right=text[match.end():].strip(),
    )


def is_identifier(token: str) -> bool:
    return bool(_IDENTIFIER.match(token))


def is_string_literal(token: str) -> bool:
    return token.startswith(STRING_MARKER) or token.startswith(LOCALIZE_MARKER + STRING_MARKER)


class TreeParser:
    """Converts view.tree text into a position-annotated node tree."""

    def parse(self, text: str) -> Node:
        lines = split_lines(text)
        root = Node(NodeKind.DOCUMENT, '', Span(1, 1, 0), -1, lines=lines)

        heads: List[Node] = []
        raw_scope: Optional[Tuple[Node, int]] = None

        for index, line in enumerate(lines):
            line_no = index + 1

            if not line.strip():
                root.add_child(Node(NodeKind.PLAIN_TEXT, line, Span(line_no, 1, len(line)), 0))
                continue

            depth = indent_depth(line)

            if raw_scope is not None:
                literal, scope_depth = raw_scope
                if depth > scope_depth:
                    offset = scope_depth + 1
                    content = line[offset:]
                    literal.add_child(Node(NodeKind.PLAIN_TEXT, content,
                                           Span(line_no, offset + 1, len(content)),
                                           literal.indent_depth + 1))
                    continue
                raw_scope = None

            if depth == 0:
                parent = root
            elif depth - 1 < len(heads):
                parent = heads[depth - 1]
            else:
                root.errors.append(StructuralError(
                    index, f"Row indented to depth {depth} has no parent at depth {depth - 1}"))
                logger.debug("Orphaned row %d at depth %d", line_no, depth)
                parent = None

            head, literal = self._parse_row(line, line_no, depth, parent or root)

            if parent is not None:
                del heads[depth:]
                heads.append(head)

            if literal is not None and literal.text in _BARE_LITERALS:
                raw_scope = (literal, depth)

        return root

    def _parse_row(self, line: str, line_no: int, depth: int,
                   parent: Node) -> Tuple[Node, Optional[Node]]:
        """Build the inline node chain of one row; returns (head, string literal)."""
        head = None
        literal = None
        previous_text = None
        current = parent

        for position, match in enumerate(_TOKEN.finditer(line, depth)):
            token = match.group(0)
            column = match.start()

            if is_string_literal(token):
                token = line[column:]
                kind = NodeKind.STRING_LITERAL
            else:
                kind = self._classify_token(token, position, depth, previous_text)

            node = Node(kind, token, Span(line_no, column + 1, len(token)), depth + position)
            current.add_child(node)
            current = node
            if head is None:
                head = node
            previous_text = token

            if kind is NodeKind.STRING_LITERAL:
                literal = node
                break

        return head, literal

    @staticmethod
    def _classify_token(token: str, position: int, depth: int, previous: Optional[str]) -> NodeKind:
        if depth == 0 and position == 0:
            if token.startswith(SIGIL):
                return NodeKind.COMPONENT_DECLARATION
            return NodeKind.PLAIN_TEXT
        if token in BINDING_OPERATORS:
            return NodeKind.BINDING_OPERATOR
        if token.startswith(LIST_MARKER):
            return NodeKind.LIST_MARKER
        if token.startswith(DICT_MARKER):
            return NodeKind.DICT_MARKER
        if is_identifier(token):
            if depth >= 1 and position == 0:
                return NodeKind.PROPERTY_DECLARATION
            if previous in BINDING_OPERATORS or previous == OVERRIDE_MARKER:
                return NodeKind.PROPERTY_DECLARATION
        return NodeKind.PLAIN_TEXT


def parse(text: str) -> Node:
    """Parse a view.tree document into its root node."""
    return TreeParser().parse(text)


def flatten(root: Node) -> str:
    """
    Rebuild document text from node spans.

    Gaps before the first node of a row are indentation tabs, gaps between
    nodes are spaces. Well-formed documents round-trip exactly.
    """
    rows: Dict[int, List[Node]] = defaultdict(list)
    for node in root.walk():
        rows[node.span.line].append(node)

    out = []
    for line_no in range(1, len(root.lines) + 1):
        text = ''
        for node in sorted(rows.get(line_no, []), key=lambda n: n.span.column):
            gap = node.span.column - 1 - len(text)
            if gap > 0:
                text += (INDENT_CHAR if not text else ' ') * gap
            text += node.text
        out.append(text)
    return '\n'.join(out)
