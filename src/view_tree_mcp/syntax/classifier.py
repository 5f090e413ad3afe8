"""
Node classifier: decides what a token under the cursor refers to.
"""

import re
from enum import Enum
from typing import List, Optional, Pattern, Union

from ..constants import SIGIL
from .models import Node, Position, Range

WORD_PATTERN = re.compile(r'[A-Za-z0-9_]+')
SIGIL_WORD_PATTERN = re.compile(r'\$?\w+')

_PROP_LEAD_CHARS = ('>', '=', '^')


class NodeClass(Enum):
    """What a token refers to, from the resolver's point of view."""
    ROOT_CLASS = "root_class"
    CLASS = "class"
    PROP = "prop"
    SUB_PROP = "sub_prop"
    COMP = "comp"


def word_range_at(lines: List[str], position: Position,
                  pattern: Union[str, Pattern] = WORD_PATTERN) -> Optional[Range]:
    """Range of the word touching the position, or None."""
    if position.line < 0 or position.line >= len(lines):
        return None
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    line = lines[position.line]
    for match in pattern.finditer(line):
        if match.start() <= position.character <= match.end():
            return Range.on_line(position.line, match.start(), match.end())
        if match.start() > position.character:
            break
    return None


def text_in_range(lines: List[str], word_range: Range) -> str:
    """Text of a single-line range."""
    line = lines[word_range.start.line]
    return line[word_range.start.character:word_range.end.character]


def _char_at(line: str, index: int) -> str:
    return line[index] if 0 <= index < len(line) else ''


def classify(tree: Node, token_range: Range) -> NodeClass:
    """
    Classify the token at ``token_range`` within a parsed document.

    The order of the checks matters: a component reference right after a
    binding operator must still classify as a class, not a property.
    """
    start = token_range.start
    line = tree.lines[start.line] if 0 <= start.line < len(tree.lines) else ''

    if start.line == 0 and start.character == 1:
        return NodeClass.ROOT_CLASS

    if _char_at(line, start.character - 1) == SIGIL:
        return NodeClass.CLASS

    if start.character == 1:
        return NodeClass.PROP

    if _char_at(line, start.character - 2) in _PROP_LEAD_CHARS:
        return NodeClass.PROP

    return NodeClass.SUB_PROP
