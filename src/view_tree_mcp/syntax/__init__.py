"""
view.tree syntax: parser, node models and token classification.
"""

from .classifier import NodeClass, classify, text_in_range, word_range_at
from .models import Binding, Location, Node, NodeKind, Position, Range, Span, StructuralError
from .parser import TreeParser, find_binding, flatten, indent_depth, parse, split_lines

__all__ = [
    "Binding",
    "Location",
    "Node",
    "NodeClass",
    "NodeKind",
    "Position",
    "Range",
    "Span",
    "StructuralError",
    "TreeParser",
    "classify",
    "find_binding",
    "flatten",
    "indent_depth",
    "parse",
    "split_lines",
    "text_in_range",
    "word_range_at",
]
