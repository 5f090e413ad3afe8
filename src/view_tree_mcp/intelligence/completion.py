"""
Completion ranking for view.tree documents.

The completion context comes from the row's indentation and the text before
the cursor; candidates are collected for that context, deduplicated by label
and ordered by rank then label.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from ..constants import (
    DICT_MARKER, LIST_MARKER, LOCALIZE_MARKER, OVERRIDE_MARKER, SIGIL, STRING_MARKER, VALUE_LITERALS,
)
from ..indexing.framework import FRAMEWORK_COMPONENTS, PROPERTY_DESCRIPTIONS
from ..indexing.inheritance import effective_properties, inheritance_chain
from ..indexing.project_index import IndexAccessor
from ..syntax.models import Position
from ..syntax.parser import find_binding, indent_depth
from .document import TextDocument

RANK_PROJECT = 0
RANK_FRAMEWORK = 1
RANK_GENERIC = 2

_PREFIX = re.compile(r'[$\w?*]*$')


class CandidateKind(Enum):
    COMPONENT = "component"
    PROPERTY = "property"
    OPERATOR = "operator"
    MARKER = "marker"
    VALUE = "value"


class CompletionContext(Enum):
    COMPONENT_NAME = "component_name"
    BASE_CLASS = "base_class"
    PROPERTY = "property"
    BINDING = "binding"


@dataclass(frozen=True)
class Candidate:
    """A completion suggestion; lower rank sorts first."""
    label: str
    kind: CandidateKind
    rank: int
    detail: str = ""
    documentation: str = ""
    insert_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind.value,
            "rank": self.rank,
            "detail": self.detail,
            "documentation": self.documentation,
            "insert_text": self.insert_text if self.insert_text is not None else self.label,
        }


# label, description, snippet
_SYNTAX_ELEMENTS = (
    ("<=", "One-way binding (property <= source)", "<= ${1:property}"),
    ("=>", "Output binding (property => target)", "=> ${1:target}"),
    ("<=>", "Two-way binding (property <=> other)", "<=> ${1:property}"),
    (OVERRIDE_MARKER, "Override of a sub-component property", "^ ${1:property}"),
    (LIST_MARKER, "List declaration", "/\n\t\t$0"),
    (DICT_MARKER, "Dictionary/map declaration", "*\n\t\t$0"),
    (LOCALIZE_MARKER, "Localization marker", "@ \\${1:text}"),
    (STRING_MARKER, "Raw string literal", "\\${1:text}"),
)
_VALUE_MARKERS = (LIST_MARKER, DICT_MARKER, LOCALIZE_MARKER, STRING_MARKER)
_SYNTAX_BY_LABEL = {label: (description, snippet) for label, description, snippet in _SYNTAX_ELEMENTS}


def completion_context(line: str, position: Position) -> CompletionContext:
    """
    Which kind of symbol fits at the cursor.

    Only the text before the cursor counts: left of a binding operator the
    row still names a property of the enclosing component.
    """
    before = line[:position.character]
    if indent_depth(line) == 0:
        return CompletionContext.BASE_CLASS if ' ' in before.strip() else CompletionContext.COMPONENT_NAME
    if find_binding(before) is not None:
        return CompletionContext.BINDING
    return CompletionContext.PROPERTY


def property_snippet(name: str) -> str:
    if name.endswith('?'):
        return f"{name} ${{1|true,false|}}"
    if name in ('sub', 'content'):
        return f"{name} /\n\t\t$0"
    return f"{name} $0"


def rank_candidates(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Keep the best-ranked candidate per label, then order by rank and label."""
    best: Dict[str, Candidate] = {}
    for candidate in candidates:
        current = best.get(candidate.label)
        if current is None or candidate.rank < current.rank:
            best[candidate.label] = candidate
    return sorted(best.values(), key=lambda c: (c.rank, c.label))


class CompletionRanker:
    """Produces ranked completion candidates from the project index."""

    def __init__(self, index_accessor: IndexAccessor):
        self.index_accessor = index_accessor

    def complete(self, document: TextDocument, position: Position) -> List[Candidate]:
        line = document.line_at(position.line)
        context = completion_context(line, position)
        prefix = _PREFIX.search(line[:position.character]).group(0)

        if context is CompletionContext.COMPONENT_NAME:
            candidates = self._component_names()
        elif context is CompletionContext.BASE_CLASS:
            candidates = self._base_classes(prefix)
        elif context is CompletionContext.PROPERTY:
            component = self._nearest_component(document.lines, position.line)
            candidates = self._properties(component) if component else []
            candidates += [self._syntax(marker) for marker in _VALUE_MARKERS]
        else:
            candidates, prefix = self._binding_candidates(document, line[:position.character])

        if prefix:
            candidates = [c for c in candidates if c.label.startswith(prefix)]
        return rank_candidates(candidates)

    # ----- contexts -----

    def _component_names(self) -> List[Candidate]:
        index = self.index_accessor()
        return [
            Candidate(
                label=name,
                kind=CandidateKind.COMPONENT,
                rank=RANK_PROJECT,
                detail=f"Component from {entry.declaring_file}",
                documentation=f"**{name}**\n\nAvailable properties: {', '.join(sorted(entry.properties))}",
            )
            for name, entry in index.items()
        ]

    def _base_classes(self, prefix: str) -> List[Candidate]:
        candidates = [
            Candidate(name, CandidateKind.COMPONENT, RANK_FRAMEWORK,
                      detail="Built-in $mol component", documentation=component.description)
            for name, component in FRAMEWORK_COMPONENTS.items()
        ]
        for name, entry in self.index_accessor().items():
            rank = RANK_PROJECT if name == prefix else RANK_GENERIC
            candidates.append(Candidate(name, CandidateKind.COMPONENT, rank,
                                        detail=f"Component from {entry.declaring_file}"))
        return candidates

    def _properties(self, component: str) -> List[Candidate]:
        index = self.index_accessor()
        own = set()
        for name in inheritance_chain(component, index):
            entry = index.get(name)
            if entry is not None:
                own |= entry.properties

        candidates = []
        for prop in effective_properties(component, index):
            rank = RANK_PROJECT if prop in own else RANK_FRAMEWORK
            candidates.append(Candidate(
                label=prop,
                kind=CandidateKind.PROPERTY,
                rank=rank,
                detail=f"Property of {component}",
                documentation=PROPERTY_DESCRIPTIONS.get(
                    prop, f"Property **{prop}** from component **{component}**"),
                insert_text=property_snippet(prop),
            ))
        return candidates

    def _binding_candidates(self, document: TextDocument, before: str):
        """Right of an operator: operators, literals and the root component's properties."""
        candidates = [self._syntax(op) for op in ("<=", "=>", "<=>", OVERRIDE_MARKER)]
        candidates += [Candidate(value, CandidateKind.VALUE, RANK_GENERIC, detail="Literal value")
                       for value in VALUE_LITERALS]

        root = self._root_component(document.lines)
        if root:
            candidates += self._properties(root)
        binding = find_binding(before)
        return candidates, before[binding.end:].strip()

    @staticmethod
    def _syntax(label: str) -> Candidate:
        description, snippet = _SYNTAX_BY_LABEL[label]
        kind = CandidateKind.OPERATOR if label in ("<=", "=>", "<=>") else CandidateKind.MARKER
        return Candidate(label, kind, RANK_GENERIC, detail=description,
                         documentation=f"**{label}** - {description}", insert_text=snippet)

    # ----- document scanning -----

    @staticmethod
    def _nearest_component(lines: List[str], line_no: int) -> Optional[str]:
        """First token of the nearest depth-0 component row at or above a line."""
        for i in range(min(line_no, len(lines) - 1), -1, -1):
            text = lines[i]
            if text.startswith(SIGIL):
                return text.split(' ', 1)[0]
        return None

    @staticmethod
    def _root_component(lines: List[str]) -> Optional[str]:
        first = lines[0].lstrip('\ufeff').strip() if lines else ''
        token = first.split(' ', 1)[0] if first else ''
        return token if token.startswith(SIGIL) else None
