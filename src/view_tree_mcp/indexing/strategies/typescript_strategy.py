"""
TypeScript extraction strategy using tree-sitter.

Besides extracting components for the index, the symbol parser here backs the
default typed-source language service (document symbols and identifier
lookup), so both read TypeScript the same way.
"""

import logging
from typing import List, Optional, Tuple

import tree_sitter
from tree_sitter_typescript import language_typescript

from ...constants import DECLARATION_EXTENSION, SIGIL, TYPED_EXTENSION
from ...syntax.models import Position, Range
from ..models import ComponentEntry, DocumentSymbol
from .base_strategy import ExtractionStrategy

logger = logging.getLogger(__name__)

_MODULE_TYPES = ('internal_module', 'module')
_CLASS_TYPES = ('class_declaration', 'abstract_class_declaration')
_MEMBER_TYPES = {
    'method_definition': 'method',
    'method_signature': 'method',
    'abstract_method_signature': 'method',
    'public_field_definition': 'field',
    'property_signature': 'field',
}
_PRIVATE_PREFIXES = ('_', '#')


class TypeScriptSymbolParser:
    """Builds a nested document-symbol outline of a TypeScript file."""

    def __init__(self):
        self.ts_language = tree_sitter.Language(language_typescript())

    def parse_tree(self, content: str) -> Tuple['tree_sitter.Tree', List[bytes]]:
        source = content.encode('utf8')
        parser = tree_sitter.Parser(self.ts_language)
        return parser.parse(source), source.split(b'\n')

    def document_symbols(self, content: str) -> List[DocumentSymbol]:
        tree, lines = self.parse_tree(content)
        return self._collect(tree.root_node, lines)

    def _collect(self, node, lines: List[bytes]) -> List[DocumentSymbol]:
        symbols = []
        for child in node.named_children:
            symbol = self._symbol_for(child, lines)
            if symbol is not None:
                symbols.append(symbol)
            else:
                symbols.extend(self._collect(child, lines))
        return symbols

    def _symbol_for(self, node, lines: List[bytes]) -> Optional[DocumentSymbol]:
        if node.type in _MODULE_TYPES:
            name_node = node.child_by_field_name('name')
            body = node.child_by_field_name('body')
            if name_node is None:
                return None
            return DocumentSymbol(
                name=node_text(name_node),
                kind='namespace',
                range=node_range(node, lines),
                selection_range=node_range(name_node, lines),
                children=self._collect(body, lines) if body is not None else [],
            )

        if node.type in _CLASS_TYPES:
            name_node = node.child_by_field_name('name')
            body = node.child_by_field_name('body')
            if name_node is None:
                return None
            members = []
            if body is not None:
                for member in body.named_children:
                    symbol = self._member_symbol(member, lines)
                    if symbol is not None:
                        members.append(symbol)
            return DocumentSymbol(
                name=node_text(name_node),
                kind='class',
                range=node_range(node, lines),
                selection_range=node_range(name_node, lines),
                detail=self._heritage(node),
                children=members,
            )

        if node.type == 'pair':
            key = node.child_by_field_name('key')
            value = node.child_by_field_name('value')
            if key is None or key.type not in ('property_identifier', 'string'):
                return None
            return DocumentSymbol(
                name=node_text(key).strip('\'"'),
                kind='property',
                range=node_range(node, lines),
                selection_range=node_range(key, lines),
                children=self._collect(value, lines) if value is not None else [],
            )

        return None

    @staticmethod
    def _member_symbol(node, lines: List[bytes]) -> Optional[DocumentSymbol]:
        kind = _MEMBER_TYPES.get(node.type)
        if kind is None:
            return None
        name_node = node.child_by_field_name('name')
        if name_node is None:
            return None
        return DocumentSymbol(
            name=node_text(name_node),
            kind=kind,
            range=node_range(node, lines),
            selection_range=node_range(name_node, lines),
        )

    @staticmethod
    def _heritage(node) -> Optional[str]:
        for child in node.named_children:
            if child.type != 'class_heritage':
                continue
            for clause in child.named_children:
                if clause.type == 'extends_clause':
                    value = clause.child_by_field_name('value')
                    if value is None and clause.named_children:
                        value = clause.named_children[0]
                    return node_text(value) if value is not None else None
        return None


def node_text(node) -> str:
    return node.text.decode('utf8', errors='replace')


def node_position(point, lines: List[bytes]) -> Position:
    """Convert a tree-sitter (row, byte column) point into an editor position."""
    row, column = point[0], point[1]
    if row < len(lines):
        column = len(lines[row][:column].decode('utf8', errors='replace'))
    return Position(row, column)


def node_range(node, lines: List[bytes]) -> Range:
    return Range(node_position(node.start_point, lines), node_position(node.end_point, lines))


def iter_symbols(symbols: List[DocumentSymbol]):
    """Depth-first walk over a symbol outline."""
    for symbol in symbols:
        yield symbol
        yield from iter_symbols(symbol.children)


def base_class_name(heritage: Optional[str]) -> Optional[str]:
    """Last sigil-prefixed segment of an extends expression: $.$mol_view -> $mol_view."""
    if not heritage:
        return None
    for segment in reversed(heritage.split('.')):
        segment = segment.strip()
        if segment.startswith(SIGIL) and len(segment) > 1:
            return segment
    return None


class TypeScriptExtractionStrategy(ExtractionStrategy):
    """Reads the first $-prefixed class of a TypeScript file and its members."""

    def __init__(self, extension: str = TYPED_EXTENSION,
                 symbol_parser: Optional[TypeScriptSymbolParser] = None):
        self.extension = extension
        self.symbol_parser = symbol_parser or TypeScriptSymbolParser()

    def get_language_name(self) -> str:
        return "typescript"

    def get_supported_extensions(self) -> List[str]:
        return [self.extension]

    def get_excluded_extensions(self) -> List[str]:
        return [DECLARATION_EXTENSION]

    def extract(self, file_path: str, content: str) -> Optional[ComponentEntry]:
        symbols = self.symbol_parser.document_symbols(content)
        component = next(
            (s for s in iter_symbols(symbols) if s.kind == 'class' and s.name.startswith(SIGIL)),
            None,
        )
        if component is None:
            return None

        properties = {
            member.name for member in component.children
            if member.name != 'constructor' and not member.name.startswith(_PRIVATE_PREFIXES)
        }

        base_class = base_class_name(component.detail)
        refines = base_class == component.name
        if refines:
            # $mol pattern: class $x extends $.$x refines the generated class
            base_class = None

        return ComponentEntry(
            name=component.name,
            properties=frozenset(properties),
            base_class=base_class,
            declaring_file=file_path,
            refines_generated=refines,
        )
