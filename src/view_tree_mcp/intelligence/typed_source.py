"""
Typed-source language service.

The reference resolver needs four things from the TypeScript side of a
project: the symbol outline of a file, a workspace-wide symbol search, and
definition/implementation lookup at a position. ``TypedSourceService`` is
that seam; ``TreeSitterTypedSourceService`` answers it from tree-sitter
outlines and the project index, which covers the declaration shapes the
$mol toolchain generates (``class $x``, ``$x['prop']`` lookups,
``this.prop`` accesses).
"""

import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..constants import SIGIL, TREE_EXTENSION, TYPED_EXTENSION
from ..indexing.index_builder import read_source
from ..indexing.inheritance import inheritance_chain
from ..indexing.models import DocumentSymbol
from ..indexing.project_index import IndexAccessor
from ..indexing.strategies.typescript_strategy import (
    TypeScriptSymbolParser, base_class_name, iter_symbols, node_text,
)
from ..syntax.models import Location, Position, Range
from ..syntax.parser import parse

logger = logging.getLogger(__name__)

_CLASS_KINDS = ('class',)
_LOOKUP_TYPES = ('lookup_type', 'subscript_expression')
_STRING_TYPES = ('string_fragment', 'string')
_NAME_TYPES = ('identifier', 'property_identifier', 'type_identifier', 'shorthand_property_identifier')
_CLASS_NODE_TYPES = ('class_declaration', 'abstract_class_declaration', 'class')


@dataclass(frozen=True)
class LocationLink:
    """A definition target: the whole declaration and its name."""
    target_path: str
    target_range: Range
    target_selection_range: Range

    def to_location(self) -> Location:
        return Location(self.target_path, self.target_range)


@dataclass(frozen=True)
class WorkspaceSymbol:
    name: str
    kind: str
    location: Location


class TypedSourceService(ABC):
    """What the resolver asks of the TypeScript side of the project."""

    @abstractmethod
    def document_symbols(self, path: str) -> List[DocumentSymbol]:
        """Nested symbol outline of a typed-source file; [] when missing."""

    @abstractmethod
    def workspace_symbols(self, query: str) -> List[WorkspaceSymbol]:
        """Symbols across the workspace matching a query, best match first."""

    @abstractmethod
    def definition_at(self, path: str, position: Position) -> List[LocationLink]:
        """Definition targets of the identifier at a position."""

    @abstractmethod
    def implementation_at(self, path: str, position: Position) -> List[LocationLink]:
        """Implementation targets of the identifier at a position."""


class TreeSitterTypedSourceService(TypedSourceService):
    """Default typed-source service backed by tree-sitter and the project index."""

    def __init__(self, index_accessor: IndexAccessor,
                 symbol_parser: Optional[TypeScriptSymbolParser] = None):
        self.index_accessor = index_accessor
        self.symbol_parser = symbol_parser or TypeScriptSymbolParser()
        self._cache: Dict[str, Tuple[int, List[DocumentSymbol]]] = {}
        self._lock = threading.Lock()

    # ----- outline -----

    def document_symbols(self, path: str) -> List[DocumentSymbol]:
        try:
            mtime = os.stat(path).st_mtime_ns
        except OSError:
            return []

        with self._lock:
            cached = self._cache.get(path)
        if cached is not None and cached[0] == mtime:
            return cached[1]

        try:
            content = read_source(path)
        except OSError as e:
            logger.debug(f"Cannot read {path}: {e}")
            return []

        symbols = self.symbol_parser.document_symbols(content)
        with self._lock:
            self._cache[path] = (mtime, symbols)
        return symbols

    def find_class(self, path: str, class_name: str) -> Optional[DocumentSymbol]:
        """Class declaration named ``class_name`` anywhere in a file's outline."""
        for symbol in iter_symbols(self.document_symbols(path)):
            if symbol.kind in _CLASS_KINDS and symbol.name == class_name:
                return symbol
        return None

    def find_member(self, path: str, class_name: str, member_name: str) -> Optional[DocumentSymbol]:
        class_symbol = self.find_class(path, class_name)
        if class_symbol is None:
            return None
        for member in class_symbol.children:
            if member.name == member_name:
                return member
        return None

    # ----- workspace search -----

    def workspace_symbols(self, query: str) -> List[WorkspaceSymbol]:
        index = self.index_accessor()
        matches = [name for name in index if query in name]
        matches.sort(key=lambda name: (name != query, name))

        results = []
        for name in matches:
            location = self._component_location(name, index[name].declaring_file)
            results.append(WorkspaceSymbol(name, 'class', location))
        return results

    def _component_location(self, name: str, declaring_file: str) -> Location:
        if declaring_file.endswith(TREE_EXTENSION):
            try:
                components = parse(read_source(declaring_file)).components()
            except OSError:
                components = []
            for component in components:
                if component.text == name:
                    return Location(declaring_file, component.span.range)
        else:
            symbol = self.find_class(declaring_file, name)
            if symbol is not None:
                return Location(declaring_file, symbol.selection_range)
        return Location(declaring_file, Range.at(0, 0))

    # ----- definition / implementation -----

    def definition_at(self, path: str, position: Position) -> List[LocationLink]:
        reference = self.reference_at(path, position)
        if reference is None:
            return []
        name, owner = reference

        if owner is not None:
            return self._member_links(name, owner, self._owner_files(owner, path))

        links = [self._link(path, symbol) for symbol in iter_symbols(self.document_symbols(path))
                 if symbol.name == name]
        if links:
            return links

        index = self.index_accessor()
        entry = index.get(name)
        if entry is not None:
            location = self._component_location(name, entry.declaring_file)
            return [LocationLink(location.path, location.range, location.range)]
        return []

    def implementation_at(self, path: str, position: Position) -> List[LocationLink]:
        reference = self.reference_at(path, position)
        if reference is None:
            return []
        name, owner = reference

        index = self.index_accessor()
        if owner is None:
            if name.startswith(SIGIL) and name in index:
                owner, name = name, None
            else:
                owner = self._enclosing_class_at(path, position)
                if owner is None:
                    return []

        # The owner itself and every indexed component built on top of it
        owners = [component for component in index
                  if owner in inheritance_chain(component, index)]
        links = []
        for component in sorted(owners):
            declaring_file = index[component].declaring_file
            if not declaring_file.endswith(TYPED_EXTENSION):
                continue
            if name is None:
                symbol = self.find_class(declaring_file, component)
            else:
                symbol = self.find_member(declaring_file, component, name)
            if symbol is not None:
                links.append(self._link(declaring_file, symbol))
        return links

    def reference_at(self, path: str, position: Position) -> Optional[Tuple[str, Optional[str]]]:
        """
        Name referenced at a position and the class it is looked up on.

        Returns (name, owner class or None), or None when no identifier is there.
        """
        try:
            content = read_source(path)
        except OSError as e:
            logger.debug(f"Cannot read {path}: {e}")
            return None

        tree, lines = self.symbol_parser.parse_tree(content)
        point = _to_point(position, lines)
        node = tree.root_node.named_descendant_for_point_range(point, point)
        if node is None:
            return None

        if node.type in _STRING_TYPES:
            lookup = _ancestor(node, _LOOKUP_TYPES, limit=3)
            if lookup is None or not lookup.named_children:
                return None
            key = node_text(node).strip('\'"')
            return key, self._owner_name(lookup.named_children[0])

        if node.type not in _NAME_TYPES:
            return None

        name = node_text(node)
        parent = node.parent
        if parent is not None and parent.type == 'member_expression' and node.type == 'property_identifier':
            obj = parent.child_by_field_name('object')
            if obj is not None:
                return name, self._owner_name(obj)

        if parent is not None and parent.type in ('method_definition', 'public_field_definition',
                                                  'method_signature', 'property_signature'):
            return name, self._enclosing_class(node)

        return name, None

    # ----- helpers -----

    def _owner_name(self, node) -> Optional[str]:
        if node.type == 'this':
            return self._enclosing_class(node)
        text = node_text(node)
        return base_class_name(text) or text

    def _enclosing_class_at(self, path: str, position: Position) -> Optional[str]:
        for symbol in iter_symbols(self.document_symbols(path)):
            if symbol.kind in _CLASS_KINDS and symbol.range.contains(position):
                return symbol.name
        return None

    @staticmethod
    def _enclosing_class(node) -> Optional[str]:
        current = node.parent
        while current is not None:
            if current.type in _CLASS_NODE_TYPES:
                name_node = current.child_by_field_name('name')
                return node_text(name_node) if name_node is not None else None
            current = current.parent
        return None

    def _owner_files(self, owner: str, path: str) -> List[str]:
        files = [path]
        entry = self.index_accessor().get(owner)
        if entry is not None and entry.declaring_file.endswith(TYPED_EXTENSION):
            if entry.declaring_file not in files:
                files.append(entry.declaring_file)
        return files

    def _member_links(self, name: str, owner: str, files: Iterable[str]) -> List[LocationLink]:
        links = []
        for file_path in files:
            member = self.find_member(file_path, owner, name)
            if member is not None:
                links.append(self._link(file_path, member))
        return links

    @staticmethod
    def _link(path: str, symbol: DocumentSymbol) -> LocationLink:
        return LocationLink(path, symbol.range, symbol.selection_range)


def _to_point(position: Position, lines: List[bytes]) -> Tuple[int, int]:
    """Editor position to a tree-sitter (row, byte column) point."""
    row = position.line
    if row < len(lines):
        text = lines[row].decode('utf8', errors='replace')
        return row, len(text[:position.character].encode('utf8'))
    return row, position.character


def _ancestor(node, types: Tuple[str, ...], limit: int):
    current = node.parent
    for _ in range(limit):
        if current is None:
            return None
        if current.type in types:
            return current
        current = current.parent
    return None
