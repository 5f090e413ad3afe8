"""
Reference resolver: where does the token under the cursor lead?

The token is classified first (see ``syntax.classifier``); each class has
its own handler. Handlers only probe files and ask the typed-source service,
so a miss is an empty result, never an exception.
"""

import logging
import os
import re
from typing import Callable, Dict, List

from ..constants import MAP_HEADER_LINES, MAP_TRAILING_TRIM, SIGIL, TREE_EXTENSION
from ..indexing.index_builder import read_source
from ..indexing.strategies.typescript_strategy import iter_symbols
from ..syntax.classifier import NodeClass, classify, text_in_range, word_range_at
from ..syntax.models import Location, Position, Range
from ..syntax.parser import split_lines
from .document import TextDocument
from .source_maps import SourceMapLookup, generated_paths
from .typed_source import LocationLink, TypedSourceService

logger = logging.getLogger(__name__)

_TREE_SUFFIX = re.compile(r'\.tree$')

Lookup = Callable[[str, Position], List[LocationLink]]


def companion_path(tree_path: str, suffix: str) -> str:
    """x.view.tree -> x.view<suffix>, e.g. '.ts' or '.css.ts'."""
    return _TREE_SUFFIX.sub(suffix, tree_path)


class ReferenceResolver:
    """Resolves definitions and implementations of view.tree tokens."""

    def __init__(self, typed_source: TypedSourceService, project_root: str):
        self.typed_source = typed_source
        self.project_root = project_root
        self._handlers: Dict[NodeClass, Callable[[TextDocument, Range, Lookup], List[Location]]] = {
            NodeClass.ROOT_CLASS: self._resolve_root_class,
            NodeClass.CLASS: self._resolve_class,
            NodeClass.COMP: self._resolve_comp,
            NodeClass.PROP: self._resolve_prop,
            NodeClass.SUB_PROP: self._resolve_sub_prop,
        }

    def resolve(self, document: TextDocument, position: Position) -> List[Location]:
        """Definition locations of the token at a position."""
        return self._dispatch(document, position, self.typed_source.definition_at)

    def resolve_implementation(self, document: TextDocument, position: Position) -> List[Location]:
        """Implementation locations of the token at a position."""
        return self._dispatch(document, position, self.typed_source.implementation_at)

    def _dispatch(self, document: TextDocument, position: Position, lookup: Lookup) -> List[Location]:
        word_range = word_range_at(document.lines, position)
        if word_range is None or not text_in_range(document.lines, word_range):
            return []

        node_class = classify(document.root, word_range)
        logger.debug("Resolving %s at %s as %s", document.path, position, node_class.value)
        try:
            return self._handlers[node_class](document, word_range, lookup)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to resolve {node_class.value} in {document.path}: {e}")
            return []

    # ----- handlers -----

    def _resolve_root_class(self, document: TextDocument, word_range: Range, lookup: Lookup) -> List[Location]:
        view_ts = companion_path(document.path, '.ts')
        class_name = SIGIL + text_in_range(document.lines, word_range)
        class_symbol = self._find_class(view_ts, class_name)
        if class_symbol is not None:
            return [Location(view_ts, class_symbol.range)]
        # Nothing declared yet: point at where the class would be created
        return [Location(view_ts, Range.at(0, 0))]

    def _resolve_class(self, document: TextDocument, word_range: Range, lookup: Lookup) -> List[Location]:
        name = text_in_range(document.lines, word_range)
        parts = name.split('_')
        file_name = parts[-1] + TREE_EXTENSION

        candidates = [
            os.path.join(self.project_root, *parts, file_name),
            os.path.join(self.project_root, *parts, parts[-1], file_name),
        ]
        for candidate in candidates:
            if os.path.exists(candidate):
                return [Location(candidate, Range.at(0, 0))]

        symbols = self.typed_source.workspace_symbols(SIGIL + name)
        if symbols:
            return [symbols[0].location]

        return [Location(candidates[0], Range.at(0, 0))]

    def _resolve_comp(self, document: TextDocument, word_range: Range, lookup: Lookup) -> List[Location]:
        css_ts = companion_path(document.path, '.css.ts')
        name = text_in_range(document.lines, word_range)
        symbol = next((s for s in iter_symbols(self.typed_source.document_symbols(css_ts))
                       if s.name == name), None)
        if symbol is None:
            return []
        return [link.to_location() for link in lookup(css_ts, symbol.selection_range.start)]

    def _resolve_prop(self, document: TextDocument, word_range: Range, lookup: Lookup) -> List[Location]:
        root_range = word_range_at(document.lines, Position(0, 1))
        if root_range is None:
            return self._resolve_comp(document, word_range, lookup)

        class_name = SIGIL + text_in_range(document.lines, root_range)
        view_ts = companion_path(document.path, '.ts')
        name = text_in_range(document.lines, word_range)

        class_symbol = self._find_class(view_ts, class_name)
        member = None
        if class_symbol is not None:
            member = next((m for m in class_symbol.children if m.name == name), None)
        if member is None:
            return self._resolve_comp(document, word_range, lookup)

        return [link.to_location() for link in lookup(view_ts, member.selection_range.start)]

    def _resolve_sub_prop(self, document: TextDocument, word_range: Range, lookup: Lookup) -> List[Location]:
        declaration, map_path = generated_paths(document.path)
        source_map = SourceMapLookup.load(map_path)
        if source_map is None or source_map.first_source is None:
            return []

        generated = source_map.generated_position_for(
            source_map.first_source,
            word_range.start.line,
            word_range.start.character + 1,
        )
        if generated is None:
            return []

        declaration_lines = split_lines(read_source(declaration))
        line = generated.line + MAP_HEADER_LINES
        if line >= len(declaration_lines):
            return []
        character = max(len(declaration_lines[line]) - MAP_TRAILING_TRIM, 0)

        links = lookup(declaration, Position(line, character))
        if not links:
            return []
        end = links[0].target_selection_range.end
        return [Location(links[0].target_path, Range(end, end))]

    def _find_class(self, path: str, class_name: str):
        for symbol in iter_symbols(self.typed_source.document_symbols(path)):
            if symbol.kind == 'class' and symbol.name == class_name:
                return symbol
        return None
