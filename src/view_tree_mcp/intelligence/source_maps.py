"""
Lookup in the source maps generated next to view.tree files.

For ``<dir>/x.view.tree`` the build writes ``<dir>/-view.tree/x.view.tree.d.ts``
and its map ``<dir>/-view.tree/x.view.tree.d.ts.map``.
"""

import logging
import os
from typing import Optional, Tuple

import sourcemap

from ..constants import DECLARATION_EXTENSION, GENERATED_DIR
from ..indexing.index_builder import read_source
from ..syntax.models import Position

logger = logging.getLogger(__name__)


def generated_paths(tree_path: str) -> Tuple[str, str]:
    """(declaration file, its source map) for a view.tree file."""
    directory, name = os.path.split(tree_path)
    declaration = os.path.join(directory, GENERATED_DIR, name + DECLARATION_EXTENSION)
    return declaration, declaration + '.map'


class SourceMapLookup:
    """Original -> generated position lookup over one decoded source map."""

    def __init__(self, index):
        self.index = index

    @classmethod
    def load(cls, map_path: str) -> Optional['SourceMapLookup']:
        """Decode a map file; None when it is missing or malformed."""
        try:
            return cls(sourcemap.loads(read_source(map_path)))
        except OSError as e:
            logger.debug(f"No source map at {map_path}: {e}")
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Malformed source map {map_path}: {e}")
        return None

    @property
    def first_source(self) -> Optional[str]:
        return self.index.sources[0] if self.index.sources else None

    def generated_position_for(self, source: str, line: int, column: int) -> Optional[Position]:
        """
        Generated position of the greatest mapping at or before an original position.

        ``line`` and ``column`` are 0-based; so is the result. Mappings of
        other sources are ignored.
        """
        needle = (line, column)
        best = None
        best_key = None
        for token in self.index:
            if token.src != source:
                continue
            key = (token.src_line, token.src_col)
            if key <= needle and (best_key is None or key > best_key):
                best, best_key = token, key
        if best is None:
            return None
        return Position(best.dst_line, best.dst_col)
