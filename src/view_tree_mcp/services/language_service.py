"""
Language Service - Business logic for view.tree editor intelligence.

This service binds the current project index to the intelligence layer:
definitions, implementations, completions, hover, rename planning and
diagnostics for one document at a time.
"""

import logging
from typing import Any, Dict, List, Optional

from ..intelligence import (
    CompletionRanker,
    HoverProvider,
    ReferenceResolver,
    RenamePlanner,
    TextDocument,
    TreeSitterTypedSourceService,
    validate_document,
)
from ..syntax.models import Position
from ..utils import ValidationHelper
from .base_service import BaseService

logger = logging.getLogger(__name__)


class LanguageService(BaseService):
    """
    Business service for view.tree language features.

    Every request reads the index snapshot current at call time, so results
    follow the file watcher without any extra refresh.
    """

    def _index_manager(self):
        self._require_project_setup()
        if self.index_manager is None:
            raise RuntimeError("Index manager not initialized. Call set_project_path first.")
        return self.index_manager

    def _document(self, file_path: str, content: Optional[str]) -> TextDocument:
        path = self._require_valid_file_path(file_path)
        return TextDocument.from_path(path, content)

    @staticmethod
    def _position(line: int, character: int) -> Position:
        error = ValidationHelper.validate_position(line, character)
        if error:
            raise ValueError(error)
        return Position(line, character)

    def _resolver(self) -> ReferenceResolver:
        typed_source = TreeSitterTypedSourceService(self._index_manager().accessor())
        return ReferenceResolver(typed_source, self.base_path)

    def resolve_definition(self, file_path: str, line: int, character: int,
                           content: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Definition locations of the token under the cursor.

        Args:
            file_path: Tree file, relative to the project root or absolute
            line: 0-based line
            character: 0-based character
            content: Unsaved document text, read from disk when omitted

        Returns:
            List of {"path", "range"} dictionaries, possibly empty
        """
        position = self._position(line, character)
        resolver = self._resolver()
        document = self._document(file_path, content)
        return [location.to_dict() for location in resolver.resolve(document, position)]

    def resolve_implementation(self, file_path: str, line: int, character: int,
                               content: Optional[str] = None) -> List[Dict[str, Any]]:
        """Implementation locations of the token under the cursor."""
        position = self._position(line, character)
        resolver = self._resolver()
        document = self._document(file_path, content)
        return [location.to_dict()
                for location in resolver.resolve_implementation(document, position)]

    def provide_completions(self, file_path: str, line: int, character: int,
                            content: Optional[str] = None) -> List[Dict[str, Any]]:
        """Ranked completion candidates at a cursor position."""
        position = self._position(line, character)
        ranker = CompletionRanker(self._index_manager().accessor())
        document = self._document(file_path, content)
        candidates = ranker.complete(document, position)
        logger.debug("%d completion candidates at %s:%d:%d",
                     len(candidates), file_path, line, character)
        return [candidate.to_dict() for candidate in candidates]

    def provide_hover_info(self, file_path: str, line: int, character: int,
                           content: Optional[str] = None) -> Dict[str, Any]:
        """Hover card for the token under the cursor, or an empty dict."""
        position = self._position(line, character)
        provider = HoverProvider(self._index_manager().accessor())
        document = self._document(file_path, content)
        info = provider.provide_hover_info(document, position)
        return info.to_dict() if info else {}

    def find_rename_targets(self, component_name: str) -> List[Dict[str, Any]]:
        """Every occurrence of a component name in the workspace."""
        planner = RenamePlanner(self.base_path, self._index_manager().accessor())
        return [location.to_dict() for location in planner.find_rename_targets(component_name)]

    def plan_file_renames(self, old_name: str, new_name: str) -> List[Dict[str, str]]:
        """
        Sibling file moves for a component rename.

        Raises:
            RenameError: If the new name is invalid or already taken
        """
        planner = RenamePlanner(self.base_path, self._index_manager().accessor())
        return [{"old_path": old, "new_path": new}
                for old, new in planner.plan_file_renames(old_name, new_name)]

    def validate_document(self, file_path: str, content: Optional[str] = None) -> List[Dict[str, Any]]:
        """Structural diagnostics for a tree document."""
        self._require_project_setup()
        document = self._document(file_path, content)
        return [diagnostic.to_dict() for diagnostic in validate_document(document)]
