"""
Index Management Service - Business logic for index lifecycle management.

This service handles rebuilding the project index and reporting its state.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict

from .base_service import BaseService

logger = logging.getLogger(__name__)


@dataclass
class IndexRebuildResult:
    """Business result for index rebuild operations."""
    component_count: int
    rebuild_time: float
    message: str


class IndexManagementService(BaseService):
    """Business service for index lifecycle management."""

    def rebuild_index(self) -> str:
        """
        Rebuild the project index from scratch.

        Returns:
            Success message with rebuild information

        Raises:
            ProjectNotSetError: If no project is set up
        """
        self._require_project_setup()
        if self.index_manager is None:
            raise RuntimeError("Index manager not initialized")

        start_time = time.time()
        index = self.index_manager.refresh_index()
        result = IndexRebuildResult(
            component_count=len(index),
            rebuild_time=time.time() - start_time,
            message="Index rebuilt",
        )
        logger.info("Index rebuilt with %d components in %.2fs",
                    result.component_count, result.rebuild_time)
        return (f"Project re-indexed. Found {result.component_count} components "
                f"in {result.rebuild_time:.2f}s.")

    def get_index_stats(self) -> Dict[str, Any]:
        """
        Statistics of the current index.

        Returns:
            Dictionary with project path, file and component counts
        """
        self._require_project_setup()
        if self.index_manager is None:
            return {"status": "not_loaded"}
        return self.index_manager.get_index_stats()

    def list_components(self) -> Dict[str, Any]:
        """All indexed components with their own properties and base classes."""
        self._require_project_setup()
        if self.index_manager is None:
            return {"components": []}
        snapshot = self.index_manager.snapshot()
        return {"components": [snapshot[name].to_dict() for name in sorted(snapshot)]}
