"""
Project Index Manager - owns the project symbol index of the open workspace.

The manager is the single writer of the index: the initial scan and every
file-system event go through it. Everything else reads through ``accessor()``.
"""

import logging
import os
import threading
import time
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import ProjectNotSetError
from .index_builder import ProjectIndexBuilder, read_source
from .models import ComponentEntry, IndexPatch, IndexStats
from .project_index import IndexAccessor, ProjectIndex
from .strategies import StrategyFactory

logger = logging.getLogger(__name__)


class ProjectIndexManager:
    """Manages the lifecycle of the in-memory project symbol index."""

    def __init__(self, strategy_factory: Optional[StrategyFactory] = None):
        self.project_path: Optional[str] = None
        self.index_builder: Optional[ProjectIndexBuilder] = None
        self.strategy_factory = strategy_factory or StrategyFactory()
        self.max_workers: Optional[int] = None
        self.additional_excludes: List[str] = []
        self._index = ProjectIndex()
        self._last_build: str = ""
        self._skipped_files = 0
        self._cancel_event = threading.Event()
        self._lock = threading.RLock()
        logger.info("Initialized Project Index Manager")

    def set_project_path(self, project_path: str,
                         additional_excludes: Optional[List[str]] = None,
                         max_workers: Optional[int] = None) -> bool:
        """Set the project path; the index is cleared until the next build."""
        with self._lock:
            if not project_path or not isinstance(project_path, str):
                logger.error(f"Invalid project path: {project_path}")
                return False

            project_path = project_path.strip()
            if not os.path.isdir(project_path):
                logger.error(f"Project path does not exist: {project_path}")
                return False

            self.project_path = os.path.abspath(project_path)
            self.additional_excludes = list(additional_excludes or [])
            self.max_workers = max_workers
            self.index_builder = ProjectIndexBuilder(
                self.project_path,
                additional_excludes=self.additional_excludes,
                strategy_factory=self.strategy_factory,
                max_workers=max_workers,
            )
            self._index = ProjectIndex()
            logger.info(f"Set project path: {self.project_path}")
            return True

    def build_index(self) -> ProjectIndex:
        """
        Scan the whole workspace and swap in the fresh index.

        Raises:
            ProjectNotSetError: if no project path is set
            ScanCancelledError: if ``cancel_scan`` was called meanwhile
        """
        with self._lock:
            builder = self.index_builder
            if builder is None:
                raise ProjectNotSetError("Project path not set. Please use set_project_path first.")
            self._cancel_event = threading.Event()
            cancel_event = self._cancel_event

        # Scan without holding the lock so a concurrent cancel can get through
        index = builder.scan(cancel_event)

        with self._lock:
            self._index = index
            self._skipped_files = len(builder.skipped_files)
            self._last_build = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        logger.info(f"Project index ready with {len(index)} components")
        return index

    def refresh_index(self) -> ProjectIndex:
        """Rebuild the index from scratch."""
        return self.build_index()

    def cancel_scan(self) -> None:
        """Abort a scan in progress; its partial result is discarded."""
        self._cancel_event.set()

    def update_file(self, file_path: str) -> IndexPatch:
        """
        Re-extract one file and patch the index.

        The entries the file produced before are deleted first, then the
        fresh extraction is inserted.
        """
        file_path = os.path.abspath(file_path)
        strategy = self.strategy_factory.get_strategy(file_path)
        if strategy is None:
            return IndexPatch(path=file_path, removed=[], added=[])

        try:
            content = read_source(file_path)
        except FileNotFoundError:
            return self.remove_file(file_path)
        except OSError as e:
            logger.warning(f"Skipping unreadable file {file_path}: {e}")
            return IndexPatch(path=file_path, removed=[], added=[])

        try:
            entry = strategy.extract(file_path, content)
        except Exception as e:
            logger.warning(f"Error extracting {file_path}: {e}")
            return IndexPatch(path=file_path, removed=[], added=[])

        with self._lock:
            return self._index.apply_file(file_path, [entry] if entry is not None else [])

    def remove_file(self, file_path: str) -> IndexPatch:
        """Forget everything the file contributed; no rescan."""
        file_path = os.path.abspath(file_path)
        with self._lock:
            return self._index.discard_file(file_path)

    @property
    def index(self) -> ProjectIndex:
        return self._index

    def snapshot(self) -> Mapping[str, ComponentEntry]:
        """Read-only view of the current mapping."""
        return self._index.view()

    def accessor(self) -> IndexAccessor:
        """Callable that always returns a snapshot of the current index."""
        return self.snapshot

    def get_index_stats(self) -> Dict[str, Any]:
        """Get statistics about the current index."""
        with self._lock:
            if not self.project_path:
                return {"status": "not_loaded"}
            stats = IndexStats(
                project_path=self.project_path,
                indexed_files=len(self._index.files()),
                components=len(self._index),
                skipped_files=self._skipped_files,
                timestamp=self._last_build,
            )
        result = stats.to_dict()
        result["status"] = "loaded" if self._last_build else "empty"
        result["languages"] = self.strategy_factory.get_strategy_info()
        return result

    def cleanup(self):
        """Drop the index and the project binding."""
        with self._lock:
            self.cancel_scan()
            self.project_path = None
            self.index_builder = None
            self._index = ProjectIndex()
            self._last_build = ""
            logger.info("Cleaned up project index manager")
