"""
Project Index Builder - scans a workspace into a ProjectIndex.

Files are read and extracted concurrently; results are merged once, in a
deterministic order, after every file has been processed.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from ..exceptions import ScanCancelledError
from ..utils.file_filter import FileFilter
from .models import ComponentEntry
from .project_index import ProjectIndex
from .strategies import StrategyFactory

logger = logging.getLogger(__name__)


def read_source(file_path: str) -> str:
    """Read a workspace file; undecodable bytes are replaced."""
    with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
        return f.read()


def walk_workspace(project_path: str, file_filter: FileFilter) -> Iterator[str]:
    """Yield every file under the project that the filter accepts."""
    base_path = Path(project_path)
    for root, dirs, files in os.walk(project_path):
        # Filter directories in-place using centralized logic
        dirs[:] = [d for d in dirs if not file_filter.should_exclude_directory(d)]

        for file in files:
            file_path = Path(root) / file
            if file_filter.should_process_path(file_path, base_path):
                yield str(file_path)


class ProjectIndexBuilder:
    """
    Builds the project symbol index for one workspace.

    This class orchestrates the scan by:
    1. Discovering tree files and typed-source files
    2. Extracting one component per file with the matching strategy
    3. Merging tree files first, then typed files, in sorted path order
    """

    def __init__(self, project_path: str, additional_excludes: Optional[List[str]] = None,
                 strategy_factory: Optional[StrategyFactory] = None,
                 max_workers: Optional[int] = None):
        if not isinstance(project_path, str):
            raise ValueError(f"Project path must be a string, got {type(project_path)}")

        project_path = project_path.strip()
        if not project_path:
            raise ValueError("Project path cannot be empty")

        if not os.path.isdir(project_path):
            raise ValueError(f"Project path does not exist: {project_path}")

        self.project_path = os.path.abspath(project_path)
        self.strategy_factory = strategy_factory or StrategyFactory()
        self.file_filter = FileFilter(additional_excludes)
        self.max_workers = max_workers
        self.skipped_files: List[str] = []

        logger.info(f"Initialized project index builder for {self.project_path}")

    def discover_files(self) -> Tuple[List[str], List[str]]:
        """
        Find every file the index reads.

        Returns:
            (tree files, typed-source files), each sorted by path
        """
        tree_files = []
        typed_files = []
        tree_strategy = self.strategy_factory.tree_strategy
        typed_strategy = self.strategy_factory.typed_strategy

        try:
            for path in walk_workspace(self.project_path, self.file_filter):
                if tree_strategy.handles(path):
                    tree_files.append(path)
                elif typed_strategy.handles(path):
                    typed_files.append(path)

        except OSError as e:
            logger.error(f"Error scanning directory {self.project_path}: {e}")

        tree_files.sort()
        typed_files.sort()
        logger.debug(f"Found {len(tree_files)} tree files and {len(typed_files)} typed files")
        return tree_files, typed_files

    def extract_file(self, file_path: str) -> Optional[ComponentEntry]:
        """
        Extract the component a single file declares.

        Unreadable or unparsable files are skipped with a warning.
        """
        strategy = self.strategy_factory.get_strategy(file_path)
        if strategy is None:
            return None

        try:
            content = read_source(file_path)
        except OSError as e:
            logger.warning(f"Skipping unreadable file {file_path}: {e}")
            self.skipped_files.append(file_path)
            return None

        try:
            return strategy.extract(file_path, content)
        except Exception as e:
            logger.warning(f"Error extracting {file_path}: {e}")
            self.skipped_files.append(file_path)
            return None

    def scan(self, cancel_event: Optional[threading.Event] = None) -> ProjectIndex:
        """
        Scan the workspace and build a fresh index.

        Args:
            cancel_event: When set during the scan, the partial result is discarded

        Raises:
            ScanCancelledError: if the scan was cancelled
        """
        logger.info("Building project index...")
        start_time = time.time()
        self.skipped_files = []

        tree_files, typed_files = self.discover_files()
        ordered = tree_files + typed_files
        results: Dict[str, Optional[ComponentEntry]] = {}

        if ordered:
            max_workers = self.max_workers or min(os.cpu_count() or 4, len(ordered))
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_file = {
                    executor.submit(self._extract_unless_cancelled, file_path, cancel_event): file_path
                    for file_path in ordered
                }

                for future in as_completed(future_to_file):
                    if cancel_event is not None and cancel_event.is_set():
                        for pending in future_to_file:
                            pending.cancel()
                        break
                    results[future_to_file[future]] = future.result()

        if cancel_event is not None and cancel_event.is_set():
            logger.info("Project scan cancelled; partial results discarded")
            raise ScanCancelledError(f"Scan of {self.project_path} was cancelled")

        index = ProjectIndex.from_contributions(
            (path, [results[path]] if results.get(path) is not None else []) for path in ordered
        )

        elapsed = time.time() - start_time
        logger.info(f"Indexed {len(index)} components from {len(ordered)} files in {elapsed:.2f}s")
        if self.skipped_files:
            logger.info(f"Skipped {len(self.skipped_files)} files")
        return index

    def _extract_unless_cancelled(self, file_path: str,
                                  cancel_event: Optional[threading.Event]) -> Optional[ComponentEntry]:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return self.extract_file(file_path)
