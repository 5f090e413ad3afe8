"""
Centralized file filtering logic for the view.tree MCP server.

This module decides which workspace files the index reads and which file
system events are worth reacting to.
"""

import fnmatch
from pathlib import Path
from typing import Iterable, List, Optional

from ..constants import FILTER_CONFIG


class FileFilter:
    """Centralized file filtering logic."""

    def __init__(self, additional_excludes: Optional[List[str]] = None,
                 supported_suffixes: Optional[Iterable[str]] = None):
        """
        Initialize the file filter.

        Args:
            additional_excludes: Additional directory names to exclude
            supported_suffixes: File suffixes to index instead of the defaults
        """
        self.exclude_dirs = set(FILTER_CONFIG["exclude_directories"])
        self.exclude_dir_prefixes = tuple(FILTER_CONFIG["exclude_directory_prefixes"])
        self.exclude_files = set(FILTER_CONFIG["exclude_files"])
        self.supported_suffixes = tuple(supported_suffixes or FILTER_CONFIG["supported_suffixes"])
        self.excluded_suffixes = tuple(FILTER_CONFIG["excluded_suffixes"])

        if additional_excludes:
            self.exclude_dirs.update(additional_excludes)

    def should_exclude_directory(self, dir_name: str) -> bool:
        """
        Check if directory should be excluded from processing.

        Hidden directories, dependency directories and MAM build output
        directories (prefixed with '-') are skipped.
        """
        if dir_name.startswith('.'):
            return True
        if dir_name.startswith(self.exclude_dir_prefixes):
            return True
        return dir_name in self.exclude_dirs

    def should_exclude_file(self, file_path: Path) -> bool:
        """
        Check if file should be excluded from processing.

        Args:
            file_path: Path object for the file to check

        Returns:
            True if file should be excluded, False otherwise
        """
        name = file_path.name
        if name.endswith(self.excluded_suffixes):
            return True
        if not name.endswith(self.supported_suffixes):
            return True
        if name.startswith('.'):
            return True
        for pattern in self.exclude_files:
            if fnmatch.fnmatch(name, pattern):
                return True
        return False

    def should_process_path(self, path: Path, base_path: Path) -> bool:
        """
        Unified path processing logic to determine if a file should be processed.

        Args:
            path: File path to check
            base_path: Project base path for relative path calculation

        Returns:
            True if file should be processed, False otherwise
        """
        try:
            if not path.is_absolute():
                path = base_path / path

            relative_path = path.relative_to(base_path)

            for part in relative_path.parts[:-1]:
                if self.should_exclude_directory(part):
                    return False

            return not self.should_exclude_file(path)

        except (ValueError, OSError):
            # Path not relative to base_path or other path errors
            return False

    def is_temporary_file(self, file_path: Path) -> bool:
        """Check if file appears to be an editor or backup temporary file."""
        name = file_path.name
        for pattern in ('*.tmp', '*.temp', '*.swp', '*.swo', '*~'):
            if fnmatch.fnmatch(name, pattern):
                return True
        return name.endswith(('.bak', '.orig'))
