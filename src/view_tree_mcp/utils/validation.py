"""
Input checks shared by the services.

Each check returns an error message, or None when the input is acceptable,
so callers decide whether to raise or report.
"""

import os
from typing import Optional


class ValidationHelper:
    """Static checks for paths and editor positions coming from MCP clients."""

    @staticmethod
    def resolve_file_path(file_path: str, base_path: str) -> str:
        """Absolute form of a path given relative to the project root or absolute."""
        if os.path.isabs(file_path):
            return os.path.normpath(file_path)
        return os.path.normpath(os.path.join(base_path, file_path))

    @staticmethod
    def validate_file_path(file_path: str, base_path: str) -> Optional[str]:
        """
        Reject paths that escape the project directory.

        Symlinks are resolved before the comparison, so a link pointing
        outside the project is rejected as well.
        """
        if not file_path:
            return "File path cannot be empty"
        if not base_path:
            return "Base path not set"

        resolved = os.path.realpath(ValidationHelper.resolve_file_path(file_path, base_path))
        project = os.path.realpath(base_path)
        if os.path.commonpath([resolved, project]) != project:
            return "Access denied. File path must be within project directory."
        return None

    @staticmethod
    def validate_directory_path(dir_path: str) -> Optional[str]:
        """Check that a project path names an existing directory."""
        if not dir_path:
            return "Directory path cannot be empty"

        try:
            abs_path = os.path.abspath(os.path.normpath(dir_path))
        except (OSError, ValueError) as e:
            return f"Invalid path format: {e}"

        if not os.path.exists(abs_path):
            return f"Path does not exist: {abs_path}"
        if not os.path.isdir(abs_path):
            return f"Path is not a directory: {abs_path}"
        return None

    @staticmethod
    def validate_position(line: int, character: int) -> Optional[str]:
        """Editor positions are pairs of non-negative integers."""
        # bool is an int subclass but never a position
        for value in (line, character):
            if not isinstance(value, int) or isinstance(value, bool):
                return "Line and character must be integers"
        if line < 0 or character < 0:
            return "Line and character are 0-based and cannot be negative"
        return None
