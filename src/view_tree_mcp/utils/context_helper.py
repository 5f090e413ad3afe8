"""
Access to the lifespan state stored in an MCP request context.
"""

import os
from typing import Optional

from mcp.server.fastmcp import Context

from ..project_settings import ProjectSettings


class ContextHelper:
    """
    Reads and replaces the server lifespan state behind an MCP context.

    Missing attributes read as empty values, so a context without a lifespan
    (or a stand-in namespace) behaves like a server with no project yet.
    """

    def __init__(self, ctx: Context):
        self.ctx = ctx

    @property
    def _lifespan(self):
        try:
            return self.ctx.request_context.lifespan_context
        except (AttributeError, ValueError):
            return None

    @property
    def base_path(self) -> str:
        """
        Get the base project path from the context.

        Returns:
            The base project path, or empty string if not set
        """
        return getattr(self._lifespan, 'base_path', "") or ""

    @property
    def settings(self) -> Optional[ProjectSettings]:
        """
        Get the project settings from the context.

        Returns:
            The ProjectSettings instance, or None if not available
        """
        return getattr(self._lifespan, 'settings', None)

    @property
    def index_manager(self):
        """
        Get the project index manager from the context.

        Returns:
            The ProjectIndexManager instance, or None if not available
        """
        return getattr(self._lifespan, 'index_manager', None)

    @property
    def file_watcher_service(self):
        """
        Get the file watcher service from the context.

        Returns:
            The FileWatcherService instance, or None if not started
        """
        return getattr(self._lifespan, 'file_watcher_service', None)

    def get_base_path_error(self) -> Optional[str]:
        """
        Get an error message if base path is not properly set.

        Returns:
            Error message string if base path is invalid, None if valid
        """
        if not self.base_path:
            return ("Project path not set. Please use set_project_path to set a "
                    "project directory first.")

        if not os.path.exists(self.base_path):
            return f"Project path does not exist: {self.base_path}"

        if not os.path.isdir(self.base_path):
            return f"Project path is not a directory: {self.base_path}"

        return None

    def _set(self, name: str, value) -> None:
        lifespan = self._lifespan
        if lifespan is not None:
            setattr(lifespan, name, value)

    def update_base_path(self, path: str) -> None:
        """Update the base path in the context."""
        self._set('base_path', path)

    def update_settings(self, settings: ProjectSettings) -> None:
        """Update the settings in the context."""
        self._set('settings', settings)

    def update_index_manager(self, index_manager) -> None:
        """Update the index manager in the context."""
        self._set('index_manager', index_manager)

    def update_file_watcher_service(self, file_watcher_service) -> None:
        """Update the file watcher service in the context."""
        self._set('file_watcher_service', file_watcher_service)
