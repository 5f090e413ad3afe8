"""
Common ground of the view.tree services.

A service is built per request from the MCP context and reads the lifespan
state (project path, settings, index manager) through ``ContextHelper``.
"""

from abc import ABC
from typing import Optional

from mcp.server.fastmcp import Context

from ..exceptions import ProjectNotSetError
from ..utils import ContextHelper, ValidationHelper


class BaseService(ABC):
    """Project checks and lifespan shortcuts shared by every service."""

    def __init__(self, ctx: Context):
        self.ctx = ctx
        self.helper = ContextHelper(ctx)

    def _validate_project_setup(self) -> Optional[str]:
        """
        Validate that the project is properly set up.

        Returns:
            Error message if project is not set up properly, None if valid
        """
        return self.helper.get_base_path_error()

    def _require_project_setup(self) -> None:
        """
        Ensure project is set up, raising an exception if not.

        Raises:
            ProjectNotSetError: If project is not properly set up
        """
        error = self._validate_project_setup()
        if error:
            raise ProjectNotSetError(error)

    def _require_valid_file_path(self, file_path: str) -> str:
        """
        Ensure file path lies inside the project and return it absolute.

        Raises:
            ValueError: If file path is invalid
        """
        error = ValidationHelper.validate_file_path(file_path, self.base_path)
        if error:
            raise ValueError(error)
        return ValidationHelper.resolve_file_path(file_path, self.base_path)

    @property
    def base_path(self) -> str:
        """The base project path."""
        return self.helper.base_path

    @property
    def settings(self):
        """The ProjectSettings instance."""
        return self.helper.settings

    @property
    def index_manager(self):
        """The ProjectIndexManager instance, or None if not available."""
        return self.helper.index_manager
