"""
Service layer for the view.tree MCP server.

Each service follows a consistent pattern:
- Constructor accepts MCP Context parameter
- Methods correspond to MCP entry points
- Shared utilities accessed through utils module
- Meaningful exceptions raised for error conditions
"""

from .base_service import BaseService
from .file_watcher_service import FileWatcherService
from .index_management_service import IndexManagementService
from .language_service import LanguageService
from .project_management_service import ProjectManagementService
from .system_management_service import SystemManagementService

__all__ = [
    "BaseService",
    "FileWatcherService",
    "IndexManagementService",
    "LanguageService",
    "ProjectManagementService",
    "SystemManagementService",
]
