"""
Project Management Service - Business logic for project lifecycle management.

This service handles opening a view.tree project: settings, the initial
index scan and the file watcher that keeps the index fresh afterwards.
"""
import json
import logging
import os
from dataclasses import dataclass

from ..indexing import ProjectIndexManager
from ..indexing.strategies import StrategyFactory
from ..project_settings import ProjectSettings
from ..utils import ValidationHelper
from .base_service import BaseService
from .file_watcher_service import FileWatcherService

logger = logging.getLogger(__name__)


@dataclass
class ProjectInitializationResult:
    """Business result for project initialization operations."""
    project_path: str
    file_count: int
    component_count: int
    monitoring_status: str
    message: str


class ProjectManagementService(BaseService):
    """
    Business service for project lifecycle management.

    This service orchestrates project initialization: validation, cleanup
    of the previous project, index build and file monitoring.
    """

    def initialize_project(self, path: str) -> str:
        """
        Initialize a project.

        Args:
            path: Project directory path to initialize

        Returns:
            Success message with project information

        Raises:
            ValueError: If path is invalid or initialization fails
        """
        error = ValidationHelper.validate_directory_path(path)
        if error:
            raise ValueError(error)

        result = self._execute_initialization_workflow(os.path.abspath(path))
        return self._format_initialization_result(result)

    def _execute_initialization_workflow(self, project_path: str) -> ProjectInitializationResult:
        settings = ProjectSettings(project_path, skip_load=False)
        self.helper.update_settings(settings)

        self._cleanup_existing_project()

        index_config = settings.get_index_config()
        watcher_config = settings.get_file_watcher_config()
        index_manager = ProjectIndexManager(StrategyFactory(
            tree_extension=index_config['tree_extension'],
            typed_extension=index_config['typed_extension'],
        ))
        if not index_manager.set_project_path(
                project_path,
                additional_excludes=watcher_config.get('additional_exclude_patterns', []),
                max_workers=index_config.get('max_workers')):
            raise RuntimeError(f"Failed to set project path: {project_path}")

        self.helper.update_base_path(project_path)
        self.helper.update_index_manager(index_manager)

        index_manager.build_index()
        stats = index_manager.get_index_stats()

        monitoring_status = self._setup_file_monitoring(index_manager, watcher_config)

        return ProjectInitializationResult(
            project_path=project_path,
            file_count=stats.get('indexed_files', 0),
            component_count=stats.get('components', 0),
            monitoring_status=monitoring_status,
            message=f"Project initialized: {project_path}",
        )

    def _cleanup_existing_project(self) -> None:
        """Stop the previous project's watcher and scan."""
        watcher = self.helper.file_watcher_service
        if watcher is not None:
            watcher.stop_monitoring()
            self.helper.update_file_watcher_service(None)

        index_manager = self.index_manager
        if index_manager is not None:
            index_manager.cleanup()

    def _setup_file_monitoring(self, index_manager: ProjectIndexManager, watcher_config: dict) -> str:
        if not watcher_config.get('enabled', True):
            logger.info("File watcher disabled by configuration")
            return "disabled"

        watcher = FileWatcherService(self.ctx)
        if watcher.start_monitoring(index_manager.update_file, index_manager.remove_file):
            self.helper.update_file_watcher_service(watcher)
            return "active"
        return "failed"

    def get_project_config(self) -> str:
        """
        Current project configuration as JSON.

        Returns:
            JSON string with base path, settings and index status
        """
        if self._validate_project_setup():
            return json.dumps({
                "status": "not_configured",
                "message": "Project path not set. Please use set_project_path to set a project directory first.",
            }, indent=2)

        config = {
            "base_path": self.base_path,
            "settings": self.settings.load_config() if self.settings else {},
            "index": self.index_manager.get_index_stats() if self.index_manager else {"status": "not_loaded"},
        }
        return json.dumps(config, indent=2, default=str)

    @staticmethod
    def _format_initialization_result(result: ProjectInitializationResult) -> str:
        message = (f"Project path set to: {result.project_path}. "
                   f"Indexed {result.component_count} components from {result.file_count} files.")
        if result.monitoring_status == "active":
            message += " File watcher started; the index updates automatically."
        elif result.monitoring_status == "failed":
            message += " File watcher unavailable; use refresh_index after changes."
        return message
