"""
System Management Service - Business logic for file watcher configuration and status.
"""

from typing import Any, Dict, Optional

from .base_service import BaseService


class SystemManagementService(BaseService):
    """Business service for file watcher monitoring and configuration."""

    def get_file_watcher_status(self) -> Dict[str, Any]:
        """
        Get file watcher status.

        Returns:
            Dictionary with status, configuration and recommendations
        """
        if self._validate_project_setup():
            return {"status": "not_initialized", "message": "Project path not set"}

        configuration = self.settings.get_file_watcher_config() if self.settings else {}
        watcher = self.helper.file_watcher_service
        if watcher is None:
            recommendations = ["Use refresh_index tool for manual updates"]
            if configuration.get('enabled', True):
                recommendations.append("Call set_project_path again to restart the file watcher")
            return {
                "status": "not_running",
                "configuration": configuration,
                "recommendations": recommendations,
            }

        status = watcher.get_status()
        status["status"] = "active" if status["active"] else "stopped"
        status["configuration"] = configuration
        return status

    def configure_file_watcher(self, enabled: Optional[bool] = None,
                               debounce_seconds: Optional[float] = None,
                               additional_exclude_patterns: Optional[list] = None) -> str:
        """
        Configure file watcher settings.

        Returns:
            Success message with configuration details

        Raises:
            ValueError: If configuration is invalid
        """
        self._require_project_setup()

        if debounce_seconds is not None and not 0.1 <= debounce_seconds <= 300:
            raise ValueError("debounce_seconds must be between 0.1 and 300 seconds")
        if additional_exclude_patterns is not None and not all(
                isinstance(p, str) for p in additional_exclude_patterns):
            raise ValueError("additional_exclude_patterns must be a list of strings")

        updates = {}
        if enabled is not None:
            updates["enabled"] = enabled
        if debounce_seconds is not None:
            updates["debounce_seconds"] = debounce_seconds
        if additional_exclude_patterns is not None:
            updates["additional_exclude_patterns"] = additional_exclude_patterns

        if not updates:
            return "No file watcher settings changed."

        self.settings.update_file_watcher_config(updates)
        return (f"File watcher configuration updated: {updates}. "
                "Changes take effect the next time the project path is set.")
