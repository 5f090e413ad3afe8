"""
File Watcher Service for incremental index updates.

This module watches the project directory with the watchdog library and
patches the project index one file at a time: created and modified files
are re-extracted, deleted files are forgotten, and moves do both.
"""

import logging
import threading
from pathlib import Path
from threading import Timer
from typing import Callable, Dict, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..utils import FileFilter
from .base_service import BaseService

UPDATE = "update"
REMOVE = "remove"


class FileWatcherService(BaseService):
    """
    Service for monitoring file system changes and patching the index.

    Events are filtered to tree and typed-source files, coalesced per path
    during a debounce window and then applied sequentially.
    """

    def __init__(self, ctx):
        """
        Initialize the file watcher service.

        Args:
            ctx: The MCP Context object
        """
        super().__init__(ctx)
        self.logger = logging.getLogger(__name__)
        self.observer: Optional[Observer] = None
        self.event_handler: Optional[DebounceEventHandler] = None
        self.is_monitoring = False

    def start_monitoring(self, update_callback: Callable[[str], object],
                         remove_callback: Callable[[str], object]) -> bool:
        """
        Start file system monitoring.

        Args:
            update_callback: Called with the path of a created or modified file
            remove_callback: Called with the path of a deleted file

        Returns:
            True if monitoring started successfully, False otherwise
        """
        if self.is_monitoring:
            self.logger.debug("File watcher already monitoring")
            return True

        error = self._validate_project_setup()
        if error:
            self.logger.error("Cannot start file watcher: %s", error)
            return False

        config = self.settings.get_file_watcher_config()
        debounce_seconds = config.get('debounce_seconds', 6.0)

        try:
            self.event_handler = DebounceEventHandler(
                debounce_seconds=debounce_seconds,
                update_callback=update_callback,
                remove_callback=remove_callback,
                base_path=Path(self.base_path),
                logger=self.logger,
                additional_excludes=config.get('additional_exclude_patterns', []),
            )
            self.observer = Observer()
            self.observer.schedule(self.event_handler, str(self.base_path), recursive=True)
            self.observer.start()
            self.is_monitoring = True
    
            if self.observer.is_alive():
                self.logger.info("File watcher started for %s (debounce %.1fs)",
                                 self.base_path, debounce_seconds)
                return True

            self.logger.error("File watcher failed to start - Observer not alive")
            return False

        except OSError as e:
            self.logger.warning("Failed to start file watcher: %s", e)
            self.logger.info("Falling back to manual index refresh")
            return False

    def stop_monitoring(self) -> None:
        """Stop the observer, drop pending events and reset state."""
        if not self.observer and not self.is_monitoring:
            return

        self.logger.info("Stopping file watcher monitoring...")

        if self.event_handler:
            self.event_handler.cancel()

        if self.observer:
            self.observer.stop()
            self.observer.join(timeout=5.0)
            if self.observer.is_alive():
                self.logger.warning("Observer thread did not stop within timeout")

        self.observer = None
        self.event_handler = None
        self.is_monitoring = False
        self.logger.info("File watcher stopped")

    def is_active(self) -> bool:
        """
        Check if file watcher is actively monitoring.

        Returns:
            True if actively monitoring, False otherwise
        """
        return bool(self.is_monitoring and self.observer and self.observer.is_alive())

    def get_status(self) -> dict:
        """
        Get current file watcher status information.

        Returns:
            Dictionary containing status information
        """
        config = self.settings.get_file_watcher_config() if self.settings else {}

        return {
            "active": self.is_active(),
            "monitoring": self.is_monitoring,
            "debounce_seconds": config.get('debounce_seconds', 6.0),
            "pending_events": self.event_handler.pending_count() if self.event_handler else 0,
            "base_path": self.base_path if self.base_path else None,
            "observer_alive": self.observer.is_alive() if self.observer else False
        }


class DebounceEventHandler(FileSystemEventHandler):
    """
    File system event handler with per-path coalescing.

    Every relevant event records the latest action for its path; when no
    event arrived for ``debounce_seconds`` the pending actions are applied
    in arrival order.
    """

    def __init__(self, debounce_seconds: float,
                 update_callback: Callable[[str], object],
                 remove_callback: Callable[[str], object],
                 base_path: Path, logger: logging.Logger,
                 additional_excludes: Optional[List[str]] = None):
        """
        Initialize the debounce event handler.

        Args:
            debounce_seconds: Quiet period before pending actions are applied
            update_callback: Re-extracts one file into the index
            remove_callback: Drops one file's contribution from the index
            base_path: Base project path for filtering
            logger: Logger instance for debug messages
            additional_excludes: Additional directory names to exclude
        """
        super().__init__()
        self.debounce_seconds = debounce_seconds
        self.update_callback = update_callback
        self.remove_callback = remove_callback
        self.base_path = base_path
        self.logger = logger
        self.debounce_timer: Optional[Timer] = None
        self._pending: Dict[str, str] = {}
        self._lock = threading.Lock()

        # Use centralized file filtering
        self.file_filter = FileFilter(additional_excludes)

    def on_any_event(self, event: FileSystemEvent) -> None:
        """
        Handle any file system event.

        Args:
            event: The file system event
        """
        if event.is_directory:
            self.logger.debug("Skipping directory event: %s", event.src_path)
            return

        if event.event_type == 'moved':
            dest_path = getattr(event, 'dest_path', None)
            self._record(event.src_path, REMOVE)
            if dest_path:
                self._record(dest_path, UPDATE)
        elif event.event_type == 'deleted':
            self._record(event.src_path, REMOVE)
        elif event.event_type in ('created', 'modified'):
            self._record(event.src_path, UPDATE)
        else:
            self.logger.debug("Ignoring %s event for %s", event.event_type, event.src_path)

    def should_process_path(self, path: str) -> bool:
        """
        Determine if an event path concerns the index.

        Args:
            path: Absolute path reported by the event

        Returns:
            True if the path is a tree or typed-source file of the project
        """
        target = Path(path)
        if self.file_filter.is_temporary_file(target):
            return False
        return self.file_filter.should_process_path(target, self.base_path)

    def _record(self, path: str, action: str) -> None:
        if not self.should_process_path(path):
            self.logger.debug("Filtered: %s - %s", action, path)
            return

        self.logger.info("File changed: %s - %s", action, path)
        with self._lock:
            # Re-insert so the latest action for a path is applied last
            self._pending.pop(path, None)
            self._pending[path] = action
        self.reset_debounce_timer()

    def reset_debounce_timer(self) -> None:
        """Reset the debounce timer, canceling any existing timer."""
        with self._lock:
            if self.debounce_timer:
                self.debounce_timer.cancel()

            self.debounce_timer = Timer(self.debounce_seconds, self.flush)
            self.debounce_timer.daemon = True
            self.debounce_timer.start()

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def cancel(self) -> None:
        """Drop pending actions and stop the timer."""
        with self._lock:
            if self.debounce_timer:
                self.debounce_timer.cancel()
                self.debounce_timer = None
            self._pending.clear()

    def flush(self) -> None:
        """Apply every pending action, one path at a time."""
        with self._lock:
            pending = list(self._pending.items())
            self._pending.clear()

        for path, action in pending:
            callback = self.update_callback if action == UPDATE else self.remove_callback
            try:
                callback(path)
            except Exception as e:
                self.logger.error("Index %s failed for %s: %s", action, path, e, exc_info=True)
