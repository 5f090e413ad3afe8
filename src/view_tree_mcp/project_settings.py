"""
Per-project configuration for the view.tree MCP server.

The config is a small JSON document kept outside the watched project, so
writing it never triggers the file watcher. It has two sections:

    {
      "file_watcher": {"enabled": ..., "debounce_seconds": ..., "additional_exclude_patterns": [...]},
      "index": {"tree_extension": ..., "typed_extension": ..., "max_workers": ...}
    }

Missing keys fall back to ``SECTION_DEFAULTS``.
"""
import copy
import hashlib
import json
import logging
import os
import tempfile
from datetime import datetime

from .constants import CONFIG_FILE, SETTINGS_DIR, TREE_EXTENSION, TYPED_EXTENSION

logger = logging.getLogger(__name__)

FALLBACK_DIR = ".view_tree_mcp"

SECTION_DEFAULTS = {
    "file_watcher": {
        "enabled": True,
        "debounce_seconds": 6.0,
        "additional_exclude_patterns": [],
    },
    "index": {
        "tree_extension": TREE_EXTENSION,
        "typed_extension": TYPED_EXTENSION,
        "max_workers": None,  # one worker per CPU
    },
}


def settings_root() -> str:
    """Writable directory holding every project's settings folder."""
    root = tempfile.gettempdir()
    if not os.path.isdir(root) or not os.access(root, os.W_OK):
        root = os.path.expanduser("~")
    return os.path.join(root, SETTINGS_DIR)


class ProjectSettings:
    """Reads and writes the JSON config of one project."""

    def __init__(self, base_path, skip_load=False):
        """
        Args:
            base_path (str): Project directory, or "" before a project is set
            skip_load (bool): Ignore any config on disk and use defaults only
        """
        self.base_path = base_path
        self.skip_load = skip_load

        # One folder per project, keyed by a digest of its path
        folder = hashlib.md5(base_path.encode()).hexdigest() if base_path else "default"
        self.settings_path = os.path.join(settings_root(), folder)
        self.ensure_settings_dir()

    def ensure_settings_dir(self):
        """Create the settings folder, moving to the home directory if that fails"""
        try:
            os.makedirs(self.settings_path, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create settings directory {self.settings_path}: {e}")
        if os.access(self.settings_path, os.W_OK):
            return

        home_dir = os.path.join(os.path.expanduser("~"), FALLBACK_DIR,
                                os.path.basename(self.settings_path))
        os.makedirs(home_dir, exist_ok=True)
        self.settings_path = home_dir

    def get_config_path(self):
        return os.path.join(self.settings_path, CONFIG_FILE)

    def load_config(self) -> dict:
        """Config on disk; {} when skipped, missing or unreadable."""
        config_path = self.get_config_path()
        if self.skip_load or not os.path.exists(config_path):
            return {}
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            return {}
        return config if isinstance(config, dict) else {}

    def save_config(self, config: dict) -> dict:
        """Write the config, stamping it with the save time."""
        config_path = self.get_config_path()
        config['last_updated'] = datetime.now().isoformat()
        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Failed to save config to {config_path}: {e}")
        return config

    def clear(self):
        """Delete the config file, restoring defaults."""
        config_path = self.get_config_path()
        if not os.path.isfile(config_path):
            return
        try:
            os.unlink(config_path)
        except OSError as e:
            logger.warning(f"Failed to delete {config_path}: {e}")

    def get_section(self, name: str) -> dict:
        """One config section with defaults filled in."""
        section = copy.deepcopy(SECTION_DEFAULTS[name])
        stored = self.load_config().get(name)
        if isinstance(stored, dict):
            section.update(stored)
        return section

    def update_section(self, name: str, updates: dict) -> dict:
        """Merge updates into a section and save; returns the new section."""
        config = self.load_config()
        section = self.get_section(name)
        section.update(updates)
        config[name] = section
        self.save_config(config)
        return section

    def get_file_watcher_config(self) -> dict:
        return self.get_section("file_watcher")

    def update_file_watcher_config(self, updates: dict) -> None:
        self.update_section("file_watcher", updates)

    def get_index_config(self) -> dict:
        return self.get_section("index")
