"""
Component rename planning.

Renaming a component touches every word-bounded occurrence of its name in
tree and typed-source files, plus the conventional sibling files named after
it. This module only plans; applying the edits is left to the caller.
"""

import logging
import os
import re
from typing import List, Optional, Tuple

from ..constants import RENAME_SIBLING_EXTENSIONS, SIGIL
from ..exceptions import RenameError
from ..indexing.index_builder import read_source, walk_workspace
from ..indexing.project_index import IndexAccessor
from ..syntax.models import Location, Range
from ..syntax.parser import split_lines
from ..utils.file_filter import FileFilter

logger = logging.getLogger(__name__)

COMPONENT_NAME_PATTERN = re.compile(r'^\$[a-zA-Z_][a-zA-Z0-9_]*$')


def normalize_component_name(name: str) -> str:
    name = name.strip()
    return name if name.startswith(SIGIL) else SIGIL + name


def occurrence_pattern(name: str) -> re.Pattern:
    """Matches ``name`` only when not glued to other identifier characters."""
    return re.compile(r'(?<![\w$])' + re.escape(name) + r'(?![\w$])')


def sibling_stems(old_name: str, new_name: str, declaring_file: str) -> Tuple[str, str]:
    """
    File stems of a component before and after a rename.

    MAM places $my_app_head in my/app/head/head.view.tree, so siblings are
    named after the last name segment; files named after the whole name
    (my_app_head.view.tree) are recognized too.
    """
    old_base = old_name[len(SIGIL):]
    new_base = new_name[len(SIGIL):]
    stem = os.path.basename(declaring_file).split('.', 1)[0]
    old_last = old_base.rsplit('_', 1)[-1]
    if stem != old_base and stem == old_last:
        return old_last, new_base.rsplit('_', 1)[-1]
    return old_base, new_base


class RenamePlanner:
    """Finds rename targets and sibling file moves for a component."""

    def __init__(self, project_root: str, index_accessor: IndexAccessor,
                 file_filter: Optional[FileFilter] = None):
        self.project_root = project_root
        self.index_accessor = index_accessor
        self.file_filter = file_filter or FileFilter()

    def validate_new_name(self, new_name: str) -> str:
        """
        Normalize and check a new component name.

        Raises:
            RenameError: if the name is malformed or already taken
        """
        new_name = normalize_component_name(new_name)
        if not COMPONENT_NAME_PATTERN.match(new_name):
            raise RenameError(
                f"Invalid component name '{new_name}'. Use only letters, numbers and underscores.")
        if new_name in self.index_accessor():
            raise RenameError(f"Component '{new_name}' already exists.")
        return new_name

    def find_rename_targets(self, old_name: str) -> List[Location]:
        """Every word-bounded occurrence of a component name in the workspace."""
        old_name = normalize_component_name(old_name)
        pattern = occurrence_pattern(old_name)
        locations = []

        for path in sorted(walk_workspace(self.project_root, self.file_filter)):
            try:
                content = read_source(path)
            except OSError as e:
                logger.warning(f"Error reading file for rename {path}: {e}")
                continue
            if old_name not in content:
                continue
            for line_no, line in enumerate(split_lines(content)):
                for match in pattern.finditer(line):
                    locations.append(Location(path, Range.on_line(line_no, match.start(), match.end())))

        logger.debug("Found %d occurrences of %s", len(locations), old_name)
        return locations

    def plan_file_renames(self, old_name: str, new_name: str) -> List[Tuple[str, str]]:
        """
        (old path, new path) pairs for the sibling files of a component.

        The component's own directory is included last when it is named after
        the component.

        Raises:
            RenameError: if the new name is invalid or already taken
        """
        old_name = normalize_component_name(old_name)
        new_name = self.validate_new_name(new_name)

        entry = self.index_accessor().get(old_name)
        if entry is None:
            return []

        old_stem, new_stem = sibling_stems(old_name, new_name, entry.declaring_file)
        component_dir = os.path.dirname(entry.declaring_file)

        renames = []
        for ext in RENAME_SIBLING_EXTENSIONS:
            old_path = os.path.join(component_dir, old_stem + ext)
            if os.path.exists(old_path):
                renames.append((old_path, os.path.join(component_dir, new_stem + ext)))

        if os.path.basename(component_dir) == old_stem and os.path.isdir(component_dir):
            renames.append((component_dir, os.path.join(os.path.dirname(component_dir), new_stem)))

        return renames
