"""
Project symbol index: component name -> ComponentEntry.

The index has a single writer (the index manager, driven by the initial
scan and by file-system events). Readers only ever see immutable snapshots
handed out by ``view()``: every write builds a new mapping and swaps it in,
so a reader observes either the state before or after a per-file update.
"""

import logging
import threading
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .models import ComponentEntry, IndexPatch

logger = logging.getLogger(__name__)

IndexAccessor = Callable[[], Mapping[str, ComponentEntry]]


class ProjectIndex:
    """Workspace-wide component table kept fresh one file at a time."""

    def __init__(self):
        self._lock = threading.RLock()
        self._mapping: Dict[str, ComponentEntry] = {}
        # Last known contribution of every file, used for removal without a rescan
        self._file_entries: Dict[str, Tuple[ComponentEntry, ...]] = {}
        # Files declaring each name, oldest first; the last one wins
        self._declarers: Dict[str, List[str]] = {}

    @classmethod
    def from_contributions(cls, contributions: Iterable[Tuple[str, Iterable[ComponentEntry]]]) -> 'ProjectIndex':
        """Build an index from (path, entries) pairs applied in order."""
        index = cls()
        for path, entries in contributions:
            index._record(path, tuple(entries))
        mapping: Dict[str, ComponentEntry] = {}
        for name in index._declarers:
            resolved = index._resolve(name)
            if resolved is not None:
                mapping[name] = resolved
        index._mapping = mapping
        return index

    # ----- read access -----

    def view(self) -> Mapping[str, ComponentEntry]:
        """Read-only snapshot of the current mapping."""
        return MappingProxyType(self._mapping)

    def get(self, name: str) -> Optional[ComponentEntry]:
        return self._mapping.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def files(self) -> List[str]:
        with self._lock:
            return sorted(self._file_entries)

    # ----- single writer -----

    def apply_file(self, path: str, entries: Iterable[ComponentEntry]) -> IndexPatch:
        """Delete everything the file contributed before, then insert its fresh entries."""
        entries = tuple(entries)
        with self._lock:
            mapping = dict(self._mapping)
            previous = self._forget(path)
            removed = self._owned_by(mapping, path, previous)

            self._record(path, entries)
            self._refresh(mapping, set(previous) | {entry.name for entry in entries})
            self._mapping = mapping

        patch = IndexPatch(path=path, removed=removed, added=[e.name for e in entries])
        logger.debug("Applied %s: removed=%s added=%s", path, patch.removed, patch.added)
        return patch

    def discard_file(self, path: str) -> IndexPatch:
        """Remove the entries the file's last known content produced."""
        with self._lock:
            if path not in self._file_entries:
                return IndexPatch(path=path, removed=[], added=[])
            mapping = dict(self._mapping)
            previous = self._forget(path)
            removed = self._owned_by(mapping, path, previous)
            self._refresh(mapping, previous)
            self._mapping = mapping

        logger.debug("Discarded %s: removed=%s", path, removed)
        return IndexPatch(path=path, removed=removed, added=[])

    def _record(self, path: str, entries: Tuple[ComponentEntry, ...]) -> None:
        self._file_entries[path] = entries
        for entry in entries:
            declarers = self._declarers.setdefault(entry.name, [])
            if path in declarers:
                declarers.remove(path)
            declarers.append(path)

    def _forget(self, path: str) -> List[str]:
        """Drop a file's contribution; returns the names it declared."""
        names = [entry.name for entry in self._file_entries.pop(path, ())]
        for name in names:
            declarers = self._declarers.get(name, [])
            if path in declarers:
                declarers.remove(path)
            if not declarers:
                self._declarers.pop(name, None)
        return names

    @staticmethod
    def _owned_by(mapping: Dict[str, ComponentEntry], path: str, names: List[str]) -> List[str]:
        return [name for name in names
                if name in mapping and mapping[name].declaring_file == path]

    def _refresh(self, mapping: Dict[str, ComponentEntry], names: Iterable[str]) -> None:
        for name in names:
            resolved = self._resolve(name)
            if resolved is None:
                mapping.pop(name, None)
            else:
                mapping[name] = resolved

    def _resolve(self, name: str) -> Optional[ComponentEntry]:
        """
        Entry visible for a name.

        The most recent plain declarer wins. Refinements of the generated
        class are then merged over it in declaration order, so a component's
        .view.ts keeps the properties and base class of its view.tree.
        """
        entries = [self._entry_from(path, name) for path in self._declarers.get(name, ())]
        entries = [entry for entry in entries if entry is not None]

        plain = [entry for entry in entries if not entry.refines_generated]
        resolved = plain[-1] if plain else None
        for entry in entries:
            if entry.refines_generated:
                resolved = entry.refining(resolved) if resolved is not None else entry
        return resolved

    def _entry_from(self, path: str, name: str) -> Optional[ComponentEntry]:
        for entry in self._file_entries.get(path, ()):
            if entry.name == name:
                return entry
        return None
