"""
Data models for the project symbol index.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from ..syntax.models import Range


@dataclass(frozen=True)
class ComponentEntry:
    """A component declared by one workspace file."""
    name: str  # sigil-prefixed, e.g. $my_button
    properties: FrozenSet[str]
    base_class: Optional[str]
    declaring_file: str  # absolute path
    # class $x extends $.$x: adds members to the class generated from $x's view.tree
    refines_generated: bool = False

    def refining(self, generated: 'ComponentEntry') -> 'ComponentEntry':
        """This refinement merged over the entry it refines."""
        return ComponentEntry(
            name=self.name,
            properties=generated.properties | self.properties,
            base_class=generated.base_class,
            declaring_file=self.declaring_file,
            refines_generated=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "properties": sorted(self.properties),
            "base_class": self.base_class,
            "declaring_file": self.declaring_file,
        }


@dataclass
class DocumentSymbol:
    """A symbol declared in a typed-source file, nested like its declarations."""
    name: str
    kind: str  # namespace, class, method, field, property
    range: Range
    selection_range: Range
    detail: Optional[str] = None  # class heritage text for classes
    children: List['DocumentSymbol'] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "range": self.range.to_dict(),
            "selection_range": self.selection_range.to_dict(),
            "detail": self.detail,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class IndexPatch:
    """Effect of one per-file index update."""
    path: str
    removed: List[str]
    added: List[str]

    @property
    def is_empty(self) -> bool:
        return not self.removed and not self.added


@dataclass
class IndexStats:
    """Summary of the current index."""
    project_path: str
    indexed_files: int
    components: int
    skipped_files: int = 0
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_path": self.project_path,
            "indexed_files": self.indexed_files,
            "components": self.components,
            "skipped_files": self.skipped_files,
            "timestamp": self.timestamp,
        }
