"""
Hover information for components and properties.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import INDENT_CHAR, SIGIL
from ..indexing.framework import (
    PROPERTY_DESCRIPTIONS, PROPERTY_EXAMPLES, get_framework_component, property_type,
)
from ..indexing.inheritance import effective_properties, inheritance_chain
from ..indexing.project_index import IndexAccessor
from ..syntax.classifier import SIGIL_WORD_PATTERN, text_in_range, word_range_at
from ..syntax.models import Position, Range
from .document import TextDocument


@dataclass
class HoverInfo:
    title: str
    properties: List[str] = field(default_factory=list)
    description: str = ""
    range: Optional[Range] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "properties": self.properties,
            "description": self.description,
            "range": self.range.to_dict() if self.range else None,
        }


class HoverProvider:
    """Describes the component or property under the cursor."""

    def __init__(self, index_accessor: IndexAccessor):
        self.index_accessor = index_accessor

    def provide_hover_info(self, document: TextDocument, position: Position) -> Optional[HoverInfo]:
        word_range = word_range_at(document.lines, position, SIGIL_WORD_PATTERN)
        if word_range is None:
            return None
        word = text_in_range(document.lines, word_range)

        if word.startswith(SIGIL):
            return self.component_hover(word, word_range)

        component = self._enclosing_component(document.lines, position.line)
        if component is None:
            return None
        return self.property_hover(word, component, word_range)

    def component_hover(self, name: str, word_range: Optional[Range] = None) -> Optional[HoverInfo]:
        index = self.index_accessor()
        entry = index.get(name)
        if entry is not None:
            chain = inheritance_chain(name, index)
            description = f"Declared in {os.path.basename(entry.declaring_file)}"
            if len(chain) > 1:
                description += f"; extends {' > '.join(chain[1:])}"
            return HoverInfo(
                title=name,
                properties=sorted(effective_properties(name, index)),
                description=description,
                range=word_range,
            )

        framework = get_framework_component(name)
        if framework is not None:
            return HoverInfo(
                title=name,
                properties=sorted(framework.properties),
                description=f"Built-in $mol component: {framework.description}",
                range=word_range,
            )
        return None

    def property_hover(self, name: str, component: str, word_range: Optional[Range] = None) -> Optional[HoverInfo]:
        known = effective_properties(component, self.index_accessor())
        if name not in known and name not in PROPERTY_DESCRIPTIONS:
            return None

        parts = [f"Type: {property_type(name)}"]
        if name in known:
            parts.insert(0, f"Property of {component}")
        else:
            parts.append("Common property")
        if name in PROPERTY_DESCRIPTIONS:
            parts.append(PROPERTY_DESCRIPTIONS[name])
        if name in PROPERTY_EXAMPLES:
            parts.append(f"Example:\n{PROPERTY_EXAMPLES[name]}")

        return HoverInfo(title=name, properties=[], description="\n".join(parts), range=word_range)

    @staticmethod
    def _enclosing_component(lines: List[str], line_no: int) -> Optional[str]:
        for i in range(min(line_no, len(lines)) - 1, -1, -1):
            text = lines[i]
            if not text.startswith(INDENT_CHAR) and text.strip().startswith(SIGIL):
                return text.strip().split()[0]
        return None
