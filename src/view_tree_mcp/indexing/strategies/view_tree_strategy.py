"""
view.tree extraction strategy built on the tree parser.
"""

import logging
from typing import List, Optional

from ...constants import TREE_EXTENSION
from ...syntax.models import Node, NodeKind
from ...syntax.parser import parse
from ..models import ComponentEntry
from .base_strategy import ExtractionStrategy

logger = logging.getLogger(__name__)


class ViewTreeExtractionStrategy(ExtractionStrategy):
    """Reads the component name, base class and properties of a view.tree file."""

    def __init__(self, extension: str = TREE_EXTENSION):
        self.extension = extension

    def get_language_name(self) -> str:
        return "view.tree"

    def get_supported_extensions(self) -> List[str]:
        return [self.extension]

    def extract(self, file_path: str, content: str) -> Optional[ComponentEntry]:
        root = parse(content)
        components = root.components()
        if not components:
            logger.debug("No component declared in %s", file_path)
            return None
        component = components[0]

        properties = set()
        for node in self._component_nodes(component):
            if (node.kind is NodeKind.PROPERTY_DECLARATION
                    and node.indent_depth == 1
                    and node.row_head is node):
                properties.add(node.text)
            elif node.kind is NodeKind.BINDING_OPERATOR and node.row_head.indent_depth >= 1:
                # bound properties may never be declared on a row of their own;
                # deeper rows under the operator belong to the bound sub-component
                for child in node.children:
                    if (child.kind is NodeKind.PROPERTY_DECLARATION
                            and child.span.line == node.span.line):
                        properties.add(child.text)

        return ComponentEntry(
            name=component.text,
            properties=frozenset(properties),
            base_class=component.base_class,
            declaring_file=file_path,
        )

    @staticmethod
    def _component_nodes(component: Node):
        for child in component.children:
            yield from child.walk()
