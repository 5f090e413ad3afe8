"""
Property inheritance along base-class chains.
"""

from typing import Mapping, Optional, Set

from .framework import get_framework_component
from .models import ComponentEntry


def effective_properties(name: str, index: Mapping[str, ComponentEntry],
                         visited: Optional[Set[str]] = None) -> Set[str]:
    """
    Own plus inherited properties of a component.

    ``visited`` bounds the recursion: a name seen twice contributes nothing,
    so cyclic chains terminate and drop whatever is only reachable through
    the cycle.
    """
    if visited is None:
        visited = set()
    if name in visited:
        return set()
    visited.add(name)

    entry = index.get(name)
    if entry is not None:
        properties, base_class = set(entry.properties), entry.base_class
    else:
        framework = get_framework_component(name)
        if framework is None:
            return set()
        properties, base_class = set(framework.properties), framework.base_class

    if base_class:
        properties |= effective_properties(base_class, index, visited)
    return properties


def inheritance_chain(name: str, index: Mapping[str, ComponentEntry]) -> list:
    """Names from the component up to its root base, stopping at the first repeat."""
    chain = []
    current = name
    while current and current not in chain:
        chain.append(current)
        entry = index.get(current)
        if entry is not None:
            current = entry.base_class
        else:
            framework = get_framework_component(current)
            current = framework.base_class if framework else None
    return chain
