"""
Project symbol index for view.tree workspaces.

This package scans tree files and their TypeScript companions into a
component table, keeps it fresh one file at a time and resolves property
inheritance along base-class chains.
"""

from .framework import FRAMEWORK_COMPONENTS, FrameworkComponent, get_framework_component
from .index_builder import ProjectIndexBuilder
from .index_manager import ProjectIndexManager
from .inheritance import effective_properties, inheritance_chain
from .models import ComponentEntry, DocumentSymbol, IndexPatch, IndexStats
from .project_index import IndexAccessor, ProjectIndex

__all__ = [
    "FRAMEWORK_COMPONENTS",
    "ComponentEntry",
    "DocumentSymbol",
    "FrameworkComponent",
    "IndexAccessor",
    "IndexPatch",
    "IndexStats",
    "ProjectIndex",
    "ProjectIndexBuilder",
    "ProjectIndexManager",
    "effective_properties",
    "get_framework_component",
    "inheritance_chain",
]
