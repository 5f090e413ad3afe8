"""
Editor intelligence over parsed view.tree documents: reference resolution,
completion, hover, rename planning and structural diagnostics.
"""

from .completion import Candidate, CandidateKind, CompletionContext, CompletionRanker, completion_context
from .diagnostics import Diagnostic, validate_document
from .document import TextDocument
from .hover import HoverInfo, HoverProvider
from .rename import RenamePlanner
from .resolver import ReferenceResolver, companion_path
from .source_maps import SourceMapLookup, generated_paths
from .typed_source import LocationLink, TreeSitterTypedSourceService, TypedSourceService, WorkspaceSymbol

__all__ = [
    "Candidate",
    "CandidateKind",
    "CompletionContext",
    "CompletionRanker",
    "Diagnostic",
    "HoverInfo",
    "HoverProvider",
    "LocationLink",
    "ReferenceResolver",
    "RenamePlanner",
    "SourceMapLookup",
    "TextDocument",
    "TreeSitterTypedSourceService",
    "TypedSourceService",
    "WorkspaceSymbol",
    "companion_path",
    "completion_context",
    "generated_paths",
    "validate_document",
]
