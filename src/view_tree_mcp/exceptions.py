"""
Exceptions raised by the view.tree language services.

Lookup misses are never exceptions; these cover invalid caller input and
aborted work only.
"""


class ViewTreeError(Exception):
    """Base class for all view.tree service errors."""


class ProjectNotSetError(ViewTreeError, ValueError):
    """Raised when an operation needs a project path and none is set."""


class RenameError(ViewTreeError, ValueError):
    """Raised when a rename request is invalid or conflicts with an existing component."""


class ScanCancelledError(ViewTreeError):
    """Raised when a workspace scan is cancelled before it finished."""
