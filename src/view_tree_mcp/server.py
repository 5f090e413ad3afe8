"""
view.tree MCP Server

This MCP server gives LLMs language intelligence for $mol view.tree projects:
definitions, implementations, completions, hover, rename planning and
structural diagnostics, all backed by an incrementally maintained project
index.

MCP decorators delegate to domain-specific services for business logic.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, AsyncIterator, Dict, List

from mcp.server.fastmcp import Context, FastMCP

from .indexing import ProjectIndexManager
from .project_settings import ProjectSettings
from .services import (
    FileWatcherService,
    IndexManagementService,
    LanguageService,
    ProjectManagementService,
    SystemManagementService,
)
from .utils import handle_mcp_resource_errors, handle_mcp_tool_errors


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(transport_mode: str = "stdio"):
    """
    Console logging at LOG_LEVEL (default INFO).

    The stdio transport owns stdout, so logs go to stderr only. Over HTTP,
    records go to stdout and errors are repeated on stderr.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    if transport_mode == "stdio":
        targets = ((sys.stderr, level),)
    else:
        targets = ((sys.stdout, level), (sys.stderr, logging.ERROR))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for stream, stream_level in targets:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(formatter)
        handler.setLevel(stream_level)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


logger = logging.getLogger(__name__)


@dataclass
class ViewTreeContext:
    """Context for the view.tree MCP server."""

    base_path: str
    settings: ProjectSettings
    index_manager: ProjectIndexManager = None
    file_watcher_service: FileWatcherService = None


@asynccontextmanager
async def view_tree_lifespan(_server: FastMCP) -> AsyncIterator[ViewTreeContext]:
    """Manage the lifecycle of the view.tree MCP server."""
    # No default path, the project is set explicitly or through the environment
    context = ViewTreeContext(base_path="", settings=ProjectSettings("", skip_load=True))

    startup_path = os.getenv("VIEW_TREE_PROJECT_PATH")
    if startup_path:
        # Services only read request_context.lifespan_context from their ctx
        startup_ctx = SimpleNamespace(request_context=SimpleNamespace(lifespan_context=context))
        try:
            logger.info(ProjectManagementService(startup_ctx).initialize_project(startup_path))
        except (ValueError, RuntimeError, OSError) as e:
            logger.error(f"Failed to open VIEW_TREE_PROJECT_PATH {startup_path}: {e}")

    try:
        yield context
    finally:
        if context.file_watcher_service:
            context.file_watcher_service.stop_monitoring()
        if context.index_manager:
            context.index_manager.cleanup()


mcp = FastMCP("ViewTree", lifespan=view_tree_lifespan)

# ----- RESOURCES -----


@mcp.resource("config://view-tree")
@handle_mcp_resource_errors
def get_config() -> str:
    """Get the current configuration of the view.tree server."""
    ctx = mcp.get_context()
    return ProjectManagementService(ctx).get_project_config()


# ----- TOOLS -----


@mcp.tool()
@handle_mcp_tool_errors(return_type="str")
def set_project_path(path: str, ctx: Context) -> str:
    """Set the base project path and build the component index."""
    # Pasted paths often carry line breaks
    clean_path = path.replace("\r", "").replace("\n", "").strip()
    return ProjectManagementService(ctx).initialize_project(clean_path)


@mcp.tool()
@handle_mcp_tool_errors(return_type="str")
def refresh_index(ctx: Context) -> str:
    """
    Rescan the whole project and replace the component index.

    Use when:
    - File watcher is disabled or unavailable
    - After large-scale operations (git checkout, merge, pull)
    - When completions or definitions look stale
    """
    return IndexManagementService(ctx).rebuild_index()


@mcp.tool()
@handle_mcp_tool_errors(return_type="dict")
def get_index_stats(ctx: Context) -> Dict[str, Any]:
    """Get component and file counts of the project index."""
    return IndexManagementService(ctx).get_index_stats()


@mcp.tool()
@handle_mcp_tool_errors(return_type="dict")
def list_components(ctx: Context) -> Dict[str, Any]:
    """List every indexed component with its base class and own properties."""
    return IndexManagementService(ctx).list_components()


@mcp.tool()
@handle_mcp_tool_errors(return_type="list")
def resolve_definition(file_path: str, line: int, character: int, ctx: Context,
                       content: str = None) -> List[Dict[str, Any]]:
    """
    Find where the token at a position of a .view.tree file is defined.

    Args:
        file_path: Tree file, relative to the project root or absolute
        line: 0-based line
        character: 0-based character
        content: Optional unsaved document text

    Returns:
        List of locations with absolute path and 0-based range
    """
    return LanguageService(ctx).resolve_definition(file_path, line, character, content)


@mcp.tool()
@handle_mcp_tool_errors(return_type="list")
def resolve_implementation(file_path: str, line: int, character: int, ctx: Context,
                           content: str = None) -> List[Dict[str, Any]]:
    """Find the implementations of the token at a position of a .view.tree file."""
    return LanguageService(ctx).resolve_implementation(file_path, line, character, content)


@mcp.tool()
@handle_mcp_tool_errors(return_type="list")
def get_completions(file_path: str, line: int, character: int, ctx: Context,
                    content: str = None) -> List[Dict[str, Any]]:
    """
    Ranked completion candidates at a position of a .view.tree file.

    Candidates are sorted by rank (0 project, 1 framework, 2 generic) and
    then by label.
    """
    return LanguageService(ctx).provide_completions(file_path, line, character, content)


@mcp.tool()
@handle_mcp_tool_errors(return_type="dict")
def get_hover_info(file_path: str, line: int, character: int, ctx: Context,
                   content: str = None) -> Dict[str, Any]:
    """Describe the component or property at a position of a .view.tree file."""
    return LanguageService(ctx).provide_hover_info(file_path, line, character, content)


@mcp.tool()
@handle_mcp_tool_errors(return_type="list")
def find_rename_targets(component_name: str, ctx: Context) -> List[Dict[str, Any]]:
    """Every occurrence of a component name in tree and TypeScript files."""
    return LanguageService(ctx).find_rename_targets(component_name)


@mcp.tool()
@handle_mcp_tool_errors(return_type="list")
def plan_component_rename(old_name: str, new_name: str, ctx: Context) -> List[Dict[str, str]]:
    """
    Plan the file moves for renaming a component.

    The new name gets a leading $ when missing and must not be taken yet.
    Nothing is changed on disk.
    """
    return LanguageService(ctx).plan_file_renames(old_name, new_name)


@mcp.tool()
@handle_mcp_tool_errors(return_type="list")
def validate_tree_document(file_path: str, ctx: Context, content: str = None) -> List[Dict[str, Any]]:
    """Structural diagnostics for a .view.tree file."""
    return LanguageService(ctx).validate_document(file_path, content)


@mcp.tool()
@handle_mcp_tool_errors(return_type="dict")
def get_file_watcher_status(ctx: Context) -> Dict[str, Any]:
    """Get file watcher service status and statistics."""
    return SystemManagementService(ctx).get_file_watcher_status()


@mcp.tool()
@handle_mcp_tool_errors(return_type="str")
def configure_file_watcher(
    ctx: Context,
    enabled: bool = None,
    debounce_seconds: float = None,
    additional_exclude_patterns: list = None,
) -> str:
    """Configure file watcher service settings."""
    return SystemManagementService(ctx).configure_file_watcher(
        enabled, debounce_seconds, additional_exclude_patterns
    )


def main():
    """Run the server over stdio, or over HTTP/SSE when MCP_TRANSPORT=http."""
    transport_mode = os.getenv("MCP_TRANSPORT", "stdio")
    setup_logging(transport_mode)

    if transport_mode != "http":
        logger.info("view.tree MCP server listening on stdio")
        mcp.run()
        return

    # nosec B104: containers publish the port, so bind every interface
    mcp.settings.host = os.getenv("HOST", "0.0.0.0")  # nosec B104
    mcp.settings.port = int(os.getenv("PORT", "8080"))
    logger.info("view.tree MCP server listening on %s:%d (SSE)", mcp.settings.host, mcp.settings.port)
    mcp.run(transport="sse")


if __name__ == "__main__":
    main()
