"""
Decorators that turn exceptions raised by services into MCP payloads.

Every tool and resource of the server is wrapped, so a failing request
reports its error to the client instead of tearing down the session.
"""

import asyncio
import functools
import json
import logging
from typing import Any, Callable, Dict

from ..exceptions import ViewTreeError

logger = logging.getLogger(__name__)


def _error_payload(message: str) -> Dict[str, str]:
    return {"error": f"Operation failed: {message}"}


_FORMATTERS: Dict[str, Callable[[str], Any]] = {
    "str": lambda message: f"Error: {message}",
    "dict": _error_payload,
    "json": lambda message: json.dumps(_error_payload(message)),
    "list": lambda message: [_error_payload(message)],
}


def _report(func: Callable, error: Exception, return_type: str) -> Any:
    # Expected failures (bad input, no project) are not worth a traceback
    if isinstance(error, (ViewTreeError, ValueError)):
        logger.info("%s rejected: %s", func.__name__, error)
    else:
        logger.error("%s failed: %s", func.__name__, error, exc_info=True)
    message = str(error) or error.__class__.__name__
    return _FORMATTERS.get(return_type, _FORMATTERS["str"])(message)


def handle_mcp_errors(return_type: str = "str") -> Callable:
    """
    Wrap a sync or async entry point so exceptions become error payloads.

    Args:
        return_type: Shape of the payload, matching the wrapped function:
            'str' -> "Error: <message>"
            'dict' -> {"error": "Operation failed: <message>"}
            'json' -> the dict payload serialized to a string
            'list' -> [the dict payload]
    """

    def decorator(func: Callable) -> Callable:
        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    return _report(func, e, return_type)

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return _report(func, e, return_type)

        return sync_wrapper

    return decorator


def handle_mcp_resource_errors(func: Callable) -> Callable:
    """Resources always return text."""
    return handle_mcp_errors(return_type="str")(func)


def handle_mcp_tool_errors(return_type: str = "str") -> Callable:
    """
    Error handling for tools.

    Example:
        @mcp.tool()
        @handle_mcp_tool_errors(return_type='list')
        def resolve_definition(file_path: str, line: int, character: int, ctx: Context):
            return LanguageService(ctx).resolve_definition(file_path, line, character)
    """
    return handle_mcp_errors(return_type=return_type)
