"""Tests for the MCP error handling decorators."""
import asyncio
import json

from view_tree_mcp.exceptions import ProjectNotSetError
from view_tree_mcp.utils import handle_mcp_errors, handle_mcp_resource_errors, handle_mcp_tool_errors


def failing(exc):
    def tool():
        raise exc
    return tool


def test_return_type_shapes():
    error = ProjectNotSetError("Project path not set")

    assert handle_mcp_errors("str")(failing(error))() == "Error: Project path not set"
    assert handle_mcp_tool_errors("dict")(failing(error))() == {
        "error": "Operation failed: Project path not set"}
    assert handle_mcp_tool_errors("list")(failing(error))() == [
        {"error": "Operation failed: Project path not set"}]
    assert json.loads(handle_mcp_errors("json")(failing(error))())["error"].endswith("not set")


def test_resource_errors_render_as_text():
    assert handle_mcp_resource_errors(failing(ValueError("bad")))() == "Error: bad"


def test_successful_calls_pass_through():
    @handle_mcp_tool_errors(return_type="list")
    def tool(value):
        return [value]

    assert tool(3) == [3]


def test_async_functions_are_wrapped():
    @handle_mcp_errors(return_type="dict")
    async def tool():
        raise RuntimeError("boom")

    assert asyncio.run(tool()) == {"error": "Operation failed: boom"}


def test_messageless_errors_use_the_class_name():
    assert handle_mcp_errors()(failing(KeyError()))() == "Error: KeyError"
