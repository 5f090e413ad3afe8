"""view.tree MCP Server package.

Language intelligence for $mol view.tree component files.
"""
__version__ = "0.1.0"
