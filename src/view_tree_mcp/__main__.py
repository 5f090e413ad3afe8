"""Allow running the server with ``python -m view_tree_mcp``."""
from .server import main

main()
