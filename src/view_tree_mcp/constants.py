"""
Shared constants for the view.tree MCP server.
"""

# Directory and file names
SETTINGS_DIR = "view_tree_mcp"
CONFIG_FILE = "config.json"

# view.tree syntax
SIGIL = "$"
INDENT_CHAR = "\t"
BINDING_OPERATORS = ("<=>", "<=", "=>")  # longest first
OVERRIDE_MARKER = "^"
LIST_MARKER = "/"
DICT_MARKER = "*"
STRING_MARKER = "\\"
LOCALIZE_MARKER = "@"
VALUE_LITERALS = ("true", "false", "null")

# File naming conventions
TREE_EXTENSION = ".view.tree"
TYPED_EXTENSION = ".ts"
DECLARATION_EXTENSION = ".d.ts"
GENERATED_DIR = "-view.tree"

# Sibling files moved together when a component is renamed
RENAME_SIBLING_EXTENSIONS = ['.ts', '.view.tree', '.view.ts', '.view.css.ts', '.test.ts']

# Shape of the generated -view.tree/*.d.ts files. These must change together
# with the declaration generator's output layout.
MAP_HEADER_LINES = 3
MAP_TRAILING_TRIM = 5

# Centralized filtering configuration
FILTER_CONFIG = {
    "exclude_directories": {
        # Version control
        '.git', '.svn', '.hg', '.bzr',

        # Package managers & dependencies
        'node_modules', '__pycache__', '.venv', 'venv',
        'vendor', 'bower_components',

        # IDE & editors
        '.idea', '.vscode', '.vs',

        # OS artifacts
        '.DS_Store', 'Thumbs.db', 'desktop.ini'
    },

    # MAM build output lives in directories prefixed with '-' ("-", "-css", "-view.tree")
    "exclude_directory_prefixes": ('-',),

    "exclude_files": {
        # Temporary files
        '*.tmp', '*.temp', '*.swp', '*.swo',

        # Backup files
        '*.bak', '*~', '*.orig',
    },

    "supported_suffixes": (TREE_EXTENSION, TYPED_EXTENSION),
    "excluded_suffixes": (DECLARATION_EXTENSION,),
}
