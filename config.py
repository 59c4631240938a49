"""
Configuration constants for the Parquet preview tool.

All display conventions live here so the headless report and the
interactive viewer render identical text for the same file.
"""

# =============================================================================
# CONFIGURATION SECTION - Defaults for the preview pipeline
# =============================================================================

# Number of rows previewed when --rows is not given
DEFAULT_ROW_COUNT = 20

# Rows shown per page in the interactive viewer
DEFAULT_PAGE_SIZE = 20

# Default folder for --log-file names generated by the CLI
DEFAULT_LOGS_FOLDER = 'logs'

# =============================================================================
# FORMATTING CONVENTIONS
# =============================================================================

# Rendered for a null cell of any type
NULL_SENTINEL = 'null'

# Separator between columns in the headless report
COLUMN_SEPARATOR = ' | '

# Separator between list elements and struct fields
LIST_DELIMITER = ', '

# Binary values longer than this are truncated in the display
MAX_BINARY_PREVIEW_BYTES = 32

# Sub-second digits shown for each timestamp unit
TIMESTAMP_FRACTION_DIGITS = {'s': 0, 'ms': 3, 'us': 6, 'ns': 9}

# Characters escaped inside a single report/viewer cell
CELL_ESCAPES = {'\n': '\\n', '\r': '\\r', '\t': '\\t'}

# =============================================================================
# INTERACTIVE VIEWER
# =============================================================================

# Cells wider than this are cut with TRUNCATION_MARKER in the viewer
MAX_COLUMN_WIDTH = 40
TRUNCATION_MARKER = '...'

# Logical type names that are right-aligned in the viewer
NUMERIC_TYPE_NAMES = {'integer', 'float', 'decimal'}

VIEWER_COMMANDS = {
    'n': 'next page',
    'p': 'previous page',
    'g <row>': 'go to row',
    's <row> <col>': 'select cell',
    'q': 'quit'
}

PROMPTS = {
    'command': "Command (n/p/g <row>/s <row> <col>/q): ",
}
