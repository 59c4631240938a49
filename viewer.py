"""
Interactive terminal viewer for a PreviewTable.

Pages through the previewed rows with single-letter commands typed at a
prompt. Only the rows already held by the PreviewTable are shown; the file
is never read again.
"""

import pandas as pd

from config import (
    DEFAULT_PAGE_SIZE, MAX_COLUMN_WIDTH, NUMERIC_TYPE_NAMES, PROMPTS,
    TRUNCATION_MARKER, VIEWER_COMMANDS
)
from logger import log_debug
from report import escape_cell, summary_line


def column_layout(preview, max_width=MAX_COLUMN_WIDTH):
    """
    Choose a display width and alignment for every column.

    Widths are computed over the whole preview so columns do not shift
    between pages. Numeric columns are right-aligned.

    Returns:
        list: (width, align) tuples, align being 'left' or 'right'
    """
    layout = []
    for index, column in enumerate(preview.schema):
        width = len(escape_cell(column.name))
        for row in preview.rows:
            width = max(width, len(escape_cell(row[index])))
        align = 'right' if column.logical_type.kind in NUMERIC_TYPE_NAMES else 'left'
        layout.append((min(width, max_width), align))
    return layout


def fit_cell(text, width, align):
    """Escape, truncate and pad one cell to exactly `width` characters."""
    text = escape_cell(text)
    if len(text) > width:
        keep = max(width - len(TRUNCATION_MARKER), 0)
        text = (text[:keep] + TRUNCATION_MARKER)[:width]
    return text.rjust(width) if align == 'right' else text.ljust(width)


class TableView:
    """
    Prompt-driven pager over a PreviewTable.

    Attributes:
        preview (PreviewTable): Table being displayed
        page_size (int): Rows shown per page
        visible_start (int): 0-based index of the first visible row
        selected_cell (tuple): 0-based (row, column) of the selected cell, or None
    """

    def __init__(self, preview, page_size=DEFAULT_PAGE_SIZE, max_column_width=MAX_COLUMN_WIDTH,
                 input_func=input, output=print):
        if page_size < 1:
            raise ValueError(f"Page size must be at least 1, got {page_size}")
        if max_column_width < len(TRUNCATION_MARKER) + 1:
            raise ValueError(f"Column width must be at least {len(TRUNCATION_MARKER) + 1}")

        self.preview = preview
        self.page_size = page_size
        self.layout = column_layout(preview, max_column_width)
        self.input_func = input_func
        self.output = output
        self.visible_start = 0
        self.selected_cell = None

    @property
    def max_start(self):
        return max(self.preview.row_count - self.page_size, 0)

    @property
    def visible_range(self):
        end = min(self.visible_start + self.page_size, self.preview.row_count)
        return range(self.visible_start, end)

    def scroll(self, delta_rows):
        """Move the page by `delta_rows`, clamped to the previewed rows."""
        if self.preview.row_count == 0:
            return
        self.visible_start = min(max(self.visible_start + delta_rows, 0), self.max_start)

    def go_to(self, row_number):
        """
        Show the page starting at a 1-based row number.

        Raises:
            ValueError: If the row is outside the preview
        """
        if not 1 <= row_number <= self.preview.row_count:
            raise ValueError(f"Row {row_number} is out of range. Valid range: 1 to {self.preview.row_count}")
        self.visible_start = min(row_number - 1, self.max_start)

    def select(self, row_number, column_number):
        """
        Select a cell by 1-based row and column numbers.

        Raises:
            ValueError: If either number is outside the preview
        """
        if not 1 <= row_number <= self.preview.row_count:
            raise ValueError(f"Row {row_number} is out of range. Valid range: 1 to {self.preview.row_count}")
        if not 1 <= column_number <= self.preview.column_count:
            raise ValueError(f"Column {column_number} is out of range. "
                             f"Valid range: 1 to {self.preview.column_count}")
        self.selected_cell = (row_number - 1, column_number - 1)

    def range_text(self):
        if self.preview.row_count == 0:
            return "No rows available"
        visible = self.visible_range
        return f"Showing rows {visible.start + 1}-{visible.stop} of {self.preview.row_count} previewed"

    def selected_text(self):
        if self.selected_cell is None:
            return "Select a cell with 's <row> <col>'"
        row, col = self.selected_cell
        column = self.preview.schema[col]
        value = escape_cell(self.preview.rows[row][col])
        return (f"Selected: row {row + 1}, column {col + 1} "
                f"({column.name}: {column.logical_type.describe()}) = {value}")

    def page_text(self):
        """Render the visible rows as an aligned table."""
        visible = self.visible_range
        rows = self.preview.rows_for_range(visible.start, visible.stop)
        fitted = [
            [fit_cell(cell, width, align) for cell, (width, align) in zip(row, self.layout)]
            for row in rows
        ]

        # Positional construction keeps duplicate column names intact
        frame = pd.DataFrame(fitted, columns=range(self.preview.column_count), dtype=object)
        frame.columns = [fit_cell(name, width, align)
                         for name, (width, align) in zip(self.preview.column_names, self.layout)]
        frame.index = pd.RangeIndex(visible.start + 1, visible.stop + 1)

        with pd.option_context('display.max_columns', None, 'display.width', None,
                               'display.max_colwidth', None, 'display.max_rows', None):
            return frame.to_string()

    def render(self):
        lines = [
            f"{summary_line(self.preview)} | {self.range_text()}",
            self.selected_text(),
            "-" * 40,
        ]
        if self.preview.row_count:
            lines.append(self.page_text())
        return '\n'.join(lines)

    def handle_command(self, command):
        """
        Apply one prompt command.

        Returns:
            bool: False when the viewer should exit
        """
        parts = command.strip().lower().split()
        if not parts:
            parts = ['n']

        action, args = parts[0], parts[1:]
        log_debug(f"Viewer command: {command.strip()!r}")

        try:
            if action == 'q':
                return False
            elif action == 'n':
                self.scroll(self.page_size)
            elif action == 'p':
                self.scroll(-self.page_size)
            elif action == 'g' and len(args) == 1:
                self.go_to(int(args[0]))
            elif action == 's' and len(args) == 2:
                self.select(int(args[0]), int(args[1]))
            else:
                self.output("Unknown command. Available commands:")
                for name, description in VIEWER_COMMANDS.items():
                    self.output(f"  {name:<14} {description}")
        except ValueError as e:
            self.output(f"Error: {e}")

        return True

    def run(self):
        """Show pages until the user quits or input ends."""
        while True:
            self.output(self.render())
            try:
                command = self.input_func(PROMPTS['command'])
            except EOFError:
                break
            if not self.handle_command(command):
                break
