"""
Headless text report for a PreviewTable.

Layout:

    Rows: <total> | Columns: <count>
    <blank line>
    <header: column names in schema order>
    <one line per previewed row>

Columns are joined with COLUMN_SEPARATOR and padded to a common width per
column; trailing whitespace is stripped from every line. Line breaks and
tabs inside a cell are escaped so each row stays on one line.
"""

import sys

from config import CELL_ESCAPES, COLUMN_SEPARATOR

NO_ROWS_MESSAGE = '(no rows found)'


def escape_cell(text):
    """Escape characters that would break a one-line cell."""
    for raw, escaped in CELL_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


def summary_line(preview):
    total = preview.total_rows if preview.total_rows is not None else preview.row_count
    return f"Rows: {total} | Columns: {preview.column_count}"


class TextReport:
    """Renders a PreviewTable as plain text for terminals and pipes."""

    def __init__(self, separator=COLUMN_SEPARATOR):
        self.separator = separator

    def table_lines(self, preview):
        """
        Render the header and row lines.

        Args:
            preview (PreviewTable): Table to render

        Returns:
            list: Header line followed by one line per row
        """
        header = [escape_cell(name) for name in preview.column_names]
        body = [[escape_cell(cell) for cell in row] for row in preview.rows]

        widths = [len(name) for name in header]
        for row in body:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))

        def join(cells):
            padded = [cell.ljust(width) for cell, width in zip(cells, widths)]
            return self.separator.join(padded).rstrip()

        return [join(header)] + [join(row) for row in body]

    def render(self, preview):
        """Render the full report as a single string ending in a newline."""
        lines = [summary_line(preview), '']
        lines.extend(self.table_lines(preview))
        if not preview.rows:
            lines.append(NO_ROWS_MESSAGE)
        return '\n'.join(lines) + '\n'

    def write(self, preview, stream=None):
        stream = stream if stream is not None else sys.stdout
        stream.write(self.render(preview))
        stream.flush()


def render_schema(preview):
    """
    Render the schema as one line per column.

    Example:
        0 | id    | int64 | required
        1 | name  | utf8  | nullable
    """
    rows = [
        (str(column.ordinal), escape_cell(column.name), column.logical_type.describe(),
         'nullable' if column.nullable else 'required')
        for column in preview.schema
    ]
    widths = [max(len(row[i]) for row in rows) for i in range(4)] if rows else [0] * 4
    lines = [
        COLUMN_SEPARATOR.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    ]
    return '\n'.join(lines) + '\n'


def render_file_summary(summary, max_groups=10):
    """
    Render file-level metadata as one line.

    Example:
        Row groups: 2 (5, 5 rows) | Created by: parquet-cpp-arrow version 15.0.0
    """
    counts = [str(rows) for rows in summary.row_group_rows[:max_groups]]
    if summary.row_group_count > max_groups:
        counts.append('...')
    groups = f"Row groups: {summary.row_group_count}"
    if counts:
        groups += f" ({', '.join(counts)} rows)"
    return f"{groups} | Created by: {summary.created_by or 'unknown'}\n"
