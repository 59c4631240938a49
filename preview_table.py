"""The assembled preview handed to the render sinks."""

from dataclasses import dataclass
from typing import Optional, Tuple

from errors import ShapeError


@dataclass(frozen=True)
class PreviewTable:
    """
    Schema plus the formatted first rows of a file.

    Attributes:
        schema (tuple): ColumnDescriptor per column, in file order
        rows (tuple): Tuples of display strings aligned with schema
        total_rows (int, optional): Row count declared by the file metadata
        source_path (str, optional): Path of the previewed file
    """

    schema: Tuple[object, ...]
    rows: Tuple[Tuple[str, ...], ...]
    total_rows: Optional[int] = None
    source_path: Optional[str] = None

    @property
    def column_names(self):
        return [column.name for column in self.schema]

    @property
    def column_count(self):
        return len(self.schema)

    @property
    def row_count(self):
        return len(self.rows)

    def rows_for_range(self, start, end):
        """
        Return the previewed rows in [start, end).

        The range is clamped to the preview window; a start at or past the
        last row yields an empty tuple.
        """
        if start < 0 or start >= self.row_count or end <= start:
            return ()
        return self.rows[start:min(end, self.row_count)]


def assemble(schema, rows, total_rows=None, source_path=None):
    """
    Compose a PreviewTable from a schema and formatted rows.

    Args:
        schema: ColumnDescriptors in file order
        rows: Formatted rows, one string per column
        total_rows (int, optional): Row count declared by the file
        source_path (str, optional): Path of the previewed file

    Returns:
        PreviewTable

    Raises:
        ShapeError: If any row length differs from the schema length
    """
    schema = tuple(schema)
    rows = tuple(tuple(row) for row in rows)

    for index, row in enumerate(rows):
        if len(row) != len(schema):
            raise ShapeError(row_index=index, expected=len(schema), actual=len(row))

    return PreviewTable(schema=schema, rows=rows, total_rows=total_rows, source_path=source_path)
