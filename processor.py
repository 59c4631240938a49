"""
Preview Processor for Parquet Files

This module contains the class that runs the preview pipeline:
- Opening the file under a single scoped handle
- Extracting the schema from footer metadata
- Sampling the first N rows across row groups
- Formatting the sampled cells and assembling the PreviewTable

Classes:
- FileSummary: Metadata-only description of a Parquet file
- PreviewProcessor: Orchestrates schema extraction, sampling and formatting
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from config import DEFAULT_ROW_COUNT
from formatter import ValueFormatter
from logger import LoggerManager, log_info
from preview_table import assemble
from sampler import ParquetRowGroupSource, RowWindowSampler
from schema import SchemaExtractor, open_parquet


def get_file_size_mb(file_path):
    """Get file size in megabytes."""
    return os.path.getsize(file_path) / (1024**2)


@dataclass(frozen=True)
class FileSummary:
    path: str
    total_rows: int
    row_group_rows: Tuple[int, ...]
    column_count: int
    created_by: Optional[str] = None

    @property
    def row_group_count(self):
        return len(self.row_group_rows)


class PreviewProcessor:
    """
    Main processor class that builds a PreviewTable from a Parquet file.

    This class is responsible for:
    - Holding exactly one file handle per request
    - Running schema extraction before any row data is touched
    - Bounding decode work to the requested number of rows
    - Handing a finished, immutable PreviewTable to the caller
    """

    def __init__(self, show_progress=False):
        """
        Initialize the PreviewProcessor.

        Args:
            show_progress (bool): Show a tqdm bar while sampling rows
        """
        self.schema_extractor = SchemaExtractor()
        self.sampler = RowWindowSampler(show_progress=show_progress)
        self.formatter = ValueFormatter()

    def load_preview(self, file_path, row_count=DEFAULT_ROW_COUNT):
        """
        Build the preview of the first `row_count` rows of a file.

        Args:
            file_path (str): Path to the parquet file
            row_count (int): Number of rows to preview (N >= 0)

        Returns:
            PreviewTable: Schema plus formatted rows

        Raises:
            ValueError: If row_count is negative or not an integer
            FileNotFoundError: If the file does not exist
            SchemaError: If the footer metadata is missing or corrupt
            RowDecodeError: If a needed row group cannot be decoded
            ShapeError: If a decoded row disagrees with the schema
        """
        if isinstance(row_count, bool) or not isinstance(row_count, int) or row_count < 0:
            raise ValueError(f"Row count must be a non-negative integer, got {row_count!r}")

        filename = os.path.basename(file_path)
        logger = LoggerManager.get_logger()
        if logger:
            logger.set_source(filename)

        with open_parquet(file_path) as parquet_file:
            log_info(f"Loading preview of {filename} ({get_file_size_mb(file_path):.2f} MB)")
            schema = self.schema_extractor.extract(parquet_file)
            total_rows = parquet_file.metadata.num_rows
            log_info(f"Schema: {len(schema)} columns, {total_rows:,} rows in "
                     f"{parquet_file.metadata.num_row_groups} row groups")

            source = ParquetRowGroupSource(parquet_file)
            window = self.sampler.sample(source, schema, row_count)

        log_info(f"Sampled {len(window):,} of {row_count:,} requested rows")

        rows = self.formatter.format_window(window, schema)
        return assemble(schema, rows, total_rows=total_rows, source_path=str(file_path))

    def describe_file(self, file_path):
        """
        Summarize a file from its footer metadata without reading rows.

        Args:
            file_path (str): Path to the parquet file

        Returns:
            FileSummary: Row, row-group and column counts
        """
        with open_parquet(file_path) as parquet_file:
            metadata = parquet_file.metadata
            row_group_rows = tuple(
                metadata.row_group(index).num_rows for index in range(metadata.num_row_groups)
            )
            summary = FileSummary(
                path=str(file_path),
                total_rows=metadata.num_rows,
                row_group_rows=row_group_rows,
                column_count=len(parquet_file.schema_arrow),
                created_by=metadata.created_by,
            )

        log_info(f"{os.path.basename(file_path)}: {summary.total_rows:,} rows, "
                 f"{summary.row_group_count} row groups, {summary.column_count} columns")
        return summary
