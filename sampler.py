"""
Bounded row sampling across Parquet row groups.

Classes:
- RowGroupSource: boundary to the columnar decode library
- ParquetRowGroupSource: RowGroupSource backed by pyarrow.parquet
- RowAccumulator: fixed-capacity collector for decoded rows
- RowWindowSampler: fills an accumulator row group by row group

Row groups are visited in file order and each one is asked for no more
rows than the accumulator still has room for. Once the accumulator is full
the loop ends, so row groups past the preview window are never decoded.
"""

import pyarrow as pa
from tqdm import tqdm

from datatypes import (
    NULL, BinaryType, BinaryValue, BooleanType, BooleanValue, DateType, DateValue,
    DecimalType, DecimalValue, FloatType, FloatValue, IntegerType, IntegerValue,
    ListType, ListValue, StructType, StructValue, TimestampType, TimestampValue,
    UnsupportedType, UnsupportedValue, Utf8Type, Utf8Value, check_exhaustive
)
from errors import PreviewError, RowDecodeError, ShapeError
from logger import log_debug

MILLISECONDS_PER_DAY = 86_400_000


# =============================================================================
# CELL DECODING
# =============================================================================

def _decode_integer(scalar, logical_type):
    return IntegerValue(int(scalar.as_py()))


def _decode_float(scalar, logical_type):
    return FloatValue(float(scalar.as_py()))


def _decode_boolean(scalar, logical_type):
    return BooleanValue(bool(scalar.as_py()))


def _decode_utf8(scalar, logical_type):
    return Utf8Value(scalar.as_py())


def _decode_binary(scalar, logical_type):
    return BinaryValue(bytes(scalar.as_py()))


def _decode_timestamp(scalar, logical_type):
    # .value is the raw tick count, avoiding datetime precision loss for ns
    return TimestampValue(int(scalar.value))


def _decode_date(scalar, logical_type):
    if pa.types.is_date64(scalar.type):
        return DateValue(int(scalar.value) // MILLISECONDS_PER_DAY)
    return DateValue(int(scalar.value))


def _decode_list(scalar, logical_type):
    return ListValue(tuple(decode_cell(item, logical_type.element) for item in scalar.values))


def _decode_struct(scalar, logical_type):
    return StructValue(tuple(
        decode_cell(scalar[field.ordinal], field.logical_type) for field in logical_type.fields
    ))


def _decode_decimal(scalar, logical_type):
    return DecimalValue(scalar.as_py())


def _decode_unsupported(scalar, logical_type):
    return UnsupportedValue(str(scalar.as_py()))


_DECODERS = {
    IntegerType: _decode_integer,
    FloatType: _decode_float,
    BooleanType: _decode_boolean,
    Utf8Type: _decode_utf8,
    BinaryType: _decode_binary,
    TimestampType: _decode_timestamp,
    DateType: _decode_date,
    ListType: _decode_list,
    StructType: _decode_struct,
    DecimalType: _decode_decimal,
    UnsupportedType: _decode_unsupported,
}

check_exhaustive(_DECODERS, '_DECODERS')


def decode_cell(scalar, logical_type):
    """
    Convert one pyarrow scalar into a CellValue.

    Args:
        scalar (pa.Scalar): Cell as returned by indexing a pyarrow array
        logical_type: LogicalType of the column the cell belongs to

    Returns:
        CellValue variant matching logical_type, or NULL
    """
    if isinstance(scalar, pa.DictionaryScalar):
        if not scalar.is_valid:
            return NULL
        scalar = scalar.value
    if not scalar.is_valid:
        return NULL
    return _DECODERS[type(logical_type)](scalar, logical_type)


def decode_batch(batch, schema, limit):
    """
    Decode up to `limit` rows of a RecordBatch into CellValue rows.

    Args:
        batch (pa.RecordBatch): Batch holding every schema column
        schema (tuple): ColumnDescriptor per column
        limit (int): Maximum number of rows to decode

    Returns:
        list: Tuples of CellValue aligned with schema
    """
    if batch.num_columns != len(schema):
        raise ShapeError(row_index=0, expected=len(schema), actual=batch.num_columns)

    columns = batch.columns
    types = [column.logical_type for column in schema]
    row_total = min(limit, batch.num_rows)

    return [
        tuple(decode_cell(column[row], logical_type) for column, logical_type in zip(columns, types))
        for row in range(row_total)
    ]


# =============================================================================
# ROW GROUP SOURCES
# =============================================================================

class RowGroupSource:
    """Access to a file's row groups, one decode call per group."""

    @property
    def num_row_groups(self):
        raise NotImplementedError

    def row_group_row_count(self, index):
        raise NotImplementedError

    def decode_row_group(self, index, schema, limit):
        """
        Decode the first rows of one row group.

        Args:
            index (int): Row group index in file order
            schema (tuple): ColumnDescriptor per column
            limit (int): Maximum number of rows to return

        Returns:
            list: At most `limit` rows of CellValue tuples
        """
        raise NotImplementedError


class ParquetRowGroupSource(RowGroupSource):
    """RowGroupSource reading from an opened pyarrow ParquetFile."""

    def __init__(self, parquet_file):
        self.parquet_file = parquet_file

    @property
    def num_row_groups(self):
        return self.parquet_file.metadata.num_row_groups

    def row_group_row_count(self, index):
        return self.parquet_file.metadata.row_group(index).num_rows

    def decode_row_group(self, index, schema, limit):
        wanted = min(limit, self.row_group_row_count(index))
        if wanted <= 0:
            return []

        rows = []
        batches = self.parquet_file.iter_batches(
            batch_size=wanted, row_groups=[index], use_threads=False
        )
        for batch in batches:
            rows.extend(decode_batch(batch, schema, wanted - len(rows)))
            if len(rows) >= wanted:
                break

        return rows


# =============================================================================
# SAMPLING
# =============================================================================

class RowAccumulator:
    """
    Fixed-capacity row collector.

    extend() keeps only as many rows as there is room for, so the window
    can never exceed its capacity.
    """

    def __init__(self, capacity):
        self.capacity = capacity
        self._rows = []

    @property
    def remaining(self):
        return self.capacity - len(self._rows)

    @property
    def is_full(self):
        return self.remaining <= 0

    def __len__(self):
        return len(self._rows)

    def extend(self, rows):
        """
        Add rows up to the remaining capacity.

        Returns:
            int: Number of rows actually kept
        """
        kept = list(rows)[:self.remaining]
        self._rows.extend(tuple(row) for row in kept)
        return len(kept)

    def to_window(self):
        return tuple(self._rows)


class RowWindowSampler:
    """Samples the first N rows of a file into an immutable row window."""

    def __init__(self, show_progress=False):
        self.show_progress = show_progress

    def sample(self, source, schema, row_count):
        """
        Read the first `row_count` rows from the source.

        Args:
            source (RowGroupSource): Row groups of the previewed file
            schema (tuple): ColumnDescriptor per column
            row_count (int): Requested number of rows (N >= 0)

        Returns:
            tuple: Row window of min(N, total rows) CellValue tuples

        Raises:
            ValueError: If row_count is negative or not an integer
            RowDecodeError: If a row group fails to decode
        """
        if isinstance(row_count, bool) or not isinstance(row_count, int) or row_count < 0:
            raise ValueError(f"Row count must be a non-negative integer, got {row_count!r}")

        if row_count == 0:
            return ()

        accumulator = RowAccumulator(row_count)
        self.fill(source, schema, accumulator)
        return accumulator.to_window()

    def fill(self, source, schema, accumulator):
        """
        Decode row groups in file order until the accumulator is full.

        Args:
            source (RowGroupSource): Row groups of the previewed file
            schema (tuple): ColumnDescriptor per column
            accumulator (RowAccumulator): Bounded collector to fill
        """
        group_total = source.num_row_groups

        with tqdm(total=accumulator.capacity, desc="Sampling rows", unit="rows",
                  disable=not self.show_progress, leave=False) as pbar:
            for index in range(group_total):
                if accumulator.is_full:
                    break

                try:
                    rows = source.decode_row_group(index, schema, accumulator.remaining)
                except PreviewError:
                    raise
                except Exception as e:
                    raise RowDecodeError(index, e) from e

                kept = accumulator.extend(rows)
                pbar.update(kept)
                log_debug(f"Row group {index + 1}/{group_total}: kept {kept} rows "
                          f"({len(accumulator)}/{accumulator.capacity})")
