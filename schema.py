"""
Schema extraction from Parquet footer metadata.

Only the footer is read here; row-group data is left untouched so schema
inspection stays cheap for arbitrarily large files.
"""

import os
from contextlib import contextmanager

import pyarrow as pa
import pyarrow.parquet as pq

from datatypes import (
    BinaryType, BooleanType, ColumnDescriptor, DateType, DecimalType, FloatType,
    IntegerType, ListType, StructType, TimestampType, UnsupportedType, Utf8Type
)
from errors import SchemaError
from logger import log_debug, log_warning


@contextmanager
def open_parquet(file_path):
    """
    Open a Parquet file for a single preview request.

    The underlying file handle is closed when the block exits, whether it
    exits normally or through an exception.

    Args:
        file_path (str): Path to the parquet file

    Yields:
        pq.ParquetFile: Reader with the footer metadata already parsed

    Raises:
        FileNotFoundError: If the path does not exist
        SchemaError: If the footer metadata cannot be read
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File '{file_path}' does not exist.")

    with open(file_path, 'rb') as handle:
        try:
            parquet_file = pq.ParquetFile(handle)
        except (pa.ArrowException, OSError) as e:
            raise SchemaError(f"Could not read parquet metadata from '{file_path}': {e}", path=file_path) from e

        log_debug(f"Opened {os.path.basename(file_path)}: "
                  f"{parquet_file.metadata.num_row_groups} row groups, "
                  f"{parquet_file.metadata.num_rows:,} rows")
        yield parquet_file


def logical_type_from_arrow(arrow_type):
    """
    Map a pyarrow DataType onto the closed LogicalType set.

    Args:
        arrow_type (pa.DataType): Type reported by the arrow schema

    Returns:
        LogicalType instance; UnsupportedType for anything outside the set
    """
    t = arrow_type

    if pa.types.is_dictionary(t):
        return logical_type_from_arrow(t.value_type)
    if pa.types.is_boolean(t):
        return BooleanType()
    if pa.types.is_integer(t):
        return IntegerType(width=t.bit_width, signed=pa.types.is_signed_integer(t))
    if pa.types.is_floating(t):
        return FloatType(width=t.bit_width)
    if pa.types.is_string(t) or pa.types.is_large_string(t):
        return Utf8Type()
    if pa.types.is_binary(t) or pa.types.is_large_binary(t) or pa.types.is_fixed_size_binary(t):
        return BinaryType()
    if pa.types.is_timestamp(t):
        return TimestampType(unit=t.unit, timezone=t.tz)
    if pa.types.is_date(t):
        return DateType()
    if pa.types.is_decimal(t):
        return DecimalType(precision=t.precision, scale=t.scale)
    if pa.types.is_map(t):
        # Maps decode as lists of key/value structs
        entry = StructType(fields=(
            column_from_arrow_field(t.key_field, 0),
            column_from_arrow_field(t.item_field, 1),
        ))
        return ListType(element=entry)
    if pa.types.is_list(t) or pa.types.is_large_list(t) or pa.types.is_fixed_size_list(t):
        return ListType(element=logical_type_from_arrow(t.value_type))
    if pa.types.is_struct(t):
        return StructType(fields=tuple(
            column_from_arrow_field(t.field(i), i) for i in range(t.num_fields)
        ))

    return UnsupportedType(name=str(t))


def column_from_arrow_field(field, ordinal):
    """Build a ColumnDescriptor from a pyarrow Field."""
    return ColumnDescriptor(
        name=field.name,
        logical_type=logical_type_from_arrow(field.type),
        nullable=field.nullable,
        ordinal=ordinal,
    )


class SchemaExtractor:
    """Produces ordered column descriptors from an opened Parquet file."""

    def extract(self, parquet_file):
        """
        Extract the column descriptors in the file's native column order.

        Args:
            parquet_file (pq.ParquetFile): File opened with open_parquet()

        Returns:
            tuple: ColumnDescriptor per top-level column

        Raises:
            SchemaError: If the schema cannot be converted or has no columns
        """
        try:
            arrow_schema = parquet_file.schema_arrow
        except (pa.ArrowException, OSError) as e:
            raise SchemaError(f"Could not convert parquet schema: {e}") from e

        if len(arrow_schema) == 0:
            raise SchemaError("Parquet file declares zero columns")

        columns = tuple(
            column_from_arrow_field(arrow_schema.field(i), i) for i in range(len(arrow_schema))
        )

        for column in columns:
            if isinstance(column.logical_type, UnsupportedType):
                log_warning(f"Column '{column.name}' has unsupported type {column.logical_type.name}; "
                            f"values will be shown as tagged text")

        log_debug(f"Extracted {len(columns)} columns: {[column.name for column in columns]}")
        return columns
