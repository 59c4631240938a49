"""
Data model for previewed Parquet columns and cells.

Two closed variant sets mirror each other:

- LogicalType: the semantic type of a column (IntegerType, FloatType, ...).
- CellValue: one decoded cell (IntegerValue, FloatValue, ...) plus the
  explicit NULL value, which may appear in any column regardless of the
  column's nullability flag.

Decoding and formatting dispatch on these classes through lookup tables
that are checked with check_exhaustive() when their module is imported.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple


# =============================================================================
# LOGICAL TYPES
# =============================================================================

@dataclass(frozen=True)
class IntegerType:
    width: int = 64
    signed: bool = True

    kind = 'integer'

    def describe(self):
        return f"{'int' if self.signed else 'uint'}{self.width}"


@dataclass(frozen=True)
class FloatType:
    width: int = 64

    kind = 'float'

    def describe(self):
        return f"float{self.width}"


@dataclass(frozen=True)
class BooleanType:
    kind = 'boolean'

    def describe(self):
        return 'bool'


@dataclass(frozen=True)
class Utf8Type:
    kind = 'utf8'

    def describe(self):
        return 'utf8'


@dataclass(frozen=True)
class BinaryType:
    kind = 'binary'

    def describe(self):
        return 'binary'


@dataclass(frozen=True)
class TimestampType:
    unit: str = 'us'
    timezone: Optional[str] = None

    kind = 'timestamp'

    def describe(self):
        if self.timezone:
            return f"timestamp[{self.unit}, tz={self.timezone}]"
        return f"timestamp[{self.unit}]"


@dataclass(frozen=True)
class DateType:
    kind = 'date'

    def describe(self):
        return 'date'


@dataclass(frozen=True)
class ListType:
    element: object

    kind = 'list'

    def describe(self):
        return f"list<{self.element.describe()}>"


@dataclass(frozen=True)
class StructType:
    fields: Tuple['ColumnDescriptor', ...] = ()

    kind = 'struct'

    def describe(self):
        inner = ', '.join(f"{field.name}: {field.logical_type.describe()}" for field in self.fields)
        return f"struct<{inner}>"


@dataclass(frozen=True)
class DecimalType:
    precision: int
    scale: int

    kind = 'decimal'

    def describe(self):
        return f"decimal({self.precision}, {self.scale})"


@dataclass(frozen=True)
class UnsupportedType:
    """Any physical type outside the supported set, kept by its pyarrow name."""

    name: str

    kind = 'unsupported'

    def describe(self):
        return f"unsupported({self.name})"


LOGICAL_TYPES = (
    IntegerType, FloatType, BooleanType, Utf8Type, BinaryType,
    TimestampType, DateType, ListType, StructType, DecimalType,
    UnsupportedType,
)


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    One column of the previewed file, or one field of a struct column.

    Attributes:
        name (str): Column name as stored in the file
        logical_type: One of LOGICAL_TYPES
        nullable (bool): Whether the file declares the column nullable
        ordinal (int): Position within the schema (or enclosing struct)
    """

    name: str
    logical_type: object
    nullable: bool = True
    ordinal: int = 0


# =============================================================================
# CELL VALUES
# =============================================================================

@dataclass(frozen=True)
class NullValue:
    pass


NULL = NullValue()


@dataclass(frozen=True)
class IntegerValue:
    value: int


@dataclass(frozen=True)
class FloatValue:
    value: float


@dataclass(frozen=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True)
class Utf8Value:
    value: str


@dataclass(frozen=True)
class BinaryValue:
    value: bytes


@dataclass(frozen=True)
class TimestampValue:
    # Count of the column's unit since 1970-01-01T00:00:00 UTC
    ticks: int


@dataclass(frozen=True)
class DateValue:
    # Days since 1970-01-01
    days: int


@dataclass(frozen=True)
class ListValue:
    items: Tuple[object, ...] = ()


@dataclass(frozen=True)
class StructValue:
    # Aligned with StructType.fields
    fields: Tuple[object, ...] = ()


@dataclass(frozen=True)
class DecimalValue:
    value: Decimal


@dataclass(frozen=True)
class UnsupportedValue:
    text: str


# Value variant expected for each logical type
VALUE_TYPES = {
    IntegerType: IntegerValue,
    FloatType: FloatValue,
    BooleanType: BooleanValue,
    Utf8Type: Utf8Value,
    BinaryType: BinaryValue,
    TimestampType: TimestampValue,
    DateType: DateValue,
    ListType: ListValue,
    StructType: StructValue,
    DecimalType: DecimalValue,
    UnsupportedType: UnsupportedValue,
}


def check_exhaustive(table, table_name):
    """
    Verify that a dispatch table covers every logical type and nothing else.

    Args:
        table (dict): Mapping keyed by LogicalType classes
        table_name (str): Name used in the error message

    Raises:
        TypeError: If a logical type is missing or an unknown key is present
    """
    missing = [cls.__name__ for cls in LOGICAL_TYPES if cls not in table]
    unknown = [getattr(key, '__name__', repr(key)) for key in table if key not in LOGICAL_TYPES]
    if missing or unknown:
        raise TypeError(f"{table_name} is not exhaustive: missing={missing}, unknown={unknown}")


check_exhaustive(VALUE_TYPES, 'VALUE_TYPES')
