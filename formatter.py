"""
Type-aware formatting of decoded cells.

Every (CellValue, LogicalType) pair maps to one display string, and the
mapping depends on nothing but its inputs: no locale, no local timezone,
no current time. Conventions (see config.py):

- null: NULL_SENTINEL for every type
- integer: decimal digits; boolean: true / false
- float: shortest round-trip text for the column width; NaN, inf, -inf
- decimal: fixed point, declared scale preserved
- utf8: raw text at top level, JSON-quoted inside lists and structs
- binary: 0x-prefixed lowercase hex, truncated past MAX_BINARY_PREVIEW_BYTES
- timestamp: YYYY-MM-DDTHH:MM:SS[.fraction][+HH:MM]
- date: YYYY-MM-DD
- list: [a, b, c]; struct: {name: value, ...}, with names that contain
  delimiter characters JSON-quoted

Values that cannot be shown faithfully become tagged strings such as
<unsupported time64[us]: 10:00:00> instead of raising.
"""

import json
import math
import re
from datetime import date, datetime, timedelta

import numpy as np
import pytz

from config import (
    LIST_DELIMITER, MAX_BINARY_PREVIEW_BYTES, NULL_SENTINEL, TIMESTAMP_FRACTION_DIGITS
)
from datatypes import (
    VALUE_TYPES, BinaryType, BooleanType, DateType, DecimalType, FloatType, IntegerType,
    ListType, NullValue, StructType, TimestampType, UnsupportedType, Utf8Type, check_exhaustive
)

EPOCH = datetime(1970, 1, 1)
EPOCH_DATE = date(1970, 1, 1)

_FIXED_OFFSET = re.compile(r'^([+-])(\d{2}):?(\d{2})$')

_NUMPY_FLOATS = {16: np.float16, 32: np.float32}

# Type used for cells beyond the last schema column
_NO_COLUMN = UnsupportedType(name='no matching column')

# Struct field names containing any of these are quoted
_FIELD_NAME_SPECIALS = (LIST_DELIMITER, ': ', '"', '{', '}')


def _quote(text):
    return json.dumps(text, ensure_ascii=False)


def _format_integer(value, logical_type, nested):
    return str(value.value)


def _format_float(value, logical_type, nested):
    number = value.value
    if math.isnan(number):
        return 'NaN'
    if math.isinf(number):
        return 'inf' if number > 0 else '-inf'

    narrow = _NUMPY_FLOATS.get(logical_type.width)
    if narrow is not None:
        # numpy prints the shortest text that round-trips at this width
        return str(narrow(number))
    return repr(number)


def _format_boolean(value, logical_type, nested):
    return 'true' if value.value else 'false'


def _format_utf8(value, logical_type, nested):
    if nested or value.value == NULL_SENTINEL:
        return _quote(value.value)
    return value.value


def _format_binary(value, logical_type, nested):
    data = value.value
    if len(data) <= MAX_BINARY_PREVIEW_BYTES:
        return '0x' + data.hex()
    return f"0x{data[:MAX_BINARY_PREVIEW_BYTES].hex()}...({len(data)} bytes)"


def resolve_timezone(name):
    """
    Resolve an arrow timezone string to a tzinfo.

    Accepts IANA names ('Europe/Berlin', 'UTC') and fixed offsets
    ('+05:30', '-0800').

    Returns:
        tzinfo or None if the name is unknown
    """
    match = _FIXED_OFFSET.match(name)
    if match:
        sign, hours, minutes = match.groups()
        offset = int(hours) * 60 + int(minutes)
        return pytz.FixedOffset(-offset if sign == '-' else offset)
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return None


def _format_offset(offset):
    total_minutes = int(offset.total_seconds()) // 60
    sign = '-' if total_minutes < 0 else '+'
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def _format_wall_clock(moment):
    # Explicit fields instead of strftime, which varies by platform for years < 1000
    return (f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
            f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}")


def _format_timestamp(value, logical_type, nested):
    digits = TIMESTAMP_FRACTION_DIGITS.get(logical_type.unit)
    if digits is None:
        return f"<timestamp with unknown unit {logical_type.unit!r}: {value.ticks}>"

    seconds, fraction = divmod(value.ticks, 10 ** digits)
    suffix = ''
    try:
        moment = EPOCH + timedelta(seconds=seconds)
        if logical_type.timezone:
            zone = resolve_timezone(logical_type.timezone)
            if zone is None:
                zone = pytz.utc
                suffix = f" [unknown timezone {logical_type.timezone!r}]"
            moment = pytz.utc.localize(moment).astimezone(zone)
    except (OverflowError, ValueError):
        return f"<timestamp out of range: {value.ticks} {logical_type.unit}>"

    text = _format_wall_clock(moment)
    if digits:
        text += '.' + str(fraction).zfill(digits)
    if logical_type.timezone:
        text += _format_offset(moment.utcoffset())
    return text + suffix


def _format_date(value, logical_type, nested):
    try:
        day = EPOCH_DATE + timedelta(days=value.days)
    except (OverflowError, ValueError):
        return f"<date out of range: {value.days} days>"
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def _format_list(value, logical_type, nested):
    items = [_format(item, logical_type.element, True) for item in value.items]
    return '[' + LIST_DELIMITER.join(items) + ']'


def _format_field_name(name):
    if not name or any(token in name for token in _FIELD_NAME_SPECIALS):
        return _quote(name)
    return name


def _format_struct(value, logical_type, nested):
    if len(value.fields) != len(logical_type.fields):
        return _invalid(value, logical_type)
    parts = [
        f"{_format_field_name(field.name)}: {_format(item, field.logical_type, True)}"
        for field, item in zip(logical_type.fields, value.fields)
    ]
    return '{' + LIST_DELIMITER.join(parts) + '}'


def _format_decimal(value, logical_type, nested):
    return format(value.value, 'f')


def _format_unsupported(value, logical_type, nested):
    return f"<unsupported {logical_type.name}: {value.text}>"


def _invalid(value, logical_type):
    return f"<invalid {logical_type.describe()} value: {value!r}>"


_FORMATTERS = {
    IntegerType: _format_integer,
    FloatType: _format_float,
    BooleanType: _format_boolean,
    Utf8Type: _format_utf8,
    BinaryType: _format_binary,
    TimestampType: _format_timestamp,
    DateType: _format_date,
    ListType: _format_list,
    StructType: _format_struct,
    DecimalType: _format_decimal,
    UnsupportedType: _format_unsupported,
}

check_exhaustive(_FORMATTERS, '_FORMATTERS')


def _format(value, logical_type, nested):
    if isinstance(value, NullValue):
        return NULL_SENTINEL

    formatter = _FORMATTERS.get(type(logical_type))
    if formatter is None:
        return f"<unknown type {logical_type!r}: {value!r}>"
    if not isinstance(value, VALUE_TYPES[type(logical_type)]):
        return _invalid(value, logical_type)
    return formatter(value, logical_type, nested)


class ValueFormatter:
    """Renders CellValues as display strings."""

    def format(self, value, logical_type):
        """
        Format one cell.

        Args:
            value: CellValue (or NULL)
            logical_type: LogicalType of the cell's column

        Returns:
            str: Display text; never raises
        """
        return _format(value, logical_type, False)

    def format_row(self, row, schema):
        """
        Format a row of CellValues aligned with schema.

        The result keeps one string per input cell, so a row that disagrees
        with the schema length is still caught by assemble().
        """
        types = [column.logical_type for column in schema]
        return tuple(
            self.format(value, types[i] if i < len(types) else _NO_COLUMN)
            for i, value in enumerate(row)
        )

    def format_window(self, window, schema):
        """Format every row of a sampled window."""
        return tuple(self.format_row(row, schema) for row in window)

