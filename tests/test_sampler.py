from datetime import datetime

import pyarrow as pa
import pytest

from conftest import SAMPLE_SCHEMA, FakeRowGroupSource
from datatypes import (
    NULL, ColumnDescriptor, DateType, DateValue, IntegerType, IntegerValue, ListType,
    ListValue, StructType, StructValue, TimestampType, TimestampValue, Utf8Type, Utf8Value
)
from errors import RowDecodeError, ShapeError
from sampler import ParquetRowGroupSource, RowAccumulator, RowWindowSampler, decode_cell
from schema import SchemaExtractor, open_parquet


def test_zero_rows_never_touches_row_groups():
    source = FakeRowGroupSource([5, 5])

    window = RowWindowSampler().sample(source, SAMPLE_SCHEMA, 0)

    assert window == ()
    assert source.decode_calls == []


def test_window_spanning_two_row_groups_stops_early():
    source = FakeRowGroupSource([5, 5])

    window = RowWindowSampler().sample(source, SAMPLE_SCHEMA, 7)

    assert len(window) == 7
    assert source.decode_calls == [(0, 7), (1, 2)]
    assert source.decoded_rows == 7
    assert [row[0].value for row in window] == list(range(7))


def test_full_first_group_leaves_later_groups_untouched():
    source = FakeRowGroupSource([5, 5, 5])

    window = RowWindowSampler().sample(source, SAMPLE_SCHEMA, 5)

    assert len(window) == 5
    assert source.decode_calls == [(0, 5)]


def test_request_larger_than_file_returns_every_row():
    source = FakeRowGroupSource([5, 5])

    window = RowWindowSampler().sample(source, SAMPLE_SCHEMA, 100)

    assert len(window) == 10


@pytest.mark.parametrize("row_count", range(0, 14))
def test_window_length_is_min_of_request_and_total(row_count):
    source = FakeRowGroupSource([4, 0, 3, 5])

    window = RowWindowSampler().sample(source, SAMPLE_SCHEMA, row_count)

    assert len(window) == min(row_count, 12)
    assert all(len(row) == len(SAMPLE_SCHEMA) for row in window)


def test_decode_failure_reports_row_group_index():
    cause = OSError("corrupt data page")
    source = FakeRowGroupSource([5, 5], fail_on=1, error=cause)

    with pytest.raises(RowDecodeError) as exc_info:
        RowWindowSampler().sample(source, SAMPLE_SCHEMA, 7)

    assert exc_info.value.row_group_index == 1
    assert exc_info.value.cause is cause
    assert exc_info.value.__cause__ is cause


def test_failing_group_past_the_window_is_never_read():
    source = FakeRowGroupSource([5, 5], fail_on=1)

    window = RowWindowSampler().sample(source, SAMPLE_SCHEMA, 5)

    assert len(window) == 5


def test_shape_errors_are_not_wrapped():
    source = FakeRowGroupSource([5], fail_on=0, error=ShapeError(0, 3, 2))

    with pytest.raises(ShapeError):
        RowWindowSampler().sample(source, SAMPLE_SCHEMA, 3)


@pytest.mark.parametrize("row_count", [-1, 2.5, True, "3"])
def test_invalid_row_count_is_rejected(row_count):
    source = FakeRowGroupSource([5])

    with pytest.raises(ValueError):
        RowWindowSampler().sample(source, SAMPLE_SCHEMA, row_count)
    assert source.decode_calls == []


def test_accumulator_keeps_only_remaining_capacity():
    accumulator = RowAccumulator(3)

    assert accumulator.extend([(1,), (2,)]) == 2
    assert accumulator.remaining == 1
    assert accumulator.extend([(3,), (4,), (5,)]) == 1
    assert accumulator.is_full
    assert accumulator.to_window() == ((1,), (2,), (3,))


def test_parquet_source_reads_first_rows_of_real_file(sample_parquet, monkeypatch):
    calls = []
    original = ParquetRowGroupSource.decode_row_group

    def spy(self, index, schema, limit):
        rows = original(self, index, schema, limit)
        calls.append((index, limit, len(rows)))
        return rows

    monkeypatch.setattr(ParquetRowGroupSource, 'decode_row_group', spy)

    with open_parquet(sample_parquet) as parquet_file:
        schema = SchemaExtractor().extract(parquet_file)
        window = RowWindowSampler().sample(ParquetRowGroupSource(parquet_file), schema, 7)

    assert calls == [(0, 7, 5), (1, 2, 2)]
    assert [row[0] for row in window] == [IntegerValue(i) for i in range(7)]
    assert window[6][1] == Utf8Value("name-6")


def test_decode_cell_handles_nulls_and_nested_values():
    point = StructType((
        ColumnDescriptor('x', IntegerType(32, True), True, 0),
        ColumnDescriptor('y', Utf8Type(), True, 1),
    ))
    structs = pa.array([{'x': 1, 'y': None}, None], pa.struct([('x', pa.int32()), ('y', pa.string())]))
    lists = pa.array([[1, None], None], pa.list_(pa.int64()))

    assert decode_cell(structs[0], point) == StructValue((IntegerValue(1), NULL))
    assert decode_cell(structs[1], point) is NULL
    assert decode_cell(lists[0], ListType(IntegerType())) == ListValue((IntegerValue(1), NULL))
    assert decode_cell(lists[1], ListType(IntegerType())) is NULL


def test_decode_cell_keeps_raw_timestamp_ticks():
    nanos = pa.array([1704164645000000001], pa.timestamp('ns'))
    dates = pa.array([0, 86_400_000], pa.date64())

    assert decode_cell(nanos[0], TimestampType('ns')) == TimestampValue(1704164645000000001)
    assert decode_cell(dates[1], DateType()) == DateValue(1)


def test_decode_cell_unwraps_dictionary_values():
    categories = pa.array(['red', None], pa.string()).dictionary_encode()

    assert decode_cell(categories[0], Utf8Type()) == Utf8Value('red')
    assert decode_cell(categories[1], Utf8Type()) is NULL


def test_decode_cell_reads_map_entries_as_structs():
    from schema import logical_type_from_arrow

    map_type = pa.map_(pa.string(), pa.int64())
    maps = pa.array([[('a', 1)]], map_type)

    value = decode_cell(maps[0], logical_type_from_arrow(map_type))

    assert value == ListValue((StructValue((Utf8Value('a'), IntegerValue(1))),))


def test_decode_cell_reads_aware_timestamps_as_utc_ticks():
    aware = pa.array([datetime(1970, 1, 1, 0, 0, 1)], pa.timestamp('s', tz='UTC'))

    assert decode_cell(aware[0], TimestampType('s', 'UTC')) == TimestampValue(1)
