"""Pytest configuration and fixtures."""

from datetime import date, datetime
from decimal import Decimal

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

import schema
from datatypes import (
    ColumnDescriptor, FloatType, FloatValue, IntegerType, IntegerValue, Utf8Type, Utf8Value
)
from logger import LoggerManager
from sampler import RowGroupSource


SAMPLE_SCHEMA = (
    ColumnDescriptor('id', IntegerType(64, True), True, 0),
    ColumnDescriptor('name', Utf8Type(), True, 1),
    ColumnDescriptor('score', FloatType(64), True, 2),
)


def write_sample_parquet(path, rows=10, row_group_size=5):
    """Write an id/name/score file split into row groups of `row_group_size`."""
    table = pa.table({
        'id': pa.array(range(rows), pa.int64()),
        'name': pa.array([f"name-{i}" for i in range(rows)], pa.string()),
        'score': pa.array([i * 0.5 for i in range(rows)], pa.float64()),
    })
    pq.write_table(table, str(path), row_group_size=row_group_size)
    return str(path)


class FakeRowGroupSource(RowGroupSource):
    """In-memory row groups shaped like SAMPLE_SCHEMA that record every decode call."""

    def __init__(self, group_sizes, fail_on=None, error=None):
        self.group_sizes = list(group_sizes)
        self.fail_on = fail_on
        self.error = error or OSError("corrupt data page")
        self.decode_calls = []
        self.decoded_rows = 0

    @property
    def num_row_groups(self):
        return len(self.group_sizes)

    def row_group_row_count(self, index):
        return self.group_sizes[index]

    def decode_row_group(self, index, schema, limit):
        self.decode_calls.append((index, limit))
        if index == self.fail_on:
            raise self.error

        offset = sum(self.group_sizes[:index])
        count = min(limit, self.group_sizes[index])
        self.decoded_rows += count
        return [
            (IntegerValue(offset + i), Utf8Value(f"name-{offset + i}"), FloatValue((offset + i) * 0.5))
            for i in range(count)
        ]


@pytest.fixture(autouse=True)
def close_global_logger():
    yield
    LoggerManager.close()


@pytest.fixture
def sample_parquet(tmp_path):
    """3 columns, 10 rows, 2 row groups of 5 rows."""
    return write_sample_parquet(tmp_path / "sample.parquet")


@pytest.fixture
def corrupt_parquet(tmp_path):
    path = tmp_path / "corrupt.parquet"
    path.write_bytes(b"PAR1 this is not a parquet footer")
    return str(path)


@pytest.fixture
def typed_parquet(tmp_path):
    """One column per supported logical type, three rows with nulls mixed in."""
    point_type = pa.struct([('x', pa.int32()), ('y', pa.string())])
    table = pa.table({
        'flag': pa.array([True, None, False], pa.bool_()),
        'small': pa.array([1, 2, 255], pa.uint8()),
        'ratio': pa.array([0.1, None, 2.5], pa.float32()),
        'created': pa.array(
            [datetime(2024, 1, 2, 3, 4, 5, 123456), None, datetime(1999, 12, 31, 23, 59, 59)],
            pa.timestamp('us', tz='UTC'),
        ),
        'local_time': pa.array(
            [datetime(2024, 1, 2, 3, 4, 5, 120000), datetime(2000, 1, 1), None],
            pa.timestamp('ms'),
        ),
        'day': pa.array([date(2024, 2, 29), None, date(1970, 1, 1)], pa.date32()),
        'price': pa.array([Decimal('1.50'), Decimal('-3.25'), None], pa.decimal128(10, 2)),
        'tags': pa.array([['a', 'b'], [], None], pa.list_(pa.string())),
        'point': pa.array([{'x': 1, 'y': 'a'}, None, {'x': 3, 'y': None}], point_type),
        'blob': pa.array([b'\x01\x02', None, b''], pa.binary()),
        'category': pa.array(['red', None, 'red'], pa.string()).dictionary_encode(),
    })
    path = tmp_path / "typed.parquet"
    pq.write_table(table, str(path))
    return str(path)


@pytest.fixture
def broken_second_row_group(tmp_path):
    """Sample file whose row group 1 has its first column chunk overwritten."""
    path = write_sample_parquet(tmp_path / "broken.parquet")

    chunk = pq.ParquetFile(path).metadata.row_group(1).column(0)
    offset = chunk.data_page_offset
    if chunk.has_dictionary_page and chunk.dictionary_page_offset:
        offset = min(offset, chunk.dictionary_page_offset)

    with open(path, 'r+b') as handle:
        handle.seek(offset)
        handle.write(b'\xff' * chunk.total_compressed_size)
    return path


@pytest.fixture
def opened_files(monkeypatch):
    """Record every handle opened by schema.open_parquet."""
    handles = []

    def recording_open(*args, **kwargs):
        handle = open(*args, **kwargs)
        handles.append(handle)
        return handle

    monkeypatch.setattr(schema, 'open', recording_open, raising=False)
    return handles
