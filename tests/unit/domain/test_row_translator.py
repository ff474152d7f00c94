from datetime import datetime, timezone

import pytest

from log_metrics.domain.entities.unit import Unit
from log_metrics.domain.errors import DuplicateHeaderRow, ParseError, SchemaMismatchError
from log_metrics.domain.services.header_parser import parse_header, split_line
from log_metrics.domain.services.row_translator import parse_timestamp, parse_value, translate_row
from tests.conftest import HOST, TS_MS

EXPECTED_TS = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.fixture
def schema():
    return parse_header(split_line("Threads,HeapTotal,time"))


def test_row_becomes_one_point_per_metric(schema):
    points = translate_row(split_line(f"4,1024,{TS_MS}"), schema, HOST)

    assert [(p.metric_name, p.value, p.unit) for p in points] == [
        ("Threads", 4.0, Unit.NONE),
        ("HeapTotal", 1024.0, Unit.BYTES),
    ]
    assert all(p.timestamp == EXPECTED_TS for p in points)
    assert all(p.dimensions == HOST for p in points)


def test_skipped_columns_are_not_emitted():
    schema = parse_header(split_line("separator,ItemsSubscribed,time"))

    points = translate_row(split_line(f"x,12,{TS_MS}"), schema)

    assert len(points) == 1
    assert points[0].metric_name == "ItemsSubscribed"
    assert points[0].value == 12.0


def test_width_mismatch(schema):
    with pytest.raises(SchemaMismatchError) as exc_info:
        translate_row(split_line(f"4,{TS_MS}"), schema)
    assert exc_info.value.expected == 3
    assert exc_info.value.actual == 2


def test_repeated_header_is_signalled(schema):
    with pytest.raises(DuplicateHeaderRow):
        translate_row(split_line("Threads,HeapTotal,time"), schema)


def test_non_numeric_metric_drops_whole_row(schema):
    with pytest.raises(ParseError) as exc_info:
        translate_row(split_line(f"4,lots,{TS_MS}"), schema, line=f"4,lots,{TS_MS}")
    assert exc_info.value.column == 1
    assert exc_info.value.token == "lots"
    assert "lots" in str(exc_info.value)


def test_non_integer_timestamp(schema):
    with pytest.raises(ParseError) as exc_info:
        translate_row(split_line("4,1024,1.7e12"), schema)
    assert exc_info.value.column == 2


@pytest.mark.parametrize("token", ["1_000", "0x10", "1e3_0", "½", "--4", ""])
def test_metric_cell_must_be_a_plain_decimal(schema, token):
    with pytest.raises(ParseError) as exc_info:
        translate_row(["4", token, str(TS_MS)], schema)
    assert exc_info.value.column == 1


@pytest.mark.parametrize("token", ["1_700_000_000_000", "0b101", "+-5", "١٧٠٠"])
def test_timestamp_cell_must_be_plain_digits(schema, token):
    with pytest.raises(ParseError):
        translate_row(["4", "1024", token], schema)


def test_plain_numbers_still_parse():
    assert parse_value("-1.5e3", 0) == -1500.0
    assert parse_value(".5", 0) == 0.5
    assert parse_value("7.", 0) == 7.0
    assert parse_timestamp("-1000", 0) == datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_output_size_matches_metric_columns():
    header = "a,separator,b,max c,c,total d,time,e"
    schema = parse_header(split_line(header))
    row = split_line(f"1,x,2,y,3,z,{TS_MS},5")

    points = translate_row(row, schema)

    assert len(points) == len(schema.metric_columns) == 4
    assert [p.metric_name for p in points] == ["a", "b", "c", "e"]
    assert [p.value for p in points] == [1.0, 2.0, 3.0, 5.0]


def test_parse_timestamp_keeps_milliseconds():
    assert parse_timestamp("1700000000123", 0) == EXPECTED_TS.replace(microsecond=123000)
