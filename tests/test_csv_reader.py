import math

import pytest

from data_processing.csv_reader import clean_field, field_at, parse_numeric, tokenize_line


def test_comma_inside_quotes_is_kept():
    fields = tokenize_line('a,"b,c",d')
    assert len(fields) == 3
    assert [clean_field(f) for f in fields] == ["a", "b,c", "d"]


def test_quotes_pass_through_tokenizer():
    assert tokenize_line('"x",y') == ['"x"', "y"]


def test_fields_are_trimmed_and_empty_fields_kept():
    assert tokenize_line(" a , ,b,") == ["a", "", "b", ""]


def test_single_field_line():
    assert tokenize_line("only") == ["only"]


@pytest.mark.parametrize("raw,expected", [
    ("", 0.0),
    (None, 0.0),
    ("abc", 0.0),
    ("  12.5  ", 12.5),
    ('"3.14"', 3.14),
    ("nan", 0.0),
    ("inf", 0.0),
    ("-2", -2.0),
    ("7", 7.0),
])
def test_parse_numeric_is_total(raw, expected):
    value = parse_numeric(raw)
    assert math.isfinite(value)
    assert value == pytest.approx(expected)


def test_field_at_handles_missing_index():
    fields = ["a", "b"]
    assert field_at(fields, -1) is None
    assert field_at(fields, 5) is None
    assert field_at(fields, 1) == "b"
