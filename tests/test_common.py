import itertools

import pytest

from miniredis.common import (
    MSG_F_PUBSUB_USAGE,
    err_lua_parse_error,
    err_wrong_number,
    format_float,
    redis_range,
)


def test_err_wrong_number_lowercases():
    assert err_wrong_number("GET") == "ERR wrong number of arguments for 'get' command"
    assert err_wrong_number("eChO") == err_wrong_number("ECHO")


def test_err_lua_parse_error_includes_cause():
    message = err_lua_parse_error(ValueError("unexpected symbol"))
    assert message.startswith("ERR Error compiling script (new function): ")
    assert message.endswith("unexpected symbol")


def test_usage_message_template():
    assert "'PUBSUB FOO'" in MSG_F_PUBSUB_USAGE.format("PUBSUB FOO")


def test_format_float_infinities():
    assert format_float(float("inf")) == "inf"
    assert format_float(float("-inf")) == "-inf"


def test_format_float_whole_number_has_no_dot():
    assert format_float(1.0) == "1"
    assert "." not in format_float(300.0)
    assert format_float(300.0).startswith("300")


@pytest.mark.parametrize("value", [3.5, 0.1, -13.1, 12.3, 1.23, 987.65432, 200.0, 0.0])
def test_format_float_round_trips(value):
    text = format_float(value)
    assert float(text) == pytest.approx(value, abs=1e-12)
    assert not text.endswith("0") or "." not in text
    assert not text.endswith(".")


def test_redis_range_full():
    assert redis_range(10, 0, -1, False) == (0, 10)


def test_redis_range_reversed_is_empty():
    assert redis_range(10, 4, 2, False) == (0, 0)


def test_redis_range_string_semantics_keeps_first_element():
    data = "The quick"
    start, end = redis_range(len(data), 0, -400, True)
    assert data[start:end] == data[0]
    start, end = redis_range(len(data), 0, -400, False)
    assert data[start:end] == ""


@pytest.mark.parametrize(
    "start,end,semantics",
    list(itertools.product(range(-14, 14, 3), range(-14, 14, 3), [True, False])),
)
def test_redis_range_bounds(start, end, semantics):
    length = 9
    lo, hi = redis_range(length, start, end, semantics)
    assert 0 <= lo <= hi <= length


@pytest.mark.parametrize("start,end", [(0, 3), (2, 5), (1, 100), (0, 0)])
def test_redis_range_positive_matches_inclusive_slice(start, end):
    data = list(range(8))
    lo, hi = redis_range(len(data), start, end, False)
    assert data[lo:hi] == data[start : end + 1]