"""Shared error messages and small helpers with Redis semantics."""

from __future__ import annotations

import math

MSG_WRONG_TYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"
MSG_INVALID_INT = "ERR value is not an integer or out of range"
MSG_INVALID_FLOAT = "ERR value is not a valid float"
MSG_INVALID_MIN_MAX = "ERR min or max is not a float"
MSG_INVALID_RANGE_ITEM = "ERR min or max not valid string range item"
MSG_INVALID_TIMEOUT = "ERR timeout is not an integer or out of range"
MSG_SYNTAX_ERROR = "ERR syntax error"
MSG_KEY_NOT_FOUND = "ERR no such key"
MSG_OUT_OF_RANGE = "ERR index out of range"
MSG_INVALID_CURSOR = "ERR invalid cursor"
MSG_XX_AND_NX = "ERR XX and NX options at the same time are not compatible"
MSG_NEG_TIMEOUT = "ERR timeout is negative"
MSG_INVALID_SE_TIME = "ERR invalid expire time in set"
MSG_INVALID_SETEX_TIME = "ERR invalid expire time in setex"
MSG_INVALID_PSETEX_TIME = "ERR invalid expire time in psetex"
MSG_INVALID_KEYS_NUMBER = "ERR Number of keys can't be greater than number of args"
MSG_NEGATIVE_KEYS_NUMBER = "ERR Number of keys can't be negative"
MSG_F_SCRIPT_USAGE = (
    "ERR Unknown subcommand or wrong number of arguments for '{}'. Try SCRIPT HELP."
)
MSG_F_PUBSUB_USAGE = (
    "ERR Unknown subcommand or wrong number of arguments for '{}'. Try PUBSUB HELP."
)
MSG_SINGLE_ELEMENT_PAIR = "ERR INCR option supports a single increment-element pair"
MSG_NO_SCRIPT_FOUND = "NOSCRIPT No matching script. Please use EVAL."


def err_wrong_number(cmd: str) -> str:
    """Error message for a command called with the wrong number of arguments."""
    return f"ERR wrong number of arguments for '{cmd.lower()}' command"


def err_lua_parse_error(err: object) -> str:
    """Error message for a script that fails to compile."""
    return f"ERR Error compiling script (new function): {err}"


def format_float(value: float) -> str:
    """Format a float the way Redis does, more or less.

    Twelve decimals with the trailing zeros (and a bare dot) removed.
    """
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if math.isnan(value):
        return "NaN"
    text = f"{value:.12f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def redis_range(
    length: int, start: int, end: int, string_semantics: bool = False
) -> tuple[int, int]:
    """Turn an inclusive Redis start/end (possibly negative) into slice bounds.

    The result can be used as ``seq[start:end]``. With string semantics a large
    negative end still selects the first element, as GETRANGE does.
    """
    if start < 0:
        start = max(length + start, 0)
    start = min(start, length)

    if end < 0:
        end = length + end
        if end < 0:
            end = 0 if string_semantics else -1
    end = min(end + 1, length)

    if end < start:
        return 0, 0
    return start, end