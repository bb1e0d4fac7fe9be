"""Command descriptions for comparing replies of two Redis servers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Command:
    """One command to send to both servers, and how to judge the replies."""

    cmd: str = ""
    args: tuple[Any, ...] = field(default_factory=tuple)
    error: bool = False
    sort: bool = False
    loosely: bool = False
    error_sub: str = ""
    receive_only: bool = False
    round_floats: int = 0


def succ(cmd: str, *args: Any) -> Command:
    """Expect success from both servers, with equal replies."""
    return Command(cmd=cmd, args=args)


def succ_sorted(cmd: str, *args: Any) -> Command:
    """Expect success; sort both replies before comparing (for KEYS &c.)."""
    return Command(cmd=cmd, args=args, sort=True)


def succ_loosely(cmd: str, *args: Any) -> Command:
    """Expect success; compare only the structure of the replies."""
    return Command(cmd=cmd, args=args, loosely=True)


def succ_round3(cmd: str, *args: Any) -> Command:
    """Expect success; round floats to 3 decimal places before comparing."""
    return Command(cmd=cmd, args=args, round_floats=3)


def fail(cmd: str, *args: Any) -> Command:
    """Expect an error from both servers."""
    return Command(cmd=cmd, args=args, error=True)


def fail_with(sub: str, cmd: str, *args: Any) -> Command:
    """Expect an error from both servers, both containing `sub`."""
    return Command(cmd=cmd, args=args, error=True, error_sub=sub)


def fail_loosely(cmd: str, *args: Any) -> Command:
    """Expect an error from both servers; ignore the messages."""
    return Command(cmd=cmd, args=args, error=True, loosely=True)


def receive() -> Command:
    """Send nothing, only read a reply. For pubsub messages."""
    return Command(receive_only=True)


def loosely_equal(a: Any, b: Any) -> bool:
    """Compare two replies by structure only: same types, same list shapes.

    Raises TypeError for reply types that are not handled.
    """
    if isinstance(a, str):
        return isinstance(b, str)
    if isinstance(a, (bytes, bytearray)):
        return isinstance(b, (bytes, bytearray))
    if isinstance(a, BaseException):
        return isinstance(b, BaseException)
    if isinstance(a, list):
        if not isinstance(b, list) or len(a) != len(b):
            return False
        return all(loosely_equal(x, y) for x, y in zip(a, b))
    raise TypeError(f"unhandled case, got a {a!r}")


def _parse_float(text: str) -> float | None:
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _format_fixed(value: float, places: int) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.{places}f}"


def round_floats(value: Any, places: int) -> Any:
    """Round every float-looking bytes value to `places` decimals.

    Lists are handled recursively; bytes that are not a float stay as they
    are; any other type yields None.
    """
    if isinstance(value, list):
        return [round_floats(item, places) for item in value]
    if isinstance(value, (bytes, bytearray)):
        try:
            parsed = _parse_float(bytes(value).decode("ascii"))
        except UnicodeDecodeError:
            parsed = None
        if parsed is None:
            return value
        return _format_fixed(parsed, places).encode()
    return None