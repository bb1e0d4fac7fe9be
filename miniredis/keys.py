"""Glob-style key patterns as used by KEYS, SCAN and PSUBSCRIBE."""

from __future__ import annotations

import re
from collections.abc import Iterable

# Characters that Python treats specially inside a character class but which
# the glob syntax takes literally.
_CLASS_SPECIAL = "[&|~"


def pattern_re(pattern: str) -> re.Pattern[str] | None:
    """Compile a glob pattern ('foo*', 'f??', 'f[ab]') to a regular expression.

    Returns None when the pattern can never match anything or is malformed.
    """
    parts = [r"(?s)\A"]
    chars = iter(pattern)
    for ch in chars:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        elif ch == "[":
            body: list[str] = []
            for inner in chars:
                if inner == "]":
                    break
                if inner == "\\":
                    escaped = next(chars, None)
                    if escaped is None:
                        return None
                    body.append("\\" + escaped)
                elif inner in _CLASS_SPECIAL:
                    body.append("\\" + inner)
                else:
                    body.append(inner)
            if not body:
                # '[]' is valid, but matches nothing.
                return None
            parts.append("[" + "".join(body) + "]")
        elif ch == "\\":
            escaped = next(chars, None)
            if escaped is None:
                return None
            parts.append(re.escape(escaped))
        else:
            parts.append(re.escape(ch))
    parts.append(r"\Z")
    try:
        return re.compile("".join(parts))
    except re.error:
        return None


def match_keys(keys: Iterable[str], pattern: str) -> list[str]:
    """Return the keys matching the glob pattern, in their original order.

    Raises ValueError when the pattern is invalid or can never match.
    """
    compiled = pattern_re(pattern)
    if compiled is None:
        raise ValueError(f"pattern {pattern!r} never matches")
    return [key for key in keys if compiled.search(key)]