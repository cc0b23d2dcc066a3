"""Helpers for the bracketed part of formatted table strings.

Table cells are often glued as ``"estimate (spread)"`` or
``"estimate (lower, upper)"``. These helpers pull the bracketed part out,
drop it, or insert text into it, so that prose can quote either half of a
cell that was built once for the table.
"""

from __future__ import annotations

from typing import Optional, Tuple

from inline_tables.config import (
    DEFAULT_BRACKET_LEFT,
    DEFAULT_BRACKET_RIGHT,
    DEFAULT_INTERVAL_SEPARATOR,
)
from inline_tables.errors import FormatError


def _find_group(
    text: str, bracket_left: str, bracket_right: str
) -> Optional[Tuple[int, int]]:
    """Return the positions of the first opening bracket and its match.

    Returns ``None`` when ``text`` has no opening bracket.
    """

    if not bracket_left or not bracket_right or bracket_left == bracket_right:
        raise FormatError(
            f"Brackets must be two distinct non-empty strings, got "
            f"{bracket_left!r} and {bracket_right!r}"
        )
    start = text.find(bracket_left)
    if start < 0:
        return None
    depth = 0
    position = start
    while position < len(text):
        if text.startswith(bracket_left, position):
            depth += 1
            position += len(bracket_left)
            continue
        if text.startswith(bracket_right, position):
            depth -= 1
            if depth == 0:
                return start, position
            position += len(bracket_right)
            continue
        position += 1
    raise FormatError(f"Unbalanced {bracket_left!r} in {text!r}")


def _require_group(text: str, bracket_left: str, bracket_right: str) -> Tuple[int, int]:
    span = _find_group(text, bracket_left, bracket_right)
    if span is None:
        raise FormatError(
            f"No {bracket_left}{bracket_right} pair found in {text!r}"
        )
    return span


def bracket_extract(
    text: str,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Return the content of the first bracket group in ``text``.

    ``bracket_extract("120.4 (5.2)")`` returns ``"5.2"``. Nested groups are
    kept intact: ``"a (b (c))"`` yields ``"b (c)"``.

    Raises
    ------
    FormatError
        If ``text`` has no bracket pair or the first group is unbalanced.
    """

    start, end = _require_group(text, bracket_left, bracket_right)
    return text[start + len(bracket_left) : end]


def bracket_drop(
    text: str,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Return ``text`` without its first bracket group.

    One space directly before the group is removed with it and trailing
    whitespace is trimmed, so ``"120.4 (5.2)"`` becomes ``"120.4"``. Text
    without brackets is returned with trailing whitespace trimmed.

    Raises
    ------
    FormatError
        If the first group is unbalanced.
    """

    span = _find_group(text, bracket_left, bracket_right)
    if span is None:
        return text.rstrip()
    start, end = span
    if start > 0 and text[start - 1] == " ":
        start -= 1
    return (text[:start] + text[end + len(bracket_right) :]).rstrip()


def bracket_point_estimate(
    text: str,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Return the part of an ``"estimate (interval)"`` string before the group."""
    return bracket_drop(text, bracket_left, bracket_right)


def bracket_insert_left(
    text: str,
    insert: str,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Insert ``insert`` right after the first opening bracket.

    ``bracket_insert_left("1.2 (0.9, 1.5)", "95% CI ")`` returns
    ``"1.2 (95% CI 0.9, 1.5)"``.
    """

    start, _ = _require_group(text, bracket_left, bracket_right)
    cut = start + len(bracket_left)
    return text[:cut] + insert + text[cut:]


def bracket_insert_right(
    text: str,
    insert: str,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Insert ``insert`` right before the bracket closing the first group."""

    _, end = _require_group(text, bracket_left, bracket_right)
    return text[:end] + insert + text[end:]


def _interval_parts(
    text: str, sep: str, bracket_left: str, bracket_right: str
) -> Tuple[str, str]:
    inner = bracket_extract(text, bracket_left, bracket_right)
    lower, found, upper = inner.partition(sep)
    if not found:
        raise FormatError(f"Separator {sep!r} not found in interval {inner!r}")
    return lower.strip(), upper.strip()


def bracket_lower_bound(
    text: str,
    sep: str = DEFAULT_INTERVAL_SEPARATOR,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Return the lower bound of ``"estimate (lower, upper)"``."""
    return _interval_parts(text, sep, bracket_left, bracket_right)[0]


def bracket_upper_bound(
    text: str,
    sep: str = DEFAULT_INTERVAL_SEPARATOR,
    bracket_left: str = DEFAULT_BRACKET_LEFT,
    bracket_right: str = DEFAULT_BRACKET_RIGHT,
) -> str:
    """Return the upper bound of ``"estimate (lower, upper)"``."""
    return _interval_parts(text, sep, bracket_left, bracket_right)[1]


__all__ = [
    "bracket_drop",
    "bracket_extract",
    "bracket_insert_left",
    "bracket_insert_right",
    "bracket_lower_bound",
    "bracket_point_estimate",
    "bracket_upper_bound",
]
