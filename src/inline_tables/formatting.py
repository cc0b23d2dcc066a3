"""Numeric formatting helpers for table cells and inline text.

This module turns numbers into fixed-width decimal strings according to a
:class:`~inline_tables.rounding.RoundingSpec` so that tables and the prose
quoting them use the same conventions (for example, one decimal place for
blood pressure and two for proportions).
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from inline_tables.config import DEFAULT_TIE_BREAK
from inline_tables.errors import InvalidInputError
from inline_tables.rounding import (
    Number,
    RoundingSpec,
    TieBreak,
    create_default_spec,
    round_with_spec,
    with_decimal_rule,
    with_tie_break,
)


def _is_missing(value: object) -> bool:
    """Return whether ``value`` is a missing or non-finite number."""

    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, Decimal):
        return not value.is_finite()
    if isinstance(value, (float, np.floating)):
        return not math.isfinite(float(value))
    return False


def _group_thousands(integer_digits: str, big_mark: str) -> str:
    if not big_mark or len(integer_digits) <= 3:
        return integer_digits
    head = len(integer_digits) % 3 or 3
    groups = [integer_digits[:head]]
    groups.extend(
        integer_digits[index : index + 3]
        for index in range(head, len(integer_digits), 3)
    )
    return big_mark.join(groups)


def render_decimal(rounded: Decimal, places: int, big_mark: str = "") -> str:
    """Return ``rounded`` as text with exactly ``places`` decimal places.

    A rounded zero is rendered without a minus sign.
    """

    if rounded.is_zero():
        rounded = rounded.copy_abs()
    text = format(rounded, f".{places}f")
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    integer_part, _, fraction = text.partition(".")
    integer_part = _group_thousands(integer_part, big_mark)
    if fraction:
        return f"{sign}{integer_part}.{fraction}"
    return f"{sign}{integer_part}"


def format_value(spec: RoundingSpec, value: Optional[Number]) -> str:
    """Return ``value`` rounded and padded according to ``spec``.

    Parameters
    ----------
    spec:
        Rounding specification. The rule whose interval contains
        ``abs(value)`` decides the digits and tie-break.
    value:
        Number to format.

    Returns
    -------
    str
        Fixed-width decimal text, or ``spec.missing_marker`` for missing and
        non-finite inputs when the spec defines one.

    Raises
    ------
    InvalidInputError
        If ``value`` is missing or non-finite and the spec has no missing
        marker, or if ``value`` is not a number at all.
    """

    if _is_missing(value):
        if spec.missing_marker is not None:
            return spec.missing_marker
        raise InvalidInputError(f"Cannot format non-finite value {value!r}")
    rounded, places = round_with_spec(spec, value)
    return render_decimal(rounded, places, spec.big_mark)


def format_with_rule(
    value: Number,
    digits: int,
    tie_break: Union[TieBreak, str] = DEFAULT_TIE_BREAK,
) -> str:
    """Return ``value`` formatted to ``digits`` decimal places.

    Convenience wrapper for one-off values that do not warrant a spec.
    """

    spec = with_tie_break(with_decimal_rule(create_default_spec(), digits), tie_break)
    return format_value(spec, value)


def format_column(
    values: Union[pd.Series, Iterable[Optional[Number]]],
    spec: RoundingSpec,
) -> Union[pd.Series, List[str]]:
    """Format every element of ``values`` with ``spec``.

    A pandas Series input yields a Series of strings with the same index and
    name; any other iterable yields a list.
    """

    if isinstance(values, pd.Series):
        return pd.Series(
            [format_value(spec, value) for value in values.tolist()],
            index=values.index,
            name=values.name,
            dtype=object,
        )
    return [format_value(spec, value) for value in values]


__all__ = ["format_column", "format_value", "format_with_rule", "render_decimal"]
