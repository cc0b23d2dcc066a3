"""Helpers for building rounding specs from configuration mappings.

A reporting project usually fixes its rounding conventions once, in a small
JSON file shared by every script that writes tables or inline text::

    {
        "method": "magnitude",
        "digits": [2, 1, 1, 0],
        "breaks": [1, 10, 100, "inf"],
        "tie_break": "half_even",
        "missing_marker": "NA"
    }

This module turns such mappings into :class:`RoundingSpec` objects so that
scripts share the same semantics when interpreting them.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, List, Mapping, Union

from inline_tables.config import (
    DEFAULT_DIGITS,
    DEFAULT_METHOD,
    INFINITY_TOKENS,
    METHOD_DECIMAL,
    METHOD_MAGNITUDE,
    METHOD_SIGNIF,
    SPEC_KEY_BIG_MARK,
    SPEC_KEY_BREAKS,
    SPEC_KEY_DIGITS,
    SPEC_KEY_METHOD,
    SPEC_KEY_MISSING_MARKER,
    SPEC_KEY_TIE_BREAK,
    SPEC_KEYS,
)
from inline_tables.errors import ConfigError
from inline_tables.rounding import (
    RoundingSpec,
    create_default_spec,
    with_big_mark,
    with_decimal_rule,
    with_magnitude_rule,
    with_missing_marker,
    with_signif_rule,
    with_tie_break,
)

LOGGER = logging.getLogger(__name__)


def parse_break(value: object, *, is_last: bool) -> float:
    """Return a magnitude break as a float.

    ``"inf"``/``"Infinity"`` (any case) and, in the last position only,
    ``None`` stand for positive infinity.
    """

    if value is None and is_last:
        return math.inf
    if isinstance(value, str):
        text = value.strip().lower()
        if text in INFINITY_TOKENS:
            return math.inf
        try:
            return float(text)
        except ValueError as err:
            raise ConfigError(f"Invalid break {value!r}") from err
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Invalid break {value!r}")
    return float(value)


def _as_list(value: object, key: str) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{key!r} must be a list for magnitude rounding, got {value!r}")
    return list(value)


def spec_from_mapping(mapping: Mapping[str, Any]) -> RoundingSpec:
    """Return a :class:`RoundingSpec` described by ``mapping``.

    Parameters
    ----------
    mapping:
        Dictionary with optional keys ``method`` (``"signif"``,
        ``"decimal"`` or ``"magnitude"``), ``digits``, ``breaks``,
        ``tie_break``, ``missing_marker`` and ``big_mark``. When ``method``
        is omitted it defaults to ``"magnitude"`` if ``breaks`` is present
        and to significant digits otherwise.

    Raises
    ------
    ConfigError
        If the mapping has unknown keys or inconsistent values.
    """

    unknown = sorted(set(mapping) - SPEC_KEYS)
    if unknown:
        raise ConfigError(
            f"Unknown rounding config keys {unknown}; expected a subset of "
            f"{sorted(SPEC_KEYS)}"
        )

    method = mapping.get(SPEC_KEY_METHOD)
    if method is None:
        method = METHOD_MAGNITUDE if SPEC_KEY_BREAKS in mapping else DEFAULT_METHOD
    method = str(method).strip().lower()

    spec = create_default_spec()
    digits = mapping.get(SPEC_KEY_DIGITS, DEFAULT_DIGITS)
    if method == METHOD_MAGNITUDE:
        if SPEC_KEY_BREAKS not in mapping or SPEC_KEY_DIGITS not in mapping:
            raise ConfigError("Magnitude rounding needs both 'digits' and 'breaks'")
        digit_list = _as_list(digits, SPEC_KEY_DIGITS)
        raw_breaks = _as_list(mapping[SPEC_KEY_BREAKS], SPEC_KEY_BREAKS)
        breaks = [
            parse_break(value, is_last=position == len(raw_breaks) - 1)
            for position, value in enumerate(raw_breaks)
        ]
        spec = with_magnitude_rule(spec, digit_list, breaks)
    elif method in (METHOD_SIGNIF, METHOD_DECIMAL):
        if SPEC_KEY_BREAKS in mapping:
            raise ConfigError(f"'breaks' is only valid with method {METHOD_MAGNITUDE!r}")
        if method == METHOD_SIGNIF:
            spec = with_signif_rule(spec, digits)
        else:
            spec = with_decimal_rule(spec, digits)
    else:
        raise ConfigError(
            f"Unknown rounding method {method!r}; expected one of "
            f"{[METHOD_SIGNIF, METHOD_DECIMAL, METHOD_MAGNITUDE]}"
        )

    if SPEC_KEY_TIE_BREAK in mapping:
        spec = with_tie_break(spec, mapping[SPEC_KEY_TIE_BREAK])
    if SPEC_KEY_MISSING_MARKER in mapping:
        spec = with_missing_marker(spec, mapping[SPEC_KEY_MISSING_MARKER])
    if SPEC_KEY_BIG_MARK in mapping:
        spec = with_big_mark(spec, mapping[SPEC_KEY_BIG_MARK])
    return spec


def load_spec_config(path: Union[str, Path]) -> RoundingSpec:
    """Return the rounding spec stored in the JSON file at ``path``.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not valid JSON, does not hold a JSON
        object, or describes an invalid spec. Read and parse failures are
        also logged using the module logger.
    """

    config_path = Path(str(path)).expanduser()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        LOGGER.error("Failed to read rounding config %s: %s", config_path, err)
        raise ConfigError(f"Cannot read rounding config {config_path}") from err
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as err:
        LOGGER.error(
            "Failed to parse rounding config %s as JSON: %s",
            config_path,
            err,
        )
        raise ConfigError(f"Rounding config {config_path} is not valid JSON") from err
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Rounding config {config_path} must contain a JSON object, "
            f"got {type(raw).__name__}"
        )
    return spec_from_mapping(raw)


__all__ = ["load_spec_config", "parse_break", "spec_from_mapping"]
