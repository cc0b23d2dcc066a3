"""
Tests for shared argparse rounding helpers.
"""

from __future__ import annotations

import argparse
import json
import math
from pathlib import Path

import pytest

from inline_tables.errors import ConfigError
from inline_tables.formatting import format_value
from inline_tables.rounding import RoundingMethod, TieBreak
from utils.cli import (
    add_log_level_argument,
    add_output_path_argument,
    add_rounding_arguments,
    rounding_spec_from_args,
    split_columns_argument,
)


def _parse(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    add_rounding_arguments(parser)
    add_log_level_argument(parser)
    add_output_path_argument(parser, default_path=None, help_text="Output.")
    return parser.parse_args(argv)


def test_no_flags_gives_default_spec() -> None:
    """Without rounding flags the default spec is used."""

    args = _parse([])
    spec = rounding_spec_from_args(args)

    assert spec.method is RoundingMethod.SIGNIF
    assert args.log_level == "INFO"
    assert args.output is None


def test_single_digits_flag() -> None:
    """One --digits value rounds to fixed decimals, or significant digits."""

    decimal_spec = rounding_spec_from_args(_parse(["--digits", "1"]))
    signif_spec = rounding_spec_from_args(_parse(["--digits", "3", "--signif"]))

    assert format_value(decimal_spec, 120.44) == "120.4"
    assert format_value(signif_spec, 0.012345) == "0.0123"


def test_magnitude_flags() -> None:
    """Paired --digits and --breaks build a magnitude spec."""

    args = _parse(
        [
            "--digits", "2", "1", "0",
            "--breaks", "1", "100", "inf",
            "--tie-break", "half_even",
            "--missing-marker",
            "--big-mark", ",",
        ]
    )
    spec = rounding_spec_from_args(args)

    assert spec.rules[-1].upper_bound == math.inf
    assert spec.tie_break is TieBreak.ROUND_HALF_EVEN
    assert spec.missing_marker == "NA"
    assert format_value(spec, 0.125) == "0.12"
    assert format_value(spec, 12345.5) == "12,346"


@pytest.mark.parametrize(
    "argv",
    [
        ["--breaks", "1", "inf"],
        ["--digits", "1", "0"],
        ["--signif"],
        ["--digits", "1", "0", "--breaks", "1", "inf", "--signif"],
        ["--digits", "1", "0", "--breaks", "10", "1"],
    ],
)
def test_inconsistent_flags_raise(argv) -> None:
    """Flag combinations that do not describe a spec are rejected."""

    with pytest.raises(ConfigError):
        rounding_spec_from_args(_parse(argv))


def test_invalid_break_is_an_argparse_error() -> None:
    """Non-numeric breaks fail during argument parsing."""

    with pytest.raises(SystemExit):
        _parse(["--digits", "1", "--breaks", "lots"])


def test_spec_config_with_overrides(tmp_path: Path) -> None:
    """Flags are applied on top of a JSON spec config."""

    config_path = tmp_path / "rounding.json"
    config_path.write_text(json.dumps({"method": "decimal", "digits": 2}), encoding="utf-8")

    args = _parse(["--spec-config", str(config_path), "--missing-marker", "n/a"])
    spec = rounding_spec_from_args(args)

    assert format_value(spec, 1.0) == "1.00"
    assert format_value(spec, None) == "n/a"


def test_split_columns_argument() -> None:
    """Comma-separated lists drop blanks and whitespace."""

    assert split_columns_argument("exam, sex,,race ") == ["exam", "sex", "race"]
