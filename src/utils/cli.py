"""CLI helper utilities for shared argparse patterns.

This module centralizes common command-line argument definitions used across
reporting scripts so that:

- Rounding flags (digits, magnitude breaks, tie-break, missing marker) are
  spelled and interpreted the same way in every tool.
- Scripts turn parsed arguments into a ``RoundingSpec`` through one helper
  instead of repeating the builder calls.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from inline_tables.config import DEFAULT_MISSING_MARKER
from inline_tables.errors import ConfigError
from inline_tables.rounding import (
    RoundingSpec,
    TieBreak,
    create_default_spec,
    with_big_mark,
    with_decimal_rule,
    with_magnitude_rule,
    with_missing_marker,
    with_signif_rule,
    with_tie_break,
)
from inline_tables.spec_config import load_spec_config, parse_break


def break_argument(value: str) -> float:
    """Parse one ``--breaks`` entry; ``inf`` stands for positive infinity."""

    try:
        return parse_break(value, is_last=False)
    except ConfigError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def add_output_path_argument(
    parser: argparse.ArgumentParser,
    *,
    default_path: Optional[Path | str],
    help_text: str,
) -> None:
    """Add a shared ``--output/-o`` path argument.

    Parameters
    ----------
    parser:
        Target argument parser.
    default_path:
        Default file path for the output, or ``None`` for standard output.
    help_text:
        Help string describing the output target.
    """

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path(default_path) if default_path is not None else None,
        help=help_text,
    )


def add_log_level_argument(parser: argparse.ArgumentParser) -> None:
    """Add a shared ``--log-level`` argument for logging verbosity.

    Parameters
    ----------
    parser:
        Target argument parser.
    """

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )


def add_rounding_arguments(parser: argparse.ArgumentParser) -> None:
    """Add shared rounding flags understood by :func:`rounding_spec_from_args`.

    Parameters
    ----------
    parser:
        Target argument parser.
    """

    group = parser.add_argument_group("rounding")
    group.add_argument(
        "--spec-config",
        type=Path,
        default=None,
        help=(
            "JSON file describing the rounding spec. Other rounding flags "
            "are applied on top of it."
        ),
    )
    group.add_argument(
        "--digits",
        type=int,
        nargs="+",
        default=None,
        help=(
            "Digits to keep. One value rounds every number alike; several "
            "values pair with --breaks for magnitude-based rounding."
        ),
    )
    group.add_argument(
        "--breaks",
        type=break_argument,
        nargs="+",
        default=None,
        help=(
            "Exclusive upper magnitude bounds for each --digits entry, "
            "ending with 'inf' (for example: 1 10 100 inf)."
        ),
    )
    group.add_argument(
        "--signif",
        action="store_true",
        help="Treat a single --digits value as significant digits.",
    )
    group.add_argument(
        "--tie-break",
        choices=[member.value for member in TieBreak],
        default=None,
        help="How exact half-way values are rounded (default: half_up).",
    )
    group.add_argument(
        "--missing-marker",
        nargs="?",
        const=DEFAULT_MISSING_MARKER,
        default=None,
        help=(
            "Render missing and non-finite values as this marker instead of "
            f"failing (default marker when given without a value: "
            f"{DEFAULT_MISSING_MARKER})."
        ),
    )
    group.add_argument(
        "--big-mark",
        default=None,
        help="Thousands separator for large numbers, for example ','.",
    )


def rounding_spec_from_args(args: argparse.Namespace) -> RoundingSpec:
    """Return the rounding spec described by parsed rounding flags.

    Raises
    ------
    ConfigError
        If the flags are inconsistent, for example ``--breaks`` without
        matching ``--digits``.
    """

    if args.spec_config is not None:
        spec = load_spec_config(args.spec_config)
    else:
        spec = create_default_spec()

    digits: Optional[List[int]] = args.digits
    breaks: Optional[List[float]] = args.breaks
    if breaks is not None:
        if digits is None:
            raise ConfigError("--breaks requires --digits")
        if args.signif:
            raise ConfigError("--signif cannot be combined with --breaks")
        spec = with_magnitude_rule(spec, digits, breaks)
    elif digits is not None:
        if len(digits) != 1:
            raise ConfigError("Several --digits values require --breaks")
        if args.signif:
            spec = with_signif_rule(spec, digits[0])
        else:
            spec = with_decimal_rule(spec, digits[0])
    elif args.signif:
        raise ConfigError("--signif requires --digits")

    if args.tie_break is not None:
        spec = with_tie_break(spec, args.tie_break)
    if args.missing_marker is not None:
        spec = with_missing_marker(spec, args.missing_marker)
    if args.big_mark is not None:
        spec = with_big_mark(spec, args.big_mark)
    return spec


def split_columns_argument(value: str) -> List[str]:
    """Return a comma-separated column list with blanks removed."""

    columns = [part.strip() for part in value.split(",")]
    return [column for column in columns if column]
