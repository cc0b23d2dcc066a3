"""Build a nested JSON lookup of inline values from a summary CSV.

The input CSV holds one row per group, for example mean and standard
deviation of systolic blood pressure by exam, sex and race. The script can
glue numeric columns into display strings and writes a nested JSON object
keyed by the grouping columns, ready for a document template to quote.

Usage example
-------------

    python scripts/inline/build_inline_values.py summary.csv \\
        --group-columns exam,sex,race \\
        --template "{sbp_mean} ({sbp_sd})" --glue-column sbp \\
        --value-columns sbp \\
        --digits 1 \\
        --output inline_values.json

Magnitude-based rounding uses paired ``--digits`` and ``--breaks``:

    python scripts/inline/build_inline_values.py summary.csv \\
        --group-columns exam --value-columns sbp \\
        --digits 2 1 1 0 --breaks 1 10 100 inf
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from inline_tables.errors import InlineTablesError
from inline_tables.inline_report import build_inline_report, index_to_json
from utils.cli import (
    add_log_level_argument,
    add_output_path_argument,
    add_rounding_arguments,
    rounding_spec_from_args,
    split_columns_argument,
)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    """Return parsed command-line arguments for the inline value builder.

    Parameters
    ----------
    argv:
        Optional argument vector. When omitted, ``sys.argv`` is used.

    Returns
    -------
    argparse.Namespace
        Parsed arguments including the input CSV, column selections,
        optional template and rounding flags.
    """

    parser = argparse.ArgumentParser(
        description=(
            "Glue summary columns into display strings and write a nested "
            "JSON lookup keyed by grouping columns."
        )
    )
    parser.add_argument("input_csv", type=Path, help="Summary table CSV.")
    parser.add_argument(
        "--group-columns",
        type=split_columns_argument,
        required=True,
        help="Comma-separated grouping columns, outermost first.",
    )
    parser.add_argument(
        "--value-columns",
        type=split_columns_argument,
        required=True,
        help="Comma-separated columns stored at each leaf.",
    )
    parser.add_argument(
        "--template",
        default=None,
        help="Template such as '{mean} ({sd})' glued into --glue-column.",
    )
    parser.add_argument(
        "--glue-column",
        default="glued",
        help="Name of the column created from --template (default: glued).",
    )
    add_output_path_argument(
        parser,
        default_path=None,
        help_text="Destination JSON file (default: standard output).",
    )
    add_rounding_arguments(parser)
    add_log_level_argument(parser)
    return parser.parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entry point for building inline values.

    Parameters
    ----------
    argv:
        Optional custom argument list.

    Returns
    -------
    int
        Zero on success, non-zero on error.
    """

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    input_path = args.input_csv.expanduser().resolve()
    if not input_path.exists():
        logging.error("Input CSV %s does not exist.", input_path)
        return 2

    # Group values are keys, so keep them as written (e.g. "2013", "01").
    dtypes = {column: str for column in args.group_columns}
    frame = pd.read_csv(input_path, dtype=dtypes)
    logging.info("Loaded %d rows from %s", len(frame), input_path)

    templates = {args.glue_column: args.template} if args.template else {}
    try:
        spec = rounding_spec_from_args(args)
        index = build_inline_report(
            frame,
            group_columns=args.group_columns,
            value_columns=args.value_columns,
            templates=templates,
            spec=spec,
        )
    except InlineTablesError as err:
        logging.error("Failed to build inline values: %s", err)
        return 2

    payload = index_to_json(index)
    if args.output is None:
        sys.stdout.write(payload + "\n")
        return 0

    output_path = args.output.expanduser().resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(payload + "\n", encoding="utf-8")
    logging.info("Wrote inline values to %s", output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
