"""Helpers for reporting summary tables inline in manuscript text.

This package bundles the small pieces needed to turn summarised table
values into text that can be quoted in a manuscript:

rounding
    Immutable rounding specifications (decimal places, significant digits
    or magnitude breakpoints) and decimal-accurate rounding primitives.
formatting
    Rendering numbers as fixed-width decimal strings under a spec.
templating
    ``{name}`` template substitution for single binding sets and whole
    DataFrames.
nested_index
    Nested lookup trees built from flat tables for inline references.
inline_report
    Glue template columns onto a summary table and index the result.
spec_config
    Rounding specs described by JSON configuration files.
brackets
    Extracting or removing parenthetical parts of formatted strings.
"""

from __future__ import annotations

from inline_tables.brackets import (
    bracket_drop,
    bracket_extract,
    bracket_insert_left,
    bracket_insert_right,
    bracket_lower_bound,
    bracket_point_estimate,
    bracket_upper_bound,
)
from inline_tables.errors import (
    ConfigError,
    FormatError,
    InlineTablesError,
    InvalidInputError,
    MissingColumnError,
    PathNotFoundError,
    UnboundNameError,
)
from inline_tables.formatting import format_column, format_value, format_with_rule
from inline_tables.inline_report import (
    build_inline_report,
    glue_columns,
    index_to_json,
)
from inline_tables.nested_index import NestedIndex, build_index, get, get_value
from inline_tables.rounding import (
    RoundingMethod,
    RoundingRule,
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
from inline_tables.spec_config import load_spec_config, spec_from_mapping
from inline_tables.templating import render, table_glue

__all__ = [
    "ConfigError",
    "FormatError",
    "InlineTablesError",
    "InvalidInputError",
    "MissingColumnError",
    "NestedIndex",
    "PathNotFoundError",
    "RoundingMethod",
    "RoundingRule",
    "RoundingSpec",
    "TieBreak",
    "UnboundNameError",
    "bracket_drop",
    "bracket_extract",
    "bracket_insert_left",
    "bracket_insert_right",
    "bracket_lower_bound",
    "bracket_point_estimate",
    "bracket_upper_bound",
    "build_index",
    "build_inline_report",
    "create_default_spec",
    "format_column",
    "format_value",
    "format_with_rule",
    "get",
    "get_value",
    "glue_columns",
    "index_to_json",
    "load_spec_config",
    "render",
    "spec_from_mapping",
    "table_glue",
    "with_big_mark",
    "with_decimal_rule",
    "with_magnitude_rule",
    "with_missing_marker",
    "with_signif_rule",
    "with_tie_break",
]
