"""
Tests for template substitution and row-wise glueing.
"""

from __future__ import annotations

import math

import pandas as pd
import pytest

from inline_tables.brackets import bracket_drop, bracket_extract
from inline_tables.errors import FormatError, InvalidInputError, UnboundNameError
from inline_tables.formatting import format_value
from inline_tables.rounding import (
    create_default_spec,
    with_decimal_rule,
    with_magnitude_rule,
    with_missing_marker,
)
from inline_tables.templating import render, table_glue, template_fields


def _one_decimal():
    return with_decimal_rule(create_default_spec(), 1)


def test_render_formats_numbers_and_keeps_strings() -> None:
    """Numbers go through the spec while strings are inserted verbatim."""

    text = render(
        "{group}: {mean} ({sd})",
        {"group": "female", "mean": 120.44, "sd": 5.25},
        _one_decimal(),
    )
    assert text == "female: 120.4 (5.3)"


def test_render_defaults_to_default_spec() -> None:
    """Without a spec the default significant-digit rounding applies."""

    assert render("pi is about {pi}", {"pi": math.pi}) == "pi is about 3.1"


def test_render_escapes_literal_braces() -> None:
    """Doubled braces render as literal braces."""

    assert render("{{x}} = {x}", {"x": 1}, _one_decimal()) == "{x} = 1.0"


def test_render_reports_unbound_names() -> None:
    """A marker without a binding raises UnboundNameError."""

    with pytest.raises(UnboundNameError) as excinfo:
        render("{mean} ({sd})", {"mean": 1.0})
    assert "sd" in str(excinfo.value)
    assert isinstance(excinfo.value, LookupError)


def test_render_ignores_extra_bindings() -> None:
    """Bindings not referenced by the template are unused."""

    assert render("{a}", {"a": "x", "b": 2.0}) == "x"


@pytest.mark.parametrize(
    "template",
    ["{}", "{0}", "{x.real}", "{x[0]}", "{x:.2f}", "{x!r}", "{x", "x}"],
)
def test_malformed_templates_raise_format_error(template) -> None:
    """Only bare identifiers without format specs are accepted."""

    with pytest.raises(FormatError):
        render(template, {"x": 1.0})


def test_template_fields_lists_names_in_order() -> None:
    """Field names are returned in order of appearance."""

    assert template_fields("{b} and {a} and {b}") == ["b", "a", "b"]
    assert template_fields("no fields {{here}}") == []


def test_render_missing_value_uses_marker_or_raises() -> None:
    """Missing numeric bindings follow the spec's missing policy."""

    with pytest.raises(InvalidInputError):
        render("{x}", {"x": None})
    spec = with_missing_marker(_one_decimal(), "NA")
    assert render("{x} ({y})", {"x": None, "y": 2}, spec) == "NA (2.0)"


def test_table_glue_renders_each_row() -> None:
    """table_glue returns one string per row aligned to the frame index."""

    frame = pd.DataFrame(
        {"exam": ["2013", "2017"], "mean": [120.44, 118.1], "sd": [5.2, 4.9]},
        index=[10, 20],
    )

    glued = table_glue(frame, "{mean} ({sd})", _one_decimal())

    assert glued.tolist() == ["120.4 (5.2)", "118.1 (4.9)"]
    assert glued.index.tolist() == [10, 20]


def test_table_glue_requires_template_columns() -> None:
    """Template names must be columns of the frame."""

    frame = pd.DataFrame({"mean": [1.0]})
    with pytest.raises(UnboundNameError):
        table_glue(frame, "{mean} ({sd})")


def test_table_glue_empty_frame() -> None:
    """An empty frame yields an empty Series."""

    frame = pd.DataFrame({"mean": pd.Series([], dtype=float)})
    assert table_glue(frame, "{mean}").tolist() == []


@pytest.mark.parametrize(
    "mean, sd",
    [(120.44, 5.2), (0.5, 0.05), (-3.25, 12.5), (1500.0, 250.75), (0.0, 0.0)],
)
def test_brackets_recover_both_halves_of_rendered_cell(mean, sd) -> None:
    """bracket_drop and bracket_extract split a rendered '{mean} ({sd})'."""

    spec = with_magnitude_rule(create_default_spec(), [2, 1, 0], [1, 100, math.inf])
    cell = render("{mean} ({sd})", {"mean": mean, "sd": sd}, spec)

    assert bracket_drop(cell) == format_value(spec, mean)
    assert bracket_extract(cell) == format_value(spec, sd)
