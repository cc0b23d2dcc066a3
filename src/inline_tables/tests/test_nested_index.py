"""
Tests for nested inline lookup indexes.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest

from inline_tables.errors import ConfigError, MissingColumnError, PathNotFoundError
from inline_tables.nested_index import build_index, get, get_value

ROWS = [
    {"exam": "2013", "sex": "female", "race": "black", "sbp": 120.44, "sd": 5.2},
    {"exam": "2017", "sex": "female", "race": "black", "sbp": 118.1, "sd": 4.9},
]


def test_build_and_get_returns_row_values() -> None:
    """A leaf holds the value columns of the row at its path."""

    index = build_index(ROWS, ["exam", "sex", "race"], {"sbp", "sd"})

    assert get(index, ["2013", "female", "black"]) == {"sbp": 120.44, "sd": 5.2}
    assert index.get(("2017", "female", "black")) == {"sbp": 118.1, "sd": 4.9}
    assert get_value(index, ["2017", "female", "black"], "sbp") == 118.1
    assert len(index) == 2
    assert index.group_columns == ("exam", "sex", "race")
    assert set(index.value_columns) == {"sbp", "sd"}
    assert index.duplicate_paths == ()


def test_build_from_dataframe_matches_rows() -> None:
    """DataFrames and row mappings produce the same tree."""

    frame = pd.DataFrame(ROWS)

    from_frame = build_index(frame, ["exam", "sex", "race"], ["sbp", "sd"])
    from_rows = build_index(ROWS, ["exam", "sex", "race"], ["sbp", "sd"])

    assert from_frame.to_dict() == from_rows.to_dict()


def test_keys_are_strings_and_lookup_stringifies_segments() -> None:
    """Integer group values are stored and looked up as strings."""

    frame = pd.DataFrame({"exam": [2013, 2017], "sbp": [120.4, 118.1]})
    index = build_index(frame, ["exam"], ["sbp"])

    assert index.keys() == ["2013", "2017"]
    assert index.get([2013]) == index.get(["2013"]) == {"sbp": 120.4}


def test_missing_group_values_use_na_key() -> None:
    """None and NaN grouping values become the 'NA' key."""

    frame = pd.DataFrame({"race": ["black", np.nan], "sbp": [120.0, 119.0]})
    index = build_index(frame, ["race"], ["sbp"])

    assert index.get(["NA"]) == {"sbp": 119.0}
    assert index.get([None]) == {"sbp": 119.0}


def test_duplicate_paths_last_row_wins_and_warns(caplog) -> None:
    """Later rows overwrite earlier ones and each duplicate path is logged."""

    rows = ROWS + [
        {"exam": "2013", "sex": "female", "race": "black", "sbp": 125.0, "sd": 6.0},
        {"exam": "2013", "sex": "female", "race": "black", "sbp": 126.0, "sd": 6.5},
    ]

    with caplog.at_level(logging.WARNING, logger="inline_tables.nested_index"):
        index = build_index(rows, ["exam", "sex", "race"], ["sbp", "sd"])

    assert index.get(["2013", "female", "black"]) == {"sbp": 126.0, "sd": 6.5}
    assert index.duplicate_paths == (("2013", "female", "black"),)
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "do not identify rows uniquely" in warnings[0].getMessage()


def test_duplicate_warning_can_be_silenced(caplog) -> None:
    """warn_duplicates=False records duplicates without logging."""

    rows = [{"g": "a", "v": 1}, {"g": "a", "v": 2}]

    with caplog.at_level(logging.WARNING, logger="inline_tables.nested_index"):
        index = build_index(rows, ["g"], ["v"], warn_duplicates=False)

    assert index.get(["a"]) == {"v": 2}
    assert index.duplicate_paths == (("a",),)
    assert not caplog.records


def test_get_missing_segment_raises() -> None:
    """An absent key at any level raises PathNotFoundError."""

    index = build_index(ROWS, ["exam", "sex", "race"], ["sbp"])

    with pytest.raises(PathNotFoundError):
        index.get(["2015", "female", "black"])
    with pytest.raises(PathNotFoundError):
        index.get(["2013", "male", "black"])
    with pytest.raises(PathNotFoundError):
        index.get(["2013", "female", "white"])


@pytest.mark.parametrize(
    "path",
    [[], ["2013"], ["2013", "female"], ["2013", "female", "black", "extra"]],
)
def test_get_requires_full_path(path) -> None:
    """Paths must have one segment per grouping column."""

    index = build_index(ROWS, ["exam", "sex", "race"], ["sbp"])
    with pytest.raises(PathNotFoundError):
        index.get(path)


def test_get_value_unknown_column() -> None:
    """Asking for a column that is not stored raises PathNotFoundError."""

    index = build_index(ROWS, ["exam", "sex", "race"], ["sbp"])
    with pytest.raises(PathNotFoundError):
        index.get_value(["2013", "female", "black"], "sd")


def test_missing_columns_raise() -> None:
    """Group or value columns absent from the table are reported."""

    with pytest.raises(MissingColumnError):
        build_index(ROWS, ["exam", "age"], ["sbp"])
    with pytest.raises(MissingColumnError):
        build_index(pd.DataFrame(ROWS), ["exam"], ["dbp"])
    ragged = [ROWS[0], {"exam": "2017", "sex": "male", "race": "black"}]
    with pytest.raises(MissingColumnError) as excinfo:
        build_index(ragged, ["exam"], ["sbp"])
    assert "row 1" in str(excinfo.value)


def test_group_columns_validation() -> None:
    """Grouping columns must be non-empty and distinct."""

    with pytest.raises(ConfigError):
        build_index(ROWS, [], ["sbp"])
    with pytest.raises(ConfigError):
        build_index(ROWS, ["exam", "exam"], ["sbp"])


def test_partial_paths_keys_and_subtree() -> None:
    """keys and subtree navigate partial paths."""

    index = build_index(ROWS, ["exam", "sex", "race"], ["sbp"])

    assert index.keys() == ["2013", "2017"]
    assert index.keys(["2013"]) == ["female"]
    assert index.subtree(["2013"]) == {"female": {"black": {"sbp": 120.44}}}
    with pytest.raises(PathNotFoundError):
        index.keys(["2013", "female", "black"])


def test_returned_structures_are_copies() -> None:
    """Mutating returned mappings does not change the index."""

    index = build_index(ROWS, ["exam", "sex", "race"], ["sbp"])

    leaf = index.get(["2013", "female", "black"])
    leaf["sbp"] = 0.0
    tree = index.to_dict()
    tree["2013"]["female"]["black"]["sbp"] = 0.0
    index.subtree(["2013"])["female"].clear()

    assert index.get(["2013", "female", "black"]) == {"sbp": 120.44}


def test_contains_and_empty_index() -> None:
    """Membership tests paths; an empty table gives an empty index."""

    index = build_index(ROWS, ["exam", "sex", "race"], ["sbp"])
    assert ["2013", "female", "black"] in index
    assert ["2013", "female"] not in index
    assert "2013" not in index

    empty = build_index([], ["exam"], ["sbp"])
    assert len(empty) == 0
    assert empty.to_dict() == {}
    with pytest.raises(PathNotFoundError):
        empty.get(["2013"])


def test_integer_column_with_missing_values_keeps_integer_keys() -> None:
    """A missing value turning an int column into floats does not change keys."""

    frame = pd.DataFrame({"exam": [2013, None, 2017], "sbp": [120.4, 119.0, 118.1]})
    index = build_index(frame, ["exam"], ["sbp"])

    assert index.keys() == ["2013", "NA", "2017"]
    assert index.get([2013]) == index.get(["2013"]) == {"sbp": 120.4}
    assert index.get([2017.0]) == {"sbp": 118.1}


def test_numpy_nan_group_values_use_na_key() -> None:
    """NaN of any float width maps to the 'NA' key."""

    rows = [
        {"race": np.float32("nan"), "sbp": 119.0},
        {"race": 1.5, "sbp": 121.0},
    ]
    index = build_index(rows, ["race"], ["sbp"])

    assert index.keys() == ["NA", "1.5"]
    assert index.get([pd.NA]) == {"sbp": 119.0}
