"""Nested lookup trees for quoting table values inline.

A flat summary table such as::

    exam  sex     race   sbp     sd
    2013  female  black  120.44  5.2
    2017  female  black  118.1   4.9

is turned into a tree keyed by the grouping columns, in order, so that a
manuscript can ask for ``index.get(["2013", "female", "black"])`` and
receive ``{"sbp": 120.44, "sd": 5.2}``.

Grouping columns are expected to identify rows uniquely. When they do not,
later rows overwrite earlier ones at the same path; each duplicated path is
logged as a warning and recorded on :attr:`NestedIndex.duplicate_paths`.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from inline_tables.config import MISSING_GROUP_KEY
from inline_tables.errors import ConfigError, MissingColumnError, PathNotFoundError

LOGGER = logging.getLogger(__name__)

TableLike = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]
KeyPath = Tuple[str, ...]


def normalise_key(value: object) -> str:
    """Return the string key used for a grouping value.

    Missing values (``None``, any ``NaN``, pandas ``NA``) map to ``"NA"``.
    Integral floats map to their integer text, so an integer column that
    pandas stored as float because of a missing value keeps keys such as
    ``"2013"`` rather than ``"2013.0"``.
    """

    if pd.api.types.is_scalar(value) and pd.isna(value):
        return MISSING_GROUP_KEY
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


class NestedIndex:
    """Read-only tree from grouping-column values to leaf value mappings.

    Instances are produced by :func:`build_index`; every accessor returns a
    copy so the stored tree cannot be changed after construction.
    """

    def __init__(
        self,
        tree: Dict[str, Any],
        group_columns: Sequence[str],
        value_columns: Sequence[str],
        duplicate_paths: Sequence[KeyPath] = (),
    ) -> None:
        self._tree = tree
        self._group_columns = tuple(group_columns)
        self._value_columns = tuple(value_columns)
        self.duplicate_paths: Tuple[KeyPath, ...] = tuple(duplicate_paths)

    @property
    def group_columns(self) -> Tuple[str, ...]:
        """Grouping columns, one per tree level."""
        return self._group_columns

    @property
    def value_columns(self) -> Tuple[str, ...]:
        """Columns stored in each leaf."""
        return self._value_columns

    def __repr__(self) -> str:
        return (
            f"NestedIndex(group_columns={list(self._group_columns)!r}, "
            f"value_columns={list(self._value_columns)!r}, leaves={len(self)})"
        )

    def __len__(self) -> int:
        def count(node: Dict[str, Any], depth: int) -> int:
            if depth == len(self._group_columns):
                return 1
            return sum(count(child, depth + 1) for child in node.values())

        if not self._tree:
            return 0
        return count(self._tree, 0)

    def __contains__(self, path: object) -> bool:
        if isinstance(path, (str, bytes)) or not isinstance(path, Iterable):
            return False
        try:
            self.get(path)
        except PathNotFoundError:
            return False
        return True

    def _walk(self, path: Iterable[object]) -> Tuple[KeyPath, Dict[str, Any]]:
        keys = tuple(normalise_key(segment) for segment in path)
        if len(keys) > len(self._group_columns):
            raise PathNotFoundError(
                f"Path {list(keys)} is longer than the index depth "
                f"{len(self._group_columns)} ({list(self._group_columns)})"
            )
        node = self._tree
        for depth, key in enumerate(keys):
            if key not in node:
                column = self._group_columns[depth]
                raise PathNotFoundError(
                    f"No entry {key!r} for column {column!r} under path "
                    f"{list(keys[:depth])}; available: {sorted(node)}"
                )
            node = node[key]
        return keys, node

    def get(self, path: Iterable[object]) -> Dict[str, Any]:
        """Return a copy of the leaf mapping stored at ``path``.

        Raises
        ------
        PathNotFoundError
            If ``path`` does not have one segment per grouping column or any
            segment is absent.
        """

        keys, node = self._walk(path)
        if len(keys) != len(self._group_columns):
            raise PathNotFoundError(
                f"Path {list(keys)} has {len(keys)} segments; the index expects "
                f"{len(self._group_columns)} ({list(self._group_columns)})"
            )
        return dict(node)

    def get_value(self, path: Iterable[object], column: str) -> Any:
        """Return the value of ``column`` stored at ``path``."""

        leaf = self.get(path)
        if column not in leaf:
            raise PathNotFoundError(
                f"Column {column!r} is not stored in the index; "
                f"available: {list(self._value_columns)}"
            )
        return leaf[column]

    def keys(self, path: Iterable[object] = ()) -> List[str]:
        """Return the child keys below a partial ``path`` in insertion order."""

        keys, node = self._walk(path)
        if len(keys) == len(self._group_columns):
            raise PathNotFoundError(f"Path {list(keys)} already reaches a leaf")
        return list(node)

    def subtree(self, path: Iterable[object] = ()) -> Dict[str, Any]:
        """Return a deep copy of the nested dictionary below ``path``."""

        _, node = self._walk(path)
        return copy.deepcopy(node)

    def to_dict(self) -> Dict[str, Any]:
        """Return the whole tree as nested plain dictionaries."""
        return copy.deepcopy(self._tree)


def _table_records(
    table: TableLike, required: Sequence[str]
) -> List[Mapping[str, Any]]:
    if isinstance(table, pd.DataFrame):
        for column in required:
            if column not in table.columns:
                raise MissingColumnError(
                    f"Column {column!r} not in table columns {list(table.columns)}"
                )
        return table.to_dict(orient="records")

    records = list(table)
    for position, row in enumerate(records):
        for column in required:
            if column not in row:
                raise MissingColumnError(
                    f"Column {column!r} missing from row {position}: "
                    f"{sorted(map(str, row))}"
                )
    return records


def build_index(
    table: TableLike,
    group_columns: Sequence[str],
    value_columns: Iterable[str],
    *,
    warn_duplicates: bool = True,
) -> NestedIndex:
    """Build a :class:`NestedIndex` from a flat table.

    Parameters
    ----------
    table:
        pandas DataFrame or sequence of row mappings.
    group_columns:
        Ordered grouping columns; one tree level each.
    value_columns:
        Columns copied into each leaf. Duplicates are ignored.
    warn_duplicates:
        Log a warning for each path written by more than one row.

    Returns
    -------
    NestedIndex
        Index in which later rows win at duplicated paths.

    Raises
    ------
    ConfigError
        If ``group_columns`` is empty or repeats a column.
    MissingColumnError
        If a grouping or value column is absent from the table.
    """

    groups = list(group_columns)
    if isinstance(value_columns, str):
        value_columns = [value_columns]
    values = list(dict.fromkeys(value_columns))
    if not groups:
        raise ConfigError("At least one grouping column is required")
    if len(set(groups)) != len(groups):
        raise ConfigError(f"Grouping columns must be distinct: {groups}")

    records = _table_records(table, list(dict.fromkeys(groups + values)))

    tree: Dict[str, Any] = {}
    seen: Dict[KeyPath, int] = {}
    duplicates: List[KeyPath] = []
    for position, row in enumerate(records):
        path = tuple(normalise_key(row[column]) for column in groups)
        node = tree
        for key in path[:-1]:
            node = node.setdefault(key, {})
        if path in seen:
            if path not in duplicates:
                duplicates.append(path)
                if warn_duplicates:
                    LOGGER.warning(
                        "Grouping columns %s do not identify rows uniquely: "
                        "path %s from row %d overwrites row %d",
                        groups,
                        list(path),
                        position,
                        seen[path],
                    )
        seen[path] = position
        node[path[-1]] = {column: row[column] for column in values}

    return NestedIndex(tree, groups, values, duplicates)


def get(index: NestedIndex, path: Iterable[object]) -> Dict[str, Any]:
    """Return the leaf mapping at ``path``; see :meth:`NestedIndex.get`."""
    return index.get(path)


def get_value(index: NestedIndex, path: Iterable[object], column: str) -> Any:
    """Return one leaf value; see :meth:`NestedIndex.get_value`."""
    return index.get_value(path, column)


__all__ = ["NestedIndex", "build_index", "get", "get_value", "normalise_key"]
