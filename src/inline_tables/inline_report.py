"""End-to-end helper for turning a summary table into inline values.

The usual manuscript workflow is: summarise data per group elsewhere, glue
the numeric columns into display strings such as ``"120.4 (5.2)"``, and
build a nested lookup so the text can quote any cell by its group values.
:func:`build_inline_report` performs the last two steps in one call.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

import pandas as pd

from inline_tables.errors import ConfigError
from inline_tables.nested_index import NestedIndex, build_index
from inline_tables.rounding import RoundingSpec, create_default_spec
from inline_tables.templating import table_glue

LOGGER = logging.getLogger(__name__)


def glue_columns(
    frame: pd.DataFrame,
    templates: Mapping[str, str],
    spec: Optional[RoundingSpec] = None,
) -> pd.DataFrame:
    """Return a copy of ``frame`` with one glued string column per template.

    Parameters
    ----------
    frame:
        Summary table with one row per group.
    templates:
        Mapping from new column name to a ``{column}`` template.
    spec:
        Rounding spec for numeric cells; defaults to
        :func:`~inline_tables.rounding.create_default_spec`.

    Raises
    ------
    ConfigError
        If a new column name already exists in ``frame``.
    """

    active_spec = spec if spec is not None else create_default_spec()
    result = frame.copy()
    for column, template in templates.items():
        if column in frame.columns:
            raise ConfigError(
                f"Glued column {column!r} would overwrite an existing column"
            )
        result[column] = table_glue(frame, template, active_spec)
        LOGGER.debug("Glued column %s from template %r", column, template)
    return result


def build_inline_report(
    frame: pd.DataFrame,
    *,
    group_columns: Sequence[str],
    value_columns: Iterable[str],
    templates: Optional[Mapping[str, str]] = None,
    spec: Optional[RoundingSpec] = None,
) -> NestedIndex:
    """Glue template columns onto ``frame`` and index the result.

    Glued column names may appear in ``value_columns``; raw columns are
    stored unformatted.
    """

    glued = glue_columns(frame, templates or {}, spec)
    index = build_index(glued, group_columns, value_columns)
    LOGGER.info(
        "Built inline index with %d entries over %s",
        len(index),
        list(index.group_columns),
    )
    return index


def _json_ready(node: Any) -> Any:
    if isinstance(node, dict):
        return {key: _json_ready(child) for key, child in node.items()}
    if pd.api.types.is_scalar(node) and pd.isna(node):
        return None
    return node


def index_to_json(index: NestedIndex, *, indent: Optional[int] = 2) -> str:
    """Return ``index`` as a JSON object string.

    Missing leaf values (``None``, ``NaN``, pandas ``NA``) are written as
    ``null`` so the output is strict JSON; other non-JSON values such as
    numpy scalars are written through ``str``.
    """

    return json.dumps(
        _json_ready(index.to_dict()), indent=indent, allow_nan=False, default=str
    )


__all__ = ["build_inline_report", "glue_columns", "index_to_json"]
