"""Template substitution for gluing formatted numbers into text.

Templates use the ``str.format`` field syntax restricted to bare names:
``"{mean} ({sd})"`` substitutes the bindings ``mean`` and ``sd``, while
``{{`` and ``}}`` produce literal braces. Numeric bindings are passed through
:func:`~inline_tables.formatting.format_value`; string bindings are inserted
verbatim.
"""

from __future__ import annotations

import string
from typing import List, Mapping, Optional

import pandas as pd

from inline_tables.errors import FormatError, UnboundNameError
from inline_tables.formatting import format_value
from inline_tables.rounding import RoundingSpec, create_default_spec

_FORMATTER = string.Formatter()


def template_fields(template: str) -> List[str]:
    """Return the names referenced by ``template`` in order of appearance.

    Raises
    ------
    FormatError
        If the template has unbalanced braces, positional fields, attribute
        or index access, conversions, or format specifications.
    """

    try:
        parsed = list(_FORMATTER.parse(template))
    except ValueError as err:
        raise FormatError(f"Malformed template {template!r}: {err}") from err

    names: List[str] = []
    for _, field_name, format_spec, conversion in parsed:
        if field_name is None:
            continue
        if not field_name.isidentifier():
            raise FormatError(
                f"Template field {{{field_name}}} in {template!r} must be a "
                "plain identifier"
            )
        if format_spec or conversion:
            raise FormatError(
                f"Template field {{{field_name}}} in {template!r} must not "
                "carry a conversion or format spec; number presentation comes "
                "from the rounding spec"
            )
        names.append(field_name)
    return names


def _substitute(value: object, spec: RoundingSpec) -> str:
    if isinstance(value, str):
        return value
    return format_value(spec, value)


def render(
    template: str,
    bindings: Mapping[str, object],
    spec: Optional[RoundingSpec] = None,
) -> str:
    """Return ``template`` with each ``{name}`` replaced by its binding.

    Parameters
    ----------
    template:
        Text containing ``{name}`` markers.
    bindings:
        Mapping from marker name to a number or string.
    spec:
        Rounding spec for numeric bindings; defaults to
        :func:`~inline_tables.rounding.create_default_spec`.

    Raises
    ------
    UnboundNameError
        If a marker has no entry in ``bindings``.
    FormatError
        If the template itself is malformed.
    """

    active_spec = spec if spec is not None else create_default_spec()
    names = template_fields(template)
    missing = [name for name in names if name not in bindings]
    if missing:
        raise UnboundNameError(
            f"Template {template!r} references unbound names: {missing}"
        )
    values = {name: _substitute(bindings[name], active_spec) for name in names}
    return template.format_map(values)


def table_glue(
    frame: pd.DataFrame,
    template: str,
    spec: Optional[RoundingSpec] = None,
) -> pd.Series:
    """Render ``template`` once per row of ``frame``.

    Each row's columns act as the bindings. The result is a Series of
    strings aligned to ``frame.index``.

    Raises
    ------
    UnboundNameError
        If the template references a name that is not a column of ``frame``.
    """

    active_spec = spec if spec is not None else create_default_spec()
    names = template_fields(template)
    missing = [name for name in names if name not in frame.columns]
    if missing:
        raise UnboundNameError(
            f"Template {template!r} references columns not in the table: {missing}"
        )
    rendered = [
        render(template, row, active_spec)
        for row in frame.loc[:, list(dict.fromkeys(names))].to_dict(orient="records")
    ]
    return pd.Series(rendered, index=frame.index, dtype=object)


__all__ = ["render", "table_glue", "template_fields"]
