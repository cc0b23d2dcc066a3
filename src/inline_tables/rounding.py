"""Rounding specifications for reporting numbers in tables and text.

A :class:`RoundingSpec` is an ordered list of :class:`RoundingRule` objects
that partition the non-negative real line by magnitude. Each rule carries a
digit count and, optionally, its own tie-break policy. Specs are frozen
dataclasses; the ``with_*`` builders always return a new spec so that one
spec can be shared across every cell of a table.

Rounding is carried out on :class:`decimal.Decimal` values built from the
shortest text form of a float, so exact half-way cases such as ``2.675`` are
resolved the way they read rather than the way they are stored in binary.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from inline_tables.config import (
    DEFAULT_BIG_MARK,
    DEFAULT_DIGITS,
    DEFAULT_METHOD,
    DEFAULT_TIE_BREAK,
)
from inline_tables.errors import ConfigError, InvalidInputError

INFINITY = math.inf

Number = Union[int, float, Decimal, np.integer, np.floating]


class TieBreak(str, Enum):
    """Policy used to resolve values exactly half-way between two outputs."""

    ROUND_HALF_UP = "half_up"
    ROUND_HALF_EVEN = "half_even"

    @property
    def decimal_rounding(self) -> str:
        """Return the matching :mod:`decimal` rounding constant."""
        if self is TieBreak.ROUND_HALF_EVEN:
            return ROUND_HALF_EVEN
        # decimal.ROUND_HALF_UP rounds ties away from zero.
        return ROUND_HALF_UP


class RoundingMethod(str, Enum):
    """How a rule's ``digits`` is interpreted."""

    DECIMAL = "decimal"
    SIGNIF = "signif"


def coerce_tie_break(mode: Union[TieBreak, str]) -> TieBreak:
    """Return ``mode`` as a :class:`TieBreak`.

    Parameters
    ----------
    mode:
        Enum member, its value (``"half_up"``/``"half_even"``) or its name
        (``"ROUND_HALF_UP"``/``"ROUND_HALF_EVEN"``, case-insensitive).

    Raises
    ------
    ConfigError
        If ``mode`` does not name a known tie-break policy.
    """

    if isinstance(mode, TieBreak):
        return mode
    if isinstance(mode, str):
        text = mode.strip()
        for member in TieBreak:
            if text.lower() == member.value or text.upper() == member.name:
                return member
    raise ConfigError(
        f"Unknown tie-break {mode!r}; expected one of "
        f"{[member.value for member in TieBreak]}"
    )


def coerce_method(method: Union[RoundingMethod, str]) -> RoundingMethod:
    """Return ``method`` as a :class:`RoundingMethod` or raise ``ConfigError``."""

    if isinstance(method, RoundingMethod):
        return method
    try:
        return RoundingMethod(str(method).strip().lower())
    except ValueError as err:
        raise ConfigError(f"Unknown rounding method {method!r}") from err


def _check_digits(digits: object, *, minimum: int = 0) -> int:
    if isinstance(digits, bool) or not isinstance(digits, (int, np.integer)):
        raise ConfigError(f"digits must be an integer, got {digits!r}")
    if digits < minimum:
        raise ConfigError(f"digits must be >= {minimum}, got {digits}")
    return int(digits)


@dataclass(frozen=True)
class RoundingRule:
    """Digit count and tie-break policy for magnitudes in ``[lower, upper)``.

    Parameters
    ----------
    lower_bound:
        Inclusive lower bound on ``abs(value)``.
    upper_bound:
        Exclusive upper bound on ``abs(value)``; ``math.inf`` for the last rule.
    digits:
        Decimal places (or significant digits for ``SIGNIF`` specs).
    tie_break:
        Optional per-rule override. ``None`` inherits the spec default.
    """

    lower_bound: float
    upper_bound: float
    digits: int
    tie_break: Optional[TieBreak] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "digits", _check_digits(self.digits))
        try:
            lower = float(self.lower_bound)
            upper = float(self.upper_bound)
        except (TypeError, ValueError) as err:
            raise ConfigError(
                f"Rule bounds must be numbers, got "
                f"{self.lower_bound!r} and {self.upper_bound!r}"
            ) from err
        if math.isnan(lower) or math.isnan(upper):
            raise ConfigError("Rule bounds must not be NaN")
        if not lower < upper:
            raise ConfigError(
                f"Rule lower bound {lower} must be below upper bound {upper}"
            )
        object.__setattr__(self, "lower_bound", lower)
        object.__setattr__(self, "upper_bound", upper)
        if self.tie_break is not None:
            object.__setattr__(self, "tie_break", coerce_tie_break(self.tie_break))

    def contains(self, magnitude: Number) -> bool:
        """Return whether ``magnitude`` falls inside this rule's interval.

        Bounds and ``magnitude`` are compared as Decimals built from their
        shortest text form; an infinite upper bound holds every finite value.
        """
        value = to_decimal(magnitude)
        if value < Decimal(repr(self.lower_bound)):
            return False
        if self.upper_bound == INFINITY:
            return value.is_finite()
        return value < Decimal(repr(self.upper_bound))


@dataclass(frozen=True)
class RoundingSpec:
    """Ordered rule set mapping a value's magnitude to a rounding policy.

    The rules must cover ``[0, inf)`` without gaps or overlaps: the first
    rule starts at ``0`` or ``-inf``, each rule starts where the previous one
    ends, and the last rule ends at ``inf``.

    Parameters
    ----------
    rules:
        Rules in ascending order of ``upper_bound``.
    tie_break:
        Default tie-break for rules that do not override it.
    method:
        Whether rule digits are decimal places or significant digits.
    missing_marker:
        When set, missing and non-finite inputs render as this string instead
        of raising :class:`InvalidInputError`.
    big_mark:
        Thousands separator for the integer part; empty for none.
    """

    rules: Tuple[RoundingRule, ...]
    tie_break: TieBreak = TieBreak(DEFAULT_TIE_BREAK)
    method: RoundingMethod = RoundingMethod.DECIMAL
    missing_marker: Optional[str] = None
    big_mark: str = DEFAULT_BIG_MARK

    def __post_init__(self) -> None:
        rules = tuple(self.rules)
        if not rules:
            raise ConfigError("A rounding spec needs at least one rule")
        for rule in rules:
            if not isinstance(rule, RoundingRule):
                raise ConfigError(f"Expected RoundingRule, got {rule!r}")
        if rules[0].lower_bound not in (0.0, -INFINITY):
            raise ConfigError(
                f"First rule must start at 0 or -inf, not {rules[0].lower_bound}"
            )
        for previous, current in zip(rules, rules[1:]):
            if previous.upper_bound != current.lower_bound:
                raise ConfigError(
                    "Rules must be contiguous: rule ending at "
                    f"{previous.upper_bound} is followed by one starting at "
                    f"{current.lower_bound}"
                )
        if rules[-1].upper_bound != INFINITY:
            raise ConfigError(
                f"Last rule must end at +inf, not {rules[-1].upper_bound}"
            )
        object.__setattr__(self, "rules", rules)
        object.__setattr__(self, "tie_break", coerce_tie_break(self.tie_break))
        object.__setattr__(self, "method", coerce_method(self.method))
        if self.method is RoundingMethod.SIGNIF:
            for rule in rules:
                _check_digits(rule.digits, minimum=1)
        if self.missing_marker is not None and not isinstance(
            self.missing_marker, str
        ):
            raise ConfigError(
                f"missing_marker must be a string or None, got {self.missing_marker!r}"
            )
        if not isinstance(self.big_mark, str):
            raise ConfigError(f"big_mark must be a string, got {self.big_mark!r}")

    def rule_for(self, magnitude: Number) -> RoundingRule:
        """Return the single rule whose interval contains ``magnitude``."""
        for rule in self.rules:
            if rule.contains(magnitude):
                return rule
        raise InvalidInputError(f"No rounding rule covers magnitude {magnitude!r}")

    def tie_break_for(self, rule: RoundingRule) -> TieBreak:
        """Return the tie-break that applies to ``rule`` under this spec."""
        return rule.tie_break if rule.tie_break is not None else self.tie_break


def create_default_spec() -> RoundingSpec:
    """Return a spec rounding every value to two significant digits, ties up."""

    return RoundingSpec(
        rules=(RoundingRule(0.0, INFINITY, DEFAULT_DIGITS),),
        tie_break=coerce_tie_break(DEFAULT_TIE_BREAK),
        method=coerce_method(DEFAULT_METHOD),
    )


def with_tie_break(spec: RoundingSpec, mode: Union[TieBreak, str]) -> RoundingSpec:
    """Return a copy of ``spec`` whose default tie-break is ``mode``.

    Rules with an explicit override keep it.
    """

    return dataclasses.replace(spec, tie_break=coerce_tie_break(mode))


def with_magnitude_rule(
    spec: RoundingSpec,
    digits: Sequence[int],
    breaks: Sequence[float],
    tie_breaks: Optional[Sequence[Optional[Union[TieBreak, str]]]] = None,
) -> RoundingSpec:
    """Return a copy of ``spec`` with rules rebuilt from magnitude breakpoints.

    ``breaks[i]`` is the exclusive upper bound of the interval rounded to
    ``digits[i]`` decimal places; the first interval starts at zero.

    Parameters
    ----------
    spec:
        Spec whose tie-break, missing marker and thousands separator are kept.
    digits:
        Decimal places per interval.
    breaks:
        Strictly increasing upper bounds ending with ``math.inf``.
    tie_breaks:
        Optional per-interval tie-break overrides (``None`` entries inherit).

    Raises
    ------
    ConfigError
        If the sequences differ in length, are empty, ``breaks`` is not
        strictly increasing, or the last break is not ``+inf``.
    """

    digits_list = list(digits)
    breaks_list = list(breaks)
    if len(digits_list) != len(breaks_list):
        raise ConfigError(
            f"digits and breaks must have equal length "
            f"({len(digits_list)} != {len(breaks_list)})"
        )
    if not breaks_list:
        raise ConfigError("At least one digit/break pair is required")
    if tie_breaks is None:
        overrides: list = [None] * len(digits_list)
    else:
        overrides = list(tie_breaks)
        if len(overrides) != len(digits_list):
            raise ConfigError(
                f"tie_breaks must match digits in length "
                f"({len(overrides)} != {len(digits_list)})"
            )

    bounds = []
    for value in breaks_list:
        try:
            bounds.append(float(value))
        except (TypeError, ValueError) as err:
            raise ConfigError(f"Break {value!r} is not a number") from err
    if bounds[0] <= 0:
        raise ConfigError(f"First break must be positive, got {bounds[0]}")
    for previous, current in zip(bounds, bounds[1:]):
        if not current > previous:
            raise ConfigError(
                f"breaks must be strictly increasing; {current} follows {previous}"
            )
    if bounds[-1] != INFINITY:
        raise ConfigError(f"Last break must be +inf, got {bounds[-1]}")

    rules = []
    lower = 0.0
    for digit_count, upper, override in zip(digits_list, bounds, overrides):
        rules.append(
            RoundingRule(
                lower,
                upper,
                digit_count,
                coerce_tie_break(override) if override is not None else None,
            )
        )
        lower = upper
    return dataclasses.replace(
        spec, rules=tuple(rules), method=RoundingMethod.DECIMAL
    )


def with_decimal_rule(spec: RoundingSpec, digits: int) -> RoundingSpec:
    """Return a copy of ``spec`` rounding every value to ``digits`` places."""

    return dataclasses.replace(
        spec,
        rules=(RoundingRule(0.0, INFINITY, _check_digits(digits)),),
        method=RoundingMethod.DECIMAL,
    )


def with_signif_rule(spec: RoundingSpec, digits: int) -> RoundingSpec:
    """Return a copy of ``spec`` keeping ``digits`` significant digits."""

    return dataclasses.replace(
        spec,
        rules=(RoundingRule(0.0, INFINITY, _check_digits(digits, minimum=1)),),
        method=RoundingMethod.SIGNIF,
    )


def with_missing_marker(spec: RoundingSpec, marker: Optional[str] = "NA") -> RoundingSpec:
    """Return a copy of ``spec`` that renders missing values as ``marker``.

    Passing ``None`` restores the default of raising on missing input.
    """

    return dataclasses.replace(spec, missing_marker=marker)


def with_big_mark(spec: RoundingSpec, mark: str) -> RoundingSpec:
    """Return a copy of ``spec`` using ``mark`` as the thousands separator."""

    return dataclasses.replace(spec, big_mark=mark)


def to_decimal(value: Number) -> Decimal:
    """Return ``value`` as a :class:`Decimal` using its shortest text form.

    Raises
    ------
    InvalidInputError
        If ``value`` is not an int, float, Decimal or numpy number.
    """

    if isinstance(value, (bool, np.bool_)):
        raise InvalidInputError(f"Expected a number, got boolean {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, np.integer)):
        return Decimal(int(value))
    if isinstance(value, (float, np.floating)):
        return Decimal(repr(float(value)))
    raise InvalidInputError(
        f"Expected a number, got {type(value).__name__} {value!r}"
    )


def round_decimal(value: Decimal, places: int, tie_break: TieBreak) -> Decimal:
    """Round ``value`` to ``places`` decimal places under ``tie_break``."""

    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Quantize fails when the result needs more digits than the context.
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(quantum, rounding=tie_break.decimal_rounding)


def round_with_spec(spec: RoundingSpec, value: Number) -> Tuple[Decimal, int]:
    """Round a finite ``value`` under ``spec``.

    Returns
    -------
    tuple[Decimal, int]
        The rounded value and the number of decimal places it should be
        displayed with.
    """

    decimal_value = to_decimal(value)
    if not decimal_value.is_finite():
        raise InvalidInputError(f"Cannot round non-finite value {value!r}")
    rule = spec.rule_for(abs(decimal_value))
    tie_break = spec.tie_break_for(rule)

    if spec.method is RoundingMethod.DECIMAL:
        places = rule.digits
        return round_decimal(decimal_value, places, tie_break), places

    if decimal_value.is_zero():
        places = rule.digits - 1
        return round_decimal(decimal_value, places, tie_break), places
    places = max(0, rule.digits - 1 - decimal_value.adjusted())
    rounded = round_decimal(decimal_value, places, tie_break)
    if (
        places > 0
        and not rounded.is_zero()
        and rounded.adjusted() > decimal_value.adjusted()
    ):
        # Rounded up into the next power of ten; drop the extra trailing zero.
        places -= 1
        rounded = round_decimal(rounded, places, tie_break)
    return rounded, places


__all__ = [
    "INFINITY",
    "RoundingMethod",
    "RoundingRule",
    "RoundingSpec",
    "TieBreak",
    "coerce_method",
    "coerce_tie_break",
    "create_default_spec",
    "round_decimal",
    "round_with_spec",
    "to_decimal",
    "with_big_mark",
    "with_decimal_rule",
    "with_magnitude_rule",
    "with_missing_marker",
    "with_signif_rule",
    "with_tie_break",
]
