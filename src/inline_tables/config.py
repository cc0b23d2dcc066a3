"""Default policy constants for rounding and inline lookups.

Import these constants instead of repeating literals so that scripts,
configuration files and library defaults agree.
"""

from __future__ import annotations

# Rounding defaults ---------------------------------------------------------

DEFAULT_DIGITS = 2
DEFAULT_METHOD = "signif"
DEFAULT_TIE_BREAK = "half_up"
DEFAULT_BIG_MARK = ""

# Missing values ------------------------------------------------------------

DEFAULT_MISSING_MARKER = "NA"
MISSING_GROUP_KEY = "NA"

# Spec configuration mappings (JSON files and ``spec_from_mapping``) --------

SPEC_KEY_METHOD = "method"
SPEC_KEY_DIGITS = "digits"
SPEC_KEY_BREAKS = "breaks"
SPEC_KEY_TIE_BREAK = "tie_break"
SPEC_KEY_MISSING_MARKER = "missing_marker"
SPEC_KEY_BIG_MARK = "big_mark"

SPEC_KEYS = frozenset(
    {
        SPEC_KEY_METHOD,
        SPEC_KEY_DIGITS,
        SPEC_KEY_BREAKS,
        SPEC_KEY_TIE_BREAK,
        SPEC_KEY_MISSING_MARKER,
        SPEC_KEY_BIG_MARK,
    }
)

METHOD_SIGNIF = "signif"
METHOD_DECIMAL = "decimal"
METHOD_MAGNITUDE = "magnitude"

INFINITY_TOKENS = frozenset({"inf", "+inf", "infinity", "+infinity"})

# Bracket helpers -----------------------------------------------------------

DEFAULT_BRACKET_LEFT = "("
DEFAULT_BRACKET_RIGHT = ")"
DEFAULT_INTERVAL_SEPARATOR = ", "
