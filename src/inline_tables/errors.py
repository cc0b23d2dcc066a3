"""Exception types raised by the inline table helpers.

Each error also derives from the closest builtin exception so callers that
already catch ``ValueError`` or ``LookupError`` keep working.
"""

from __future__ import annotations


class InlineTablesError(Exception):
    """Base class for all errors raised by :mod:`inline_tables`."""


class ConfigError(InlineTablesError, ValueError):
    """Raised when a rounding specification is built from malformed arguments."""


class InvalidInputError(InlineTablesError, ValueError):
    """Raised when a value cannot be formatted (non-finite or non-numeric)."""


class UnboundNameError(InlineTablesError, LookupError):
    """Raised when a template references a name with no binding."""


class MissingColumnError(InlineTablesError, LookupError):
    """Raised when an index is built on a column the table does not have."""


class PathNotFoundError(InlineTablesError, LookupError):
    """Raised when a nested index lookup does not match a stored path."""


class FormatError(InlineTablesError, ValueError):
    """Raised when a string does not have the expected bracket or field layout."""


__all__ = [
    "ConfigError",
    "FormatError",
    "InlineTablesError",
    "InvalidInputError",
    "MissingColumnError",
    "PathNotFoundError",
    "UnboundNameError",
]
