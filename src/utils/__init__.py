"""Utility helper package for shared script helpers.

Submodules
----------
cli
    Shared argparse configuration helpers for reporting scripts.
"""

from __future__ import annotations

__all__ = [
    "cli",
]
