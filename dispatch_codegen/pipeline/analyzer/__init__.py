"""
Analyzer module.

Contains structural validation and name derivation.
"""

from __future__ import annotations

from .name_resolver import NameResolver
from .validator import DispatchValidator

__all__ = [
    "DispatchValidator",
    "NameResolver",
]
