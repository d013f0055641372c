"""
Expander module.

Expands dispatch attributes written on enums in Rust source files.
"""

from __future__ import annotations

from .file_expander import AttributeExpander

__all__ = [
    "AttributeExpander",
]
