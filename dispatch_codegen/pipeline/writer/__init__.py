"""
Writer module.

Provides validated, atomic writes of generated code.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter

__all__ = [
    "AtomicWriter",
]
