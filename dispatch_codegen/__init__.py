"""Dispatch code generator

Generates a Rust trait from a method signature and implements it for an
enum by dispatching every variant to the same method on its payload.
Removes the match boilerplate of CLIs whose subcommands are variants of
one action.
"""

__version__ = "0.1.0"

from .pipeline import (
    AtomicWriter,
    AttributeExpander,
    DispatchConfig,
    DispatchError,
    DispatchGenerator,
    ErrorMode,
    FormatterConfig,
    OutputConfig,
    OutputMode,
    expand,
)
from .utils import to_pascal_case

__all__ = [
    "DispatchGenerator",
    "AttributeExpander",
    "expand",
    "to_pascal_case",
    "DispatchConfig",
    "DispatchError",
    "ErrorMode",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
]
