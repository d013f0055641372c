"""
Pipeline - AST-based trait dispatch generator for Rust enums.

This module provides a multi-phase architecture for generating a trait and
its dispatch implementation from an enum declaration and a method signature:

1. Phase 1 (Parser): Parse the enum and signature into the source AST
2. Phase 2 (Validator): Check generics, variadics, receiver and variant shapes
3. Phase 3 (AST Backend): Build the trait and dispatch impl nodes
4. Phase 4 (Serializer): Convert the nodes to Rust source
5. Phase 5 (Formatter): Optional post-processing with rustfmt
6. Phase 6 (Writer): Optional validated, atomic write to disk
"""

from __future__ import annotations

from .config import DispatchConfig, ErrorMode, FormatterConfig, OutputConfig, OutputMode
from .errors import (
    DispatchError,
    DispatchSyntaxError,
    ErrorKind,
    GenericsUnsupportedError,
    InvalidPayloadShapeError,
    MissingReceiverError,
    OutputValidationError,
    PayloadShapeError,
    UnforwardableParameterError,
    VariadicUnsupportedError,
)
from .expander import AttributeExpander
from .generator import DispatchGenerator, expand
from .writer import AtomicWriter

__all__ = [
    "DispatchGenerator",
    "AttributeExpander",
    "expand",
    "DispatchConfig",
    "ErrorMode",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "DispatchError",
    "DispatchSyntaxError",
    "ErrorKind",
    "GenericsUnsupportedError",
    "InvalidPayloadShapeError",
    "MissingReceiverError",
    "OutputValidationError",
    "PayloadShapeError",
    "UnforwardableParameterError",
    "VariadicUnsupportedError",
]
