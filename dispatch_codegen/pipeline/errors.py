"""
Errors raised by the dispatch generation pipeline.

Every error is terminal for one invocation: the pipeline stops at the first
problem it finds and never returns partial output. Each error is anchored to
the span of the offending declaration so the caller can point at it.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .source_ast.nodes import Span


class ErrorKind(str, Enum):
    """Categories of rejected input."""

    SYNTAX = "syntax"
    GENERICS_UNSUPPORTED = "generics_unsupported"
    VARIADIC_UNSUPPORTED = "variadic_unsupported"
    MISSING_RECEIVER = "missing_receiver"
    INVALID_PAYLOAD_SHAPE = "invalid_payload_shape"
    UNFORWARDABLE_PARAMETER = "unforwardable_parameter"


class PayloadShapeError(str, Enum):
    """Why a variant payload was rejected."""

    NAMED_FIELDS = "named_fields"
    WRONG_ARITY = "wrong_arity"


class DispatchError(Exception):
    """Base class for all rejected inputs."""

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(self, message: str, span: Span | None = None):
        super().__init__(message)
        self.message = message
        self.span = span

    def relocate(self, source: str, start_byte: int, start_line: int, start_column: int) -> DispatchError:
        """Re-anchor the error inside an enclosing file. Returns self."""
        if self.span is not None:
            self.span = self.span.relocate(source, start_byte, start_line, start_column)
        return self

    def to_compile_error(self) -> str:
        """Render the error as a Rust `compile_error!` invocation."""
        escaped = self.message.replace("\\", "\\\\").replace('"', '\\"')
        return f'compile_error!("{escaped}");'

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.span}: error: {self.message}"


class DispatchSyntaxError(DispatchError):
    """The input text does not parse as an enum or as a function signature."""

    kind = ErrorKind.SYNTAX


class GenericsUnsupportedError(DispatchError):
    """The enum or the signature declares type parameters."""

    kind = ErrorKind.GENERICS_UNSUPPORTED


class VariadicUnsupportedError(DispatchError):
    """The signature has a variadic parameter."""

    kind = ErrorKind.VARIADIC_UNSUPPORTED


class MissingReceiverError(DispatchError):
    """The signature's first parameter is absent or is not a form of `self`."""

    kind = ErrorKind.MISSING_RECEIVER


class InvalidPayloadShapeError(DispatchError):
    """A variant does not carry exactly one unnamed field."""

    kind = ErrorKind.INVALID_PAYLOAD_SHAPE

    def __init__(self, message: str, span: Span | None, shape_error: PayloadShapeError, variant_name: str):
        super().__init__(message, span)
        self.shape_error = shape_error
        self.variant_name = variant_name


class UnforwardableParameterError(DispatchError):
    """A non-receiver parameter cannot be forwarded to the payload by name."""

    kind = ErrorKind.UNFORWARDABLE_PARAMETER


class OutputValidationError(Exception):
    """Raised when content about to be written is not valid Rust."""

    pass
