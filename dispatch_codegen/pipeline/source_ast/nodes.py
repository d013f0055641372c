"""
Source AST node definitions.

These nodes are the structured form of the two inputs of a dispatch
generation: the Rust enum being extended and the method signature template.
They are built once by the parser and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


@dataclass(frozen=True)
class Span:
    """Location of a node inside the text it was parsed from.

    Lines and columns are zero-based and columns are counted in bytes,
    as reported by tree-sitter.
    """

    source: str = ""
    start_byte: int = 0
    end_byte: int = 0
    start_line: int = 0
    start_column: int = 0
    end_line: int = 0
    end_column: int = 0

    def relocate(self, source: str, start_byte: int, start_line: int, start_column: int) -> Span:
        """Shift the span into an enclosing text that starts at the given position.

        Args:
            source: Label of the enclosing text (usually a file path)
            start_byte: Byte offset of the snippet inside the enclosing text
            start_line: Line of the snippet start inside the enclosing text
            start_column: Column of the snippet start inside the enclosing text

        Returns:
            A new span expressed in enclosing-text coordinates
        """
        # Columns only shift on the snippet's first line
        start_col = self.start_column + start_column if self.start_line == 0 else self.start_column
        end_col = self.end_column + start_column if self.end_line == 0 else self.end_column
        return replace(
            self,
            source=source,
            start_byte=self.start_byte + start_byte,
            end_byte=self.end_byte + start_byte,
            start_line=self.start_line + start_line,
            start_column=start_col,
            end_line=self.end_line + start_line,
            end_column=end_col,
        )

    def __str__(self) -> str:
        return f"{self.source}:{self.start_line + 1}:{self.start_column + 1}"


class PayloadKind(str, Enum):
    """Shape of the fields carried by an enum variant."""

    NAMED = "named"  # Variant { a: A, b: B }
    UNNAMED = "unnamed"  # Variant(A, B)
    UNIT = "unit"  # Variant


@dataclass(frozen=True)
class PayloadShape:
    """The payload of a variant."""

    kind: PayloadKind = PayloadKind.UNIT
    types: tuple[str, ...] = ()
    field_names: tuple[str, ...] = ()
    span: Span | None = None

    @property
    def is_single_unnamed(self) -> bool:
        return self.kind == PayloadKind.UNNAMED and len(self.types) == 1

    @property
    def arity(self) -> int:
        return len(self.types)


@dataclass(frozen=True)
class VariantNode:
    """One named alternative of the enum."""

    name: str = ""
    payload: PayloadShape = field(default_factory=PayloadShape)
    span: Span | None = None


@dataclass(frozen=True)
class SumTypeNode:
    """The enum declaration the generated trait is implemented for."""

    name: str = ""
    # Text of each declared generic parameter, in order
    generic_parameters: tuple[str, ...] = ()
    # Span of the `<...>` list; set whenever the list is written, even if empty
    generics_span: Span | None = None
    variants: tuple[VariantNode, ...] = ()
    span: Span | None = None
    text: str = ""

    @property
    def has_generics(self) -> bool:
        return self.generics_span is not None


class ReceiverKind(str, Enum):
    """How a method receives its instance."""

    BY_VALUE = "self"
    BY_REFERENCE = "&self"
    BY_MUTABLE_REFERENCE = "&mut self"


class InputKind(str, Enum):
    """Kind of one slot in a parameter list."""

    RECEIVER = "receiver"
    TYPED = "typed"  # pattern: Type
    VARIADIC = "variadic"  # ... or name: ...
    ANONYMOUS = "anonymous"  # bare type or `_`


@dataclass(frozen=True)
class InputNode:
    """One slot of a signature's parameter list, receiver included."""

    kind: InputKind = InputKind.TYPED
    text: str = ""
    span: Span | None = None
    # Pattern text and tree-sitter node type for TYPED slots
    pattern: str = ""
    pattern_kind: str = ""
    type_ref: str = ""
    receiver_kind: ReceiverKind | None = None

    @property
    def is_receiver(self) -> bool:
        return self.kind == InputKind.RECEIVER

    @property
    def is_forwardable(self) -> bool:
        """Whether the slot can be passed on by name as a call argument."""
        return self.kind == InputKind.TYPED and self.pattern_kind == "identifier"


@dataclass(frozen=True)
class SignatureNode:
    """The method template the trait is generated from."""

    method_name: str = ""
    generic_parameters: tuple[str, ...] = ()
    generics_span: Span | None = None
    inputs: tuple[InputNode, ...] = ()
    # Span of the parenthesised parameter list
    inputs_span: Span | None = None
    return_type: str | None = None
    # Verbatim signature, folded onto a single line
    text: str = ""
    span: Span | None = None

    @property
    def has_generics(self) -> bool:
        return self.generics_span is not None

    @property
    def receiver(self) -> InputNode | None:
        if self.inputs and self.inputs[0].is_receiver:
            return self.inputs[0]
        return None

    @property
    def parameters(self) -> tuple[InputNode, ...]:
        """Typed slots after the receiver, in declaration order."""
        return tuple(i for i in self.inputs[1:] if i.kind == InputKind.TYPED)

    @property
    def variadic(self) -> InputNode | None:
        return next((i for i in self.inputs if i.kind == InputKind.VARIADIC), None)
