"""
Rust AST node definitions.

These nodes represent the items appended after the enum: the trait holding
the method template and the impl that dispatches it over the variants.
They are built by the AST backend and then serialized to source code.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RustNode:
    """Base class for all Rust AST nodes."""

    pass


@dataclass(frozen=True)
class RustTrait(RustNode):
    """A trait declaring a single method."""

    name: str = ""
    # Method signature without body or `;`
    signature: str = ""
    visibility: str = ""


@dataclass(frozen=True)
class RustMatchArm(RustNode):
    """One `Self::Variant(binding) => Trait::method(binding, args...)` arm."""

    variant_name: str = ""
    binding: str = ""
    interface_name: str = ""
    method_name: str = ""
    # Forwarded argument names, receiver excluded
    arguments: tuple[str, ...] = ()

    @property
    def call_arguments(self) -> tuple[str, ...]:
        return (self.binding, *self.arguments)


@dataclass(frozen=True)
class RustDispatchImpl(RustNode):
    """`impl Trait for Enum` whose method matches on `self`."""

    interface_name: str = ""
    type_name: str = ""
    signature: str = ""
    arms: tuple[RustMatchArm, ...] = ()


@dataclass(frozen=True)
class GeneratedArtifact(RustNode):
    """Everything generated for one enum."""

    interface_name: str = ""
    interface_declaration: RustTrait = field(default_factory=RustTrait)
    dispatch_implementation: RustDispatchImpl = field(default_factory=RustDispatchImpl)
