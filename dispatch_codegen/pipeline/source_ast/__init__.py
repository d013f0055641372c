"""
Source AST module.

Contains the node definitions and the tree-sitter based parser for the
enum declaration and the method signature template.
"""

from __future__ import annotations

from .nodes import (
    InputKind,
    InputNode,
    PayloadKind,
    PayloadShape,
    ReceiverKind,
    SignatureNode,
    Span,
    SumTypeNode,
    VariantNode,
)
from .parser import RUST_LANGUAGE, RustSourceParser

__all__ = [
    "Span",
    "PayloadKind",
    "PayloadShape",
    "VariantNode",
    "SumTypeNode",
    "ReceiverKind",
    "InputKind",
    "InputNode",
    "SignatureNode",
    "RustSourceParser",
    "RUST_LANGUAGE",
]
