"""
AST backends module.

Builds the Rust AST of the generated trait and dispatch impl and
serializes it to source code.
"""

from __future__ import annotations

from .rust_ast_backend import RustAstBackend
from .rust_ast_nodes import GeneratedArtifact, RustDispatchImpl, RustMatchArm, RustTrait
from .rust_serializer import RustSerializer

__all__ = [
    "RustAstBackend",
    "RustSerializer",
    "GeneratedArtifact",
    "RustTrait",
    "RustDispatchImpl",
    "RustMatchArm",
]
