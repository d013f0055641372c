"""
Name resolver for the generated trait.

The trait is named after the method it contains, converted to PascalCase.
Callers that implement the trait for their payload types rely on this exact
transform, so it lives in one place.
"""

from __future__ import annotations

from ...utils import to_pascal_case
from ..source_ast.nodes import SignatureNode


class NameResolver:
    """Derives identifiers for generated items."""

    def interface_name(self, signature: SignatureNode) -> str:
        """
        Name of the trait generated for a signature.

        Depends on the method name only. Collisions with other items in the
        caller's scope are left to the Rust compiler to report.

        Args:
            signature: The parsed method signature

        Returns:
            PascalCase trait name
        """
        return to_pascal_case(signature.method_name)
