"""
Rust AST backend.

Phase 3 of the pipeline: build the trait and dispatch impl nodes from a
validated enum and signature.
"""

from __future__ import annotations

from ..analyzer.name_resolver import NameResolver
from ..config import DispatchConfig
from ..source_ast.nodes import SignatureNode, SumTypeNode
from .rust_ast_nodes import GeneratedArtifact, RustDispatchImpl, RustMatchArm, RustTrait


class RustAstBackend:
    """Builds the Rust AST of the generated trait and impl."""

    def __init__(self, config: DispatchConfig, name_resolver: NameResolver | None = None):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
            name_resolver: Resolver for generated identifiers
        """
        self.config = config
        self.name_resolver = name_resolver or NameResolver()

    def build(self, sum_type: SumTypeNode, signature: SignatureNode) -> GeneratedArtifact:
        """
        Build the artifact for a validated enum and signature.

        The inputs must have passed DispatchValidator; this method does not
        report errors of its own.

        Args:
            sum_type: The parsed enum
            signature: The parsed method signature

        Returns:
            The generated trait and dispatch impl
        """
        assert signature.receiver is not None, "signature was not validated"

        interface_name = self.name_resolver.interface_name(signature)
        arguments = tuple(param.pattern for param in signature.parameters)
        binding = self._binding_name(arguments)

        arms = []
        for variant in sum_type.variants:
            assert variant.payload.is_single_unnamed, f"variant {variant.name} was not validated"
            arms.append(
                RustMatchArm(
                    variant_name=variant.name,
                    binding=binding,
                    interface_name=interface_name,
                    method_name=signature.method_name,
                    arguments=arguments,
                )
            )

        return GeneratedArtifact(
            interface_name=interface_name,
            interface_declaration=RustTrait(
                name=interface_name,
                signature=signature.text,
                visibility=self.config.trait_visibility,
            ),
            dispatch_implementation=RustDispatchImpl(
                interface_name=interface_name,
                type_name=sum_type.name,
                signature=signature.text,
                arms=tuple(arms),
            ),
        )

    def _binding_name(self, arguments: tuple[str, ...]) -> str:
        """Payload binding that does not shadow a forwarded argument."""
        binding = self.config.payload_binding
        while binding in arguments:
            binding += "_"
        return binding
