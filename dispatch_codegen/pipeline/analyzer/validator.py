"""
Structural validation of the parsed enum and signature.

Phase 2 of the pipeline. Checks run in a fixed order and the first violation
is raised, so the same input always produces the same diagnostic.
"""

from __future__ import annotations

from ..errors import (
    GenericsUnsupportedError,
    InvalidPayloadShapeError,
    MissingReceiverError,
    PayloadShapeError,
    UnforwardableParameterError,
    VariadicUnsupportedError,
)
from ..source_ast.nodes import InputKind, PayloadKind, SignatureNode, SumTypeNode, VariantNode

TOOL_NAME = "dispatch_codegen"


class DispatchValidator:
    """Checks that an enum and a signature can be turned into a dispatch impl."""

    def validate(self, sum_type: SumTypeNode, signature: SignatureNode) -> None:
        """
        Validate both nodes.

        Args:
            sum_type: The parsed enum
            signature: The parsed method signature

        Raises:
            DispatchError: The first violation, in this order: enum generics,
                signature generics, variadic parameter, missing receiver,
                variant payload shape, unforwardable parameter
        """
        if sum_type.has_generics:
            raise GenericsUnsupportedError(f"generics are not yet supported by {TOOL_NAME}", sum_type.generics_span)

        if signature.has_generics:
            raise GenericsUnsupportedError(f"generics are not yet supported by {TOOL_NAME}", signature.generics_span)

        if signature.variadic is not None:
            raise VariadicUnsupportedError(f"variadics are not yet supported by {TOOL_NAME}", signature.variadic.span)

        self._check_receiver(signature)

        for variant in sum_type.variants:
            self._check_payload(variant)

        self._check_forwarding(signature)

    def _check_receiver(self, signature: SignatureNode) -> None:
        if not signature.inputs:
            raise MissingReceiverError(
                "function needs at least a `self` argument (or `&self` or `&mut self`)",
                signature.inputs_span,
            )
        first = signature.inputs[0]
        if not first.is_receiver:
            raise MissingReceiverError("first argument of function must be `self` or `&self` or `&mut self`", first.span)

    def _check_payload(self, variant: VariantNode) -> None:
        payload = variant.payload
        if payload.is_single_unnamed:
            return

        if payload.kind == PayloadKind.NAMED:
            raise InvalidPayloadShapeError(
                f"variant `{variant.name}` must have unnamed field, not named",
                payload.span,
                PayloadShapeError.NAMED_FIELDS,
                variant.name,
            )
        if payload.kind == PayloadKind.UNNAMED:
            raise InvalidPayloadShapeError(
                f"variant `{variant.name}`: number of unnamed fields must be exactly one, found {payload.arity}",
                payload.span,
                PayloadShapeError.WRONG_ARITY,
                variant.name,
            )
        raise InvalidPayloadShapeError(
            f"variant `{variant.name}` must have an unnamed field",
            variant.span,
            PayloadShapeError.WRONG_ARITY,
            variant.name,
        )

    def _check_forwarding(self, signature: SignatureNode) -> None:
        """Every slot after the receiver must be a plain `name: Type` parameter."""
        for slot in signature.inputs[1:]:
            if slot.kind == InputKind.RECEIVER:
                raise UnforwardableParameterError("`self` is only allowed as the first argument", slot.span)
            if slot.kind == InputKind.ANONYMOUS:
                raise UnforwardableParameterError(
                    f"argument `{slot.text}` has no name and cannot be forwarded to the variants",
                    slot.span,
                )
            if not slot.is_forwardable:
                raise UnforwardableParameterError(
                    f"argument `{slot.text}` must bind a plain identifier to be forwarded to the variants",
                    slot.span,
                )
