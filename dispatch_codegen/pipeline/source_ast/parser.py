"""
Rust source parser that builds the source AST.

Phase 1 of the pipeline: parse the enum declaration and the method signature
with tree-sitter-rust and convert the concrete syntax trees into source AST
nodes. No semantic checks happen here; a signature without a receiver or an
enum with generics parses fine and is rejected later by the validator.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

import tree_sitter_rust as ts_rust
from tree_sitter import Language, Node, Parser

from ..errors import DispatchSyntaxError
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

RUST_LANGUAGE = Language(ts_rust.language())

# Matches a signature that already spells out `fn`, possibly after comments and modifiers
_FN_KEYWORD = re.compile(
    r'^(?:\s|//[^\n]*|/\*.*?\*/)*(?:(?:pub(?:\s*\([^)]*\))?|const|async|unsafe|default|extern(?:\s+"[^"]*")?)\s+)*fn\b',
    re.DOTALL,
)

# `&mut Self`, `&'a mut Self`
_MUT_REFERENCE = re.compile(r"^&\s*(?:'\w+\s+)?mut\b")


class _SourceText:
    """Source bytes plus the bookkeeping needed to report spans."""

    def __init__(self, source: str, data: bytes, shift: int = 0):
        self.source = source
        self.data = data
        # Bytes added in front of the user's text before parsing
        self.shift = shift

    def text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def span(self, node: Node) -> Span:
        start_line, start_column = node.start_point[0], node.start_point[1]
        end_line, end_column = node.end_point[0], node.end_point[1]
        if start_line == 0:
            start_column = max(start_column - self.shift, 0)
        if end_line == 0:
            end_column = max(end_column - self.shift, 0)
        return Span(
            source=self.source,
            start_byte=max(node.start_byte - self.shift, 0),
            end_byte=max(node.end_byte - self.shift, 0),
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
        )


class RustSourceParser:
    """Parses enum declarations and method signatures into the source AST."""

    # Nodes that may surround the single item of an input
    TRIVIA_NODES = {"line_comment", "block_comment", "attribute_item", "inner_attribute_item"}

    # Punctuation inside a parameter list
    PARAMETER_PUNCTUATION = {"(", ")", ","}

    # Left out of the emitted signature text
    COMMENT_NODES = {"line_comment", "block_comment"}

    def __init__(self):
        self._parser = Parser(RUST_LANGUAGE)

    def parse(self, item_text: str, signature_text: str) -> tuple[SumTypeNode, SignatureNode]:
        """
        Parse both inputs of one invocation.

        Args:
            item_text: Source text of the enum declaration
            signature_text: Source text of the method signature template

        Returns:
            The parsed enum and signature

        Raises:
            DispatchSyntaxError: If either input does not parse
        """
        return self.parse_sum_type(item_text), self.parse_signature(signature_text)

    def parse_sum_type(self, text: str, source: str = "item") -> SumTypeNode:
        """
        Parse the source text of an enum declaration.

        The text may carry outer attributes and comments around the enum,
        but must contain exactly one item and that item must be an enum.
        """
        src = _SourceText(source, text.encode("utf-8"))
        root = self._parse_tree(src, "enum")
        enum_node = self._single_item(root, "enum_item", "expected `enum`", src)

        name_node = enum_node.child_by_field_name("name")
        generics_node = self._first_child_of_type(enum_node, "type_parameters")
        body = self._first_child_of_type(enum_node, "enum_variant_list")

        variants: list[VariantNode] = []
        if body is not None:
            for child in body.named_children:
                if child.type == "enum_variant":
                    variants.append(self._parse_variant(child, src))

        return SumTypeNode(
            name=src.text(name_node) if name_node is not None else "",
            generic_parameters=self._generic_parameters(generics_node, src),
            generics_span=src.span(generics_node) if generics_node is not None else None,
            variants=tuple(variants),
            span=src.span(enum_node),
            text=text,
        )

    def parse_signature(self, text: str, source: str = "signature") -> SignatureNode:
        """
        Parse the source text of a method signature template.

        Accepts `fn name(...) -> T` with or without a trailing `;`. The `fn`
        keyword itself may be left out, in which case it is supplied.
        """
        prefix = "" if _FN_KEYWORD.match(text) else "fn "
        data = (prefix + text + "\n").encode("utf-8")
        # `;` goes on a line of its own so a trailing `// comment` cannot swallow it
        if self._parser.parse(data).root_node.has_error:
            data += b";"
        src = _SourceText(source, data, shift=len(prefix))
        root = self._parse_tree(src, "function signature")
        fn_node = self._single_item(root, "function_signature_item", "expected a function signature", src)

        name_node = fn_node.child_by_field_name("name")
        generics_node = self._first_child_of_type(fn_node, "type_parameters")
        params_node = self._first_child_of_type(fn_node, "parameters")
        return_node = fn_node.child_by_field_name("return_type")

        inputs: list[InputNode] = []
        if params_node is not None:
            for child in params_node.children:
                if child.type in self.PARAMETER_PUNCTUATION or child.type in self.TRIVIA_NODES:
                    continue
                inputs.append(self._parse_input(child, src))

        return SignatureNode(
            method_name=src.text(name_node) if name_node is not None else "",
            generic_parameters=self._generic_parameters(generics_node, src),
            generics_span=src.span(generics_node) if generics_node is not None else None,
            inputs=tuple(inputs),
            inputs_span=src.span(params_node) if params_node is not None else None,
            return_type=src.text(return_node) if return_node is not None else None,
            text=self._signature_text(fn_node, src),
            span=src.span(fn_node),
        )

    def _parse_tree(self, src: _SourceText, what: str) -> Node:
        """Parse source bytes and fail on the first syntax error."""
        tree = self._parser.parse(src.data)
        root = tree.root_node
        if root.has_error:
            error_node = first_error_node(root) or root
            if error_node.is_missing:
                detail = f"expected `{error_node.type}`"
            else:
                snippet = src.text(error_node).strip()
                if len(snippet) > 40:
                    snippet = snippet[:40] + "..."
                detail = f"unexpected `{snippet}`" if snippet else "unexpected end of input"
            raise DispatchSyntaxError(f"failed to parse {what}: {detail}", src.span(error_node))
        return root

    def _single_item(self, root: Node, expected_type: str, message: str, src: _SourceText) -> Node:
        """Return the only non-trivia top-level node, which must be of the expected type."""
        items = [child for child in root.named_children if child.type not in self.TRIVIA_NODES]
        if not items:
            raise DispatchSyntaxError(f"{message}, found nothing", src.span(root))
        if items[0].type != expected_type:
            raise DispatchSyntaxError(message, src.span(items[0]))
        if len(items) > 1:
            raise DispatchSyntaxError(f"unexpected item after {message.removeprefix('expected ')}", src.span(items[1]))
        return items[0]

    def _first_child_of_type(self, node: Node, node_type: str) -> Node | None:
        return next((child for child in node.children if child.type == node_type), None)

    def _generic_parameters(self, generics_node: Node | None, src: _SourceText) -> tuple[str, ...]:
        if generics_node is None:
            return ()
        return tuple(src.text(child) for child in generics_node.named_children if child.type not in self.TRIVIA_NODES)

    def _parse_variant(self, node: Node, src: _SourceText) -> VariantNode:
        """Parse one enum variant and classify its payload."""
        name_node = node.child_by_field_name("name")
        name = src.text(name_node) if name_node is not None else ""

        payload_node = next(
            (c for c in node.children if c.type in ("field_declaration_list", "ordered_field_declaration_list")),
            None,
        )

        if payload_node is None:
            payload = PayloadShape(kind=PayloadKind.UNIT, span=src.span(name_node or node))
        elif payload_node.type == "field_declaration_list":
            field_names = []
            for field_decl in payload_node.named_children:
                if field_decl.type != "field_declaration":
                    continue
                field_name = field_decl.child_by_field_name("name")
                field_names.append(src.text(field_name) if field_name is not None else "")
            payload = PayloadShape(
                kind=PayloadKind.NAMED,
                field_names=tuple(field_names),
                span=src.span(payload_node),
            )
        else:
            types = [
                src.text(child)
                for child in payload_node.named_children
                if child.type not in self.TRIVIA_NODES and child.type != "visibility_modifier"
            ]
            payload = PayloadShape(
                kind=PayloadKind.UNNAMED,
                types=tuple(types),
                span=src.span(payload_node),
            )

        return VariantNode(name=name, payload=payload, span=src.span(node))

    def _parse_input(self, node: Node, src: _SourceText) -> InputNode:
        """Parse one slot of a parameter list."""
        text = src.text(node)
        span = src.span(node)

        if node.type == "self_parameter":
            child_types = {child.type for child in node.children}
            if "&" in child_types:
                kind = ReceiverKind.BY_MUTABLE_REFERENCE if "mutable_specifier" in child_types else ReceiverKind.BY_REFERENCE
            else:
                kind = ReceiverKind.BY_VALUE
            return InputNode(kind=InputKind.RECEIVER, text=text, span=span, receiver_kind=kind)

        if node.type == "variadic_parameter":
            return InputNode(kind=InputKind.VARIADIC, text=text, span=span)

        if node.type == "parameter":
            pattern = node.child_by_field_name("pattern")
            type_node = node.child_by_field_name("type")
            type_ref = src.text(type_node) if type_node is not None else ""

            # `self: Box<Self>` and friends
            if pattern is not None and (pattern.type == "self" or src.text(pattern) == "self"):
                return InputNode(
                    kind=InputKind.RECEIVER,
                    text=text,
                    span=span,
                    type_ref=type_ref,
                    receiver_kind=self._typed_receiver_kind(type_ref),
                )

            # `mut x: T` may come back as a mut_pattern around the binding
            if pattern is not None and pattern.type == "mut_pattern" and pattern.named_children:
                pattern = pattern.named_children[-1]

            return InputNode(
                kind=InputKind.TYPED,
                text=text,
                span=span,
                pattern=src.text(pattern) if pattern is not None else "",
                pattern_kind=pattern.type if pattern is not None else "",
                type_ref=type_ref,
            )

        # `_` or a bare type, as allowed in trait method declarations
        return InputNode(kind=InputKind.ANONYMOUS, text=text, span=span)

    def _typed_receiver_kind(self, type_ref: str) -> ReceiverKind:
        if _MUT_REFERENCE.match(type_ref):
            return ReceiverKind.BY_MUTABLE_REFERENCE
        if type_ref.startswith("&"):
            return ReceiverKind.BY_REFERENCE
        return ReceiverKind.BY_VALUE

    def _signature_text(self, fn_node: Node, src: _SourceText) -> str:
        """Verbatim signature without visibility, comments and `;`, folded onto one line."""
        start = fn_node.start_byte
        for child in fn_node.children:
            if child.type != "visibility_modifier":
                start = child.start_byte
                break
        end = fn_node.end_byte

        pieces = []
        for comment in self._comments(fn_node):
            if comment.start_byte < start:
                continue
            pieces.append(src.data[start : comment.start_byte])
            start = comment.end_byte
        pieces.append(src.data[start:end])

        text = b" ".join(pieces).decode("utf-8").rstrip()
        text = text.removesuffix(";")
        return " ".join(text.split())

    def _comments(self, node: Node) -> Iterator[Node]:
        """Comment nodes below a node, in source order."""
        for child in node.children:
            if child.type in self.COMMENT_NODES:
                yield child
            else:
                yield from self._comments(child)


def first_error_node(node: Node) -> Node | None:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = first_error_node(child)
            if found is not None:
                return found
    return None
