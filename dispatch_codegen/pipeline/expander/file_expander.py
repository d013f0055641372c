"""
Attribute expander for whole Rust files.

Finds enums marked with the dispatch attribute, e.g.

    #[derive(Parser)]
    #[clap_dispatch(fn sort(self, nums: Vec<i32>) -> Vec<i32>)]
    enum Cli { Quick(QuickArgs), Merge(MergeArgs) }

removes the attribute and writes the generated trait and impl right after
the enum. Every marked enum is an independent invocation of the generator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node, Parser

from ..config import DispatchConfig, ErrorMode
from ..errors import DispatchError, DispatchSyntaxError
from ..generator import DispatchGenerator
from ..source_ast.nodes import Span
from ..source_ast.parser import RUST_LANGUAGE, first_error_node

logger = logging.getLogger(__name__)


@dataclass
class _Edit:
    """Replace data[start:end] with text."""

    start: int = 0
    end: int = 0
    text: bytes = b""


@dataclass
class _MarkedEnum:
    """An enum together with the dispatch attributes written on it."""

    node: Node
    attributes: list[Node] = field(default_factory=list)


class AttributeExpander:
    """Expands dispatch attributes in Rust source files."""

    SKIPPED_SIBLINGS = {"attribute_item", "line_comment", "block_comment"}

    def __init__(self, config: DispatchConfig | None = None, generator: DispatchGenerator | None = None):
        self.config = config or DispatchConfig()
        self.generator = generator or DispatchGenerator(self.config)
        self._parser = Parser(RUST_LANGUAGE)

    def expand_file(self, path: Path) -> str:
        """Read a Rust file and return its expanded source."""
        path = Path(path)
        return self.expand_source(path.read_text(encoding="utf-8"), str(path))

    def expand_source(self, source: str, path: str = "<source>") -> str:
        """
        Expand every marked enum in a Rust source text.

        Args:
            source: Rust source code
            path: Name used in error locations

        Returns:
            The source with dispatch attributes replaced by generated code,
            or the source unchanged if nothing is marked

        Raises:
            DispatchError: The first error of the first failing enum, located
                in the file (unless on_error is compile_error)
        """
        data = source.encode("utf-8")
        tree = self._parser.parse(data)

        marked = self._collect_marked_enums(tree.root_node, data, path)
        if not marked:
            logger.debug("%s: no `%s` attributes found", path, self.config.attribute_name)
            return source

        if tree.root_node.has_error:
            error_node = first_error_node(tree.root_node) or tree.root_node
            detail = f"expected `{error_node.type}`" if error_node.is_missing else "syntax error"
            raise DispatchSyntaxError(f"failed to parse {path}: {detail}", self._file_span(error_node, path))

        edits: list[_Edit] = []
        for entry in marked:
            edits.extend(self._expand_enum(entry, data, path))

        for edit in sorted(edits, key=lambda e: e.start, reverse=True):
            data = data[: edit.start] + edit.text + data[edit.end :]

        logger.debug("%s: expanded %d enum(s)", path, len(marked))
        return self.generator.post_process(data.decode("utf-8"))

    def _collect_marked_enums(self, root: Node, data: bytes, path: str) -> list[_MarkedEnum]:
        """Group dispatch attributes by the enum they are written on, in source order."""
        marked: dict[tuple[int, int], _MarkedEnum] = {}
        for attr in self._find_nodes(root, "attribute_item"):
            if not self._is_dispatch_attribute(attr, data):
                continue
            target = self._attached_item(attr)
            if target is None or target.type != "enum_item":
                raise DispatchSyntaxError(
                    f"`#[{self.config.attribute_name}]` can only be applied to an enum",
                    self._file_span(attr, path),
                )
            key = (target.start_byte, target.end_byte)
            marked.setdefault(key, _MarkedEnum(node=target)).attributes.append(attr)
        return list(marked.values())

    def _expand_enum(self, entry: _MarkedEnum, data: bytes, path: str) -> list[_Edit]:
        enum_node = entry.node
        item_text = self._text(enum_node, data)
        indent = self._line_indent(enum_node.start_byte, data)

        edits = []
        pieces = []
        for attr in entry.attributes:
            edits.append(self._removal(attr, data))
            try:
                signature_text, args_node = self._signature_of(attr, data, path)
                pieces.append(self.generator.render(item_text, signature_text))
            except DispatchError as e:
                if e.span is not None and e.span.source == "signature":
                    e.relocate(path, args_node.start_byte + 1, args_node.start_point[0], args_node.start_point[1] + 1)
                elif e.span is not None and e.span.source == "item":
                    e.relocate(path, enum_node.start_byte, enum_node.start_point[0], enum_node.start_point[1])
                if self.config.on_error != ErrorMode.COMPILE_ERROR:
                    raise
                logger.warning("%s", e)
                pieces.append(e.to_compile_error() + "\n")

        generated = "\n".join(piece.rstrip("\n") for piece in pieces)
        block = "\n".join(indent + line if line else "" for line in generated.split("\n"))
        edits.append(_Edit(start=enum_node.end_byte, end=enum_node.end_byte, text=("\n\n" + block).encode("utf-8")))
        return edits

    def _signature_of(self, attr: Node, data: bytes, path: str) -> tuple[str, Node]:
        """Signature text inside `#[name(...)]` and the token tree holding it."""
        attribute = self._attribute_node(attr)
        args_node = attribute.child_by_field_name("arguments") if attribute is not None else None
        if args_node is None:
            raise DispatchSyntaxError(
                f"expected a function signature, e.g. `#[{self.config.attribute_name}(fn run(self))]`",
                self._file_span(attr, path),
            )
        return self._text(args_node, data)[1:-1], args_node

    def _is_dispatch_attribute(self, attr: Node, data: bytes) -> bool:
        attribute = self._attribute_node(attr)
        if attribute is None or not attribute.named_children:
            return False
        attr_path = self._text(attribute.named_children[0], data)
        name = self.config.attribute_name
        return attr_path == name or attr_path.endswith("::" + name)

    def _attribute_node(self, attr: Node) -> Node | None:
        return next((child for child in attr.named_children if child.type == "attribute"), None)

    def _attached_item(self, attr: Node) -> Node | None:
        """The item an outer attribute belongs to: the next sibling that is not an attribute or comment."""
        sibling = attr.next_named_sibling
        while sibling is not None and sibling.type in self.SKIPPED_SIBLINGS:
            sibling = sibling.next_named_sibling
        return sibling

    def _removal(self, attr: Node, data: bytes) -> _Edit:
        """Edit removing an attribute, and its whole line when it stands alone."""
        start, end = attr.start_byte, attr.end_byte
        line_start = data.rfind(b"\n", 0, start) + 1
        while end < len(data) and data[end : end + 1] in (b" ", b"\t"):
            end += 1
        if not data[line_start:start].strip() and data[end : end + 1] == b"\n":
            start = line_start
            end += 1
        return _Edit(start=start, end=end)

    def _line_indent(self, offset: int, data: bytes) -> str:
        line_start = data.rfind(b"\n", 0, offset) + 1
        line = data[line_start:offset].decode("utf-8")
        return line[: len(line) - len(line.lstrip())]

    def _find_nodes(self, node: Node, node_type: str) -> Iterator[Node]:
        """Find all nodes of a given type, in source order."""
        if node.type == node_type:
            yield node
        for child in node.children:
            yield from self._find_nodes(child, node_type)

    def _text(self, node: Node, data: bytes) -> str:
        return data[node.start_byte : node.end_byte].decode("utf-8")

    def _file_span(self, node: Node, path: str) -> Span:
        return Span(
            source=path,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_line=node.start_point[0],
            start_column=node.start_point[1],
            end_line=node.end_point[0],
            end_column=node.end_point[1],
        )
