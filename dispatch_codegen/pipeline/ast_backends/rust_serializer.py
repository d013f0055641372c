"""
Rust AST Serializer.

Converts Rust AST nodes to source code using the Jinja2 templates in
templates/rust. Follows rustfmt's default layout:
- 4-space indentation
- Opening brace on the declaration line
- One match arm per line, each ending with a comma
- Blank line between the trait and the impl
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .rust_ast_nodes import GeneratedArtifact, RustDispatchImpl, RustTrait


class RustSerializer:
    """Serializes Rust AST nodes to source code."""

    # Template directory name
    TEMPLATE_LANG = "rust"

    def __init__(self):
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.trait_template = self.jinja_env.get_template("trait.rs.jinja2")
        self.impl_template = self.jinja_env.get_template("impl.rs.jinja2")
        self.comment_template = self.jinja_env.get_template("generation_comment.rs.jinja2")

    def serialize(self, artifact: GeneratedArtifact, generation_comment: str = "") -> str:
        """Serialize the generated trait and impl, ending with a newline."""
        parts = []
        if generation_comment:
            parts.append(generation_comment)
        parts.append(self.serialize_trait(artifact.interface_declaration))
        parts.append("")
        parts.append(self.serialize_impl(artifact.dispatch_implementation))
        return "\n".join(parts) + "\n"

    def serialize_trait(self, trait: RustTrait) -> str:
        return self.trait_template.render(node=trait)

    def serialize_impl(self, impl: RustDispatchImpl) -> str:
        return self.impl_template.render(node=impl)

    def generation_comment(self, command_line: str, type_name: str) -> str:
        return self.comment_template.render(command_line=command_line, type_name=type_name)
