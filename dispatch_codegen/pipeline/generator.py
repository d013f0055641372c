"""
Dispatch generator.

Runs one invocation of the pipeline against an enum declaration and a
method signature template:

1. Parser: source text to source AST (RustSourceParser)
2. Validator: structural checks, first violation wins (DispatchValidator)
3. AST backend: trait and dispatch impl nodes (RustAstBackend)
4. Serializer: nodes to Rust source (RustSerializer)
5. Formatter: optional rustfmt pass (RustfmtFormatter)

Each invocation is independent and keeps no state between calls.
"""

from __future__ import annotations

import logging

from .analyzer import DispatchValidator, NameResolver
from .ast_backends import GeneratedArtifact, RustAstBackend, RustSerializer
from .config import DispatchConfig, ErrorMode
from .errors import DispatchError
from .formatters import Formatter, RustfmtFormatter
from .source_ast import RustSourceParser

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_LINE = "dispatch_codegen"


class DispatchGenerator:
    """Generates a trait and its dispatch impl for an enum."""

    def __init__(
        self,
        config: DispatchConfig | None = None,
        formatter: Formatter | None = None,
        command_line: str = DEFAULT_COMMAND_LINE,
    ):
        """
        Initialize the generator.

        Args:
            config: Code generation configuration
            formatter: Formatter used when config.formatter.enabled is set
            command_line: Command line quoted in the generation comment
        """
        self.config = config or DispatchConfig()
        self.command_line = command_line
        self.parser = RustSourceParser()
        self.validator = DispatchValidator()
        self.name_resolver = NameResolver()
        self.backend = RustAstBackend(self.config, self.name_resolver)
        self.serializer = RustSerializer()
        self.formatter = formatter or RustfmtFormatter()

    def generate(self, item_text: str, signature_text: str) -> GeneratedArtifact:
        """
        Parse, validate and build the artifact for one enum.

        Args:
            item_text: Source text of the enum declaration
            signature_text: Source text of the method signature template

        Returns:
            The generated trait and dispatch impl

        Raises:
            DispatchError: On the first syntax or validation error
        """
        sum_type, signature = self.parser.parse(item_text, signature_text)
        logger.debug(
            "parsed enum %s with %d variants and signature `%s`",
            sum_type.name,
            len(sum_type.variants),
            signature.text,
        )

        self.validator.validate(sum_type, signature)

        artifact = self.backend.build(sum_type, signature)
        logger.debug("generated trait %s for %s", artifact.interface_name, sum_type.name)
        return artifact

    def render(self, item_text: str, signature_text: str) -> str:
        """
        Generate the trait and impl as Rust source, without the enum itself.

        Raises:
            DispatchError: On the first syntax or validation error
        """
        artifact = self.generate(item_text, signature_text)
        comment = ""
        if self.config.add_generation_comment:
            comment = self.serializer.generation_comment(
                self.command_line,
                artifact.dispatch_implementation.type_name,
            )
        return self.serializer.serialize(artifact, comment)

    def expand(self, item_text: str, signature_text: str) -> str:
        """
        Return the enum followed by the generated trait and impl.

        With on_error set to compile_error, a rejected input yields the enum
        followed by a `compile_error!` invocation instead of raising.

        Args:
            item_text: Source text of the enum declaration
            signature_text: Source text of the method signature template

        Returns:
            Expanded Rust source

        Raises:
            DispatchError: On the first syntax or validation error, when
                on_error is raise
        """
        try:
            generated = self.render(item_text, signature_text)
        except DispatchError as e:
            if self.config.on_error != ErrorMode.COMPILE_ERROR:
                raise
            logger.debug("emitting compile_error! for: %s", e)
            return self.join(item_text, e.to_compile_error() + "\n")

        return self.post_process(self.join(item_text, generated))

    def post_process(self, code: str) -> str:
        """Run the formatter when enabled."""
        if self.config.formatter.enabled:
            return self.formatter.format(code, self.config.formatter)
        return code

    @staticmethod
    def join(item_text: str, generated: str) -> str:
        """Append generated code after the item, separated by a blank line."""
        return item_text.rstrip() + "\n\n" + generated


def expand(item_text: str, signature_text: str, config: DispatchConfig | None = None) -> str:
    """
    Expand one enum: the enum text followed by the generated trait and impl.

    Args:
        item_text: Source text of the enum declaration
        signature_text: Source text of the method signature template
        config: Optional configuration

    Returns:
        Expanded Rust source

    Raises:
        DispatchError: On the first syntax or validation error
    """
    return DispatchGenerator(config).expand(item_text, signature_text)
