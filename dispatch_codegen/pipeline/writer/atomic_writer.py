"""
Atomic file writer for safe code generation.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from tree_sitter import Parser

from ..errors import OutputValidationError
from ..source_ast.parser import RUST_LANGUAGE

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(self, validate_rust: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_rust: Optional validation function for Rust code
        """
        self._validate_rust = validate_rust or self._default_validate_rust

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate_rust(content)

            temp_path.replace(path)
            logger.debug("wrote %s (%d bytes)", path, len(content))

        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    logger.debug("could not remove temporary file %s", temp_path)
            raise

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> bool:
        """Write content only if the file doesn't exist.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Returns:
            True if file was written

        Raises:
            FileExistsError: If the file already exists
            OutputValidationError: If validation fails
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite.")

        self.write(path, content, validate)
        return True

    def _default_validate_rust(self, content: str) -> None:
        """Default Rust validation: the content must parse without errors.

        Args:
            content: Rust code to validate

        Raises:
            OutputValidationError: If the content has syntax errors
        """
        tree = Parser(RUST_LANGUAGE).parse(content.encode("utf-8"))
        if tree.root_node.has_error:
            raise OutputValidationError("Generated Rust code is not valid: tree-sitter reported a syntax error")
