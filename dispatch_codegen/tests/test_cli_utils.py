#!/usr/bin/env python3

import pytest

from dispatch_codegen.cli_utils import reconstruct_command_line
from dispatch_codegen.dispatch_codegen import generate


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Test command reconstruction without active Click context (fallback)"""
        result = reconstruct_command_line(generate)
        assert result == "dispatch_codegen"

    def test_reconstruct_command_line_with_context(self):
        """Options and arguments given on the command line are reproduced"""
        params = {
            "signature": "fn run(self)",
            "config": None,
            "trait_visibility": "pub",
            "binding": None,
            "compile_error": True,
            "format_code": False,
            "force": False,
            "generation_comment": True,
            "item_path": "cli.rs",
            "output": None,
        }
        with generate.make_context("generate", ["-s", "x", "cli.rs"], resilient_parsing=True) as ctx:
            ctx.params = params
            result = reconstruct_command_line(generate)
        assert result.startswith("dispatch_codegen generate cli.rs")
        assert "--signature 'fn run(self)'" in result
        assert "--trait-visibility pub" in result
        assert "--compile-error" in result
        assert "--force" not in result


if __name__ == "__main__":
    pytest.main([__file__])
