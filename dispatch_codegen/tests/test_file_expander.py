"""
Tests for expanding dispatch attributes inside whole Rust files.
"""

from __future__ import annotations

import textwrap

import pytest
from tree_sitter import Parser

from dispatch_codegen.pipeline import (
    AttributeExpander,
    DispatchConfig,
    DispatchSyntaxError,
    ErrorMode,
    GenericsUnsupportedError,
    MissingReceiverError,
)
from dispatch_codegen.pipeline.source_ast import RUST_LANGUAGE


def rust(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


@pytest.fixture
def expander():
    return AttributeExpander()


class TestExpandSource:
    def test_top_level_enum(self, expander):
        source = rust(
            """
            use clap::Parser;

            #[derive(Parser)]
            #[clap_dispatch(fn run(self))]
            enum Cli {
                A(AArgs),
                B(BArgs),
            }

            fn main() {}
            """
        )
        expected = rust(
            """
            use clap::Parser;

            #[derive(Parser)]
            enum Cli {
                A(AArgs),
                B(BArgs),
            }

            trait Run {
                fn run(self);
            }

            impl Run for Cli {
                fn run(self) {
                    match self {
                        Self::A(args) => Run::run(args),
                        Self::B(args) => Run::run(args),
                    }
                }
            }

            fn main() {}
            """
        )
        assert expander.expand_source(source) == expected

    def test_enum_inside_module_is_indented(self, expander):
        source = rust(
            """
            mod cli {
                #[clap_dispatch(fn go(&self, n: u8) -> u8)]
                pub enum Cmd {
                    Up(Up),
                }
            }
            """
        )
        expected = rust(
            """
            mod cli {
                pub enum Cmd {
                    Up(Up),
                }

                trait Go {
                    fn go(&self, n: u8) -> u8;
                }

                impl Go for Cmd {
                    fn go(&self, n: u8) -> u8 {
                        match self {
                            Self::Up(args) => Go::go(args, n),
                        }
                    }
                }
            }
            """
        )
        assert expander.expand_source(source) == expected

    def test_scoped_attribute_path(self, expander):
        source = "#[clap_dispatch::clap_dispatch(fn run(self))]\nenum Cli { A(X) }\n"
        out = expander.expand_source(source)
        assert out.startswith("enum Cli { A(X) }\n\ntrait Run {")

    def test_attribute_sharing_a_line(self, expander):
        source = "#[clap_dispatch(fn run(self))] enum Cli { A(X) }\n"
        out = expander.expand_source(source)
        assert out.startswith("enum Cli { A(X) }\n\ntrait Run {")

    def test_multiple_enums_are_independent(self, expander):
        source = rust(
            """
            #[clap_dispatch(fn run(self))]
            enum First { A(X) }

            #[clap_dispatch(fn stop(&mut self) -> bool)]
            enum Second { B(Y), C(Z) }
            """
        )
        out = expander.expand_source(source)
        assert "impl Run for First {" in out
        assert "impl Stop for Second {" in out
        assert out.index("impl Run for First") < out.index("enum Second")
        assert "clap_dispatch" not in out

    def test_two_attributes_on_one_enum(self, expander):
        source = rust(
            """
            #[clap_dispatch(fn run(self))]
            #[clap_dispatch(fn describe(&self) -> String)]
            enum Cli { A(X) }
            """
        )
        out = expander.expand_source(source)
        assert out.index("trait Run {") < out.index("trait Describe {")
        assert "impl Describe for Cli {" in out

    def test_commented_signature_expands_to_valid_rust(self, expander):
        source = rust(
            """
            #[clap_dispatch(
                fn sort(
                    self,
                    nums: Vec<i32>, // numbers to sort
                ) -> Vec<i32>
            )]
            enum Cli {
                Quick(QuickArgs),
            }
            """
        )
        out = expander.expand_source(source)
        assert "    fn sort( self, nums: Vec<i32>, ) -> Vec<i32>;\n" in out
        assert "Self::Quick(args) => Sort::sort(args, nums)," in out
        assert "//" not in out
        assert not Parser(RUST_LANGUAGE).parse(out.encode("utf-8")).root_node.has_error

    def test_unmarked_source_is_unchanged(self, expander):
        source = "#[derive(Debug)]\nenum Cli { A(X) }\n"
        assert expander.expand_source(source) == source

    def test_custom_attribute_name(self):
        expander = AttributeExpander(DispatchConfig(attribute_name="dispatch"))
        source = "#[dispatch(fn run(self))]\nenum Cli { A(X) }\n"
        assert "impl Run for Cli {" in expander.expand_source(source)

    def test_expand_file(self, expander, tmp_path):
        path = tmp_path / "cli.rs"
        path.write_text("#[clap_dispatch(fn run(self))]\nenum Cli { A(X) }\n", encoding="utf-8")
        assert "impl Run for Cli {" in expander.expand_file(path)


class TestErrors:
    def test_attribute_on_struct(self, expander):
        with pytest.raises(DispatchSyntaxError, match="can only be applied to an enum") as exc_info:
            expander.expand_source("#[clap_dispatch(fn run(self))]\nstruct Cli(X);\n", "lib.rs")
        assert str(exc_info.value.span) == "lib.rs:1:1"

    def test_broken_file_is_rejected(self, expander):
        source = "#[clap_dispatch(fn run(self))]\nenum Cli { A(X) }\n\nfn main() {\n    let x = ;\n}\n"
        with pytest.raises(DispatchSyntaxError, match="failed to parse lib.rs") as exc_info:
            expander.expand_source(source, "lib.rs")
        assert exc_info.value.span.start_line >= 3

    def test_attribute_without_signature(self, expander):
        with pytest.raises(DispatchSyntaxError, match="expected a function signature"):
            expander.expand_source("#[clap_dispatch]\nenum Cli { A(X) }\n")

    def test_signature_error_located_in_file(self, expander):
        source = "#[derive(Parser)]\n#[clap_dispatch(fn run())]\nenum Cli { A(X) }\n"
        with pytest.raises(MissingReceiverError) as exc_info:
            expander.expand_source(source, "src/main.rs")
        assert str(exc_info.value.span) == "src/main.rs:2:23"

    def test_item_error_located_in_file(self, expander):
        source = "\n#[clap_dispatch(fn run(self))]\nenum Foo<T> {\n    A(T),\n}\n"
        with pytest.raises(GenericsUnsupportedError) as exc_info:
            expander.expand_source(source, "src/main.rs")
        assert str(exc_info.value.span) == "src/main.rs:3:9"

    def test_compile_error_mode(self):
        expander = AttributeExpander(DispatchConfig(on_error=ErrorMode.COMPILE_ERROR))
        source = "#[clap_dispatch(fn run(self))]\nenum Foo<T> { A(T) }\n"
        assert expander.expand_source(source) == (
            'enum Foo<T> { A(T) }\n\ncompile_error!("generics are not yet supported by dispatch_codegen");\n'
        )
