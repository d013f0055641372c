"""
Tests for the tree-sitter based source parser.
"""

from __future__ import annotations

import pytest

from dispatch_codegen.pipeline.errors import DispatchSyntaxError, ErrorKind
from dispatch_codegen.pipeline.source_ast import (
    InputKind,
    PayloadKind,
    ReceiverKind,
    RustSourceParser,
)


@pytest.fixture
def parser():
    return RustSourceParser()


class TestParseSumType:
    """Parsing enum declarations"""

    def test_simple_enum(self, parser):
        node = parser.parse_sum_type("enum Cli { Quick(QuickArgs), Merge(MergeArgs) }")
        assert node.name == "Cli"
        assert not node.has_generics
        assert [v.name for v in node.variants] == ["Quick", "Merge"]
        assert all(v.payload.is_single_unnamed for v in node.variants)
        assert node.variants[0].payload.types == ("QuickArgs",)

    def test_attributes_comments_and_visibility(self, parser):
        text = """/// The command line.
#[derive(Parser)]
pub enum Cli {
    /// Quick sort
    #[command(name = "quick")]
    Quick(QuickArgs),
    // merge sort
    Merge(MergeArgs),
}
"""
        node = parser.parse_sum_type(text)
        assert node.name == "Cli"
        assert [v.name for v in node.variants] == ["Quick", "Merge"]
        assert node.text == text

    def test_generic_parameters(self, parser):
        node = parser.parse_sum_type("enum Foo<T, U> { A(T), B(U) }")
        assert node.has_generics
        assert node.generic_parameters == ("T", "U")
        assert node.generics_span.start_column == 8

    def test_payload_shapes(self, parser):
        node = parser.parse_sum_type("enum E { Unit, Empty(), Pair(A, B), Named { x: i32, y: i32 }, One(Box<A>) }")
        shapes = {v.name: v.payload for v in node.variants}
        assert shapes["Unit"].kind == PayloadKind.UNIT
        assert shapes["Empty"].kind == PayloadKind.UNNAMED
        assert shapes["Empty"].arity == 0
        assert shapes["Pair"].types == ("A", "B")
        assert shapes["Named"].kind == PayloadKind.NAMED
        assert shapes["Named"].field_names == ("x", "y")
        assert shapes["One"].is_single_unnamed
        assert shapes["One"].types == ("Box<A>",)

    def test_generic_payload_type_is_allowed_through(self, parser):
        node = parser.parse_sum_type("enum E { A(Vec<Option<i32>>) }")
        assert node.variants[0].payload.is_single_unnamed

    def test_struct_is_rejected(self, parser):
        with pytest.raises(DispatchSyntaxError) as exc_info:
            parser.parse_sum_type("struct Cli(Args);")
        assert exc_info.value.kind == ErrorKind.SYNTAX
        assert "expected `enum`" in exc_info.value.message

    def test_two_items_are_rejected(self, parser):
        with pytest.raises(DispatchSyntaxError, match="unexpected item"):
            parser.parse_sum_type("enum A { X(Y) }\nenum B { Z(W) }")

    def test_empty_input_is_rejected(self, parser):
        with pytest.raises(DispatchSyntaxError, match="found nothing"):
            parser.parse_sum_type("   ")

    def test_broken_enum_reports_span(self, parser):
        with pytest.raises(DispatchSyntaxError) as exc_info:
            parser.parse_sum_type("enum Cli {\n    Quick(QuickArgs\n}")
        assert exc_info.value.span is not None
        assert exc_info.value.span.source == "item"
        assert "failed to parse enum" in exc_info.value.message


class TestParseSignature:
    """Parsing method signature templates"""

    def test_simple_signature(self, parser):
        node = parser.parse_signature("fn sort(self, nums: Vec<i32>) -> Vec<i32>")
        assert node.method_name == "sort"
        assert node.receiver is not None
        assert node.receiver.receiver_kind == ReceiverKind.BY_VALUE
        assert [(p.pattern, p.type_ref) for p in node.parameters] == [("nums", "Vec<i32>")]
        assert node.return_type == "Vec<i32>"
        assert node.variadic is None
        assert node.text == "fn sort(self, nums: Vec<i32>) -> Vec<i32>"

    def test_trailing_semicolon_is_accepted(self, parser):
        node = parser.parse_signature("fn run(self);")
        assert node.text == "fn run(self)"
        assert node.return_type is None

    def test_fn_keyword_is_optional(self, parser):
        node = parser.parse_signature("run(&self, verbose: bool)")
        assert node.method_name == "run"
        assert node.text == "fn run(&self, verbose: bool)"

    def test_span_ignores_supplied_fn_keyword(self, parser):
        node = parser.parse_signature("run()")
        assert node.inputs_span.start_byte == 3
        assert node.inputs_span.start_column == 3

    def test_multiline_signature_is_folded(self, parser):
        node = parser.parse_signature("fn sort(\n    self,\n    nums: Vec<i32>,\n) -> Vec<i32>")
        assert node.text == "fn sort( self, nums: Vec<i32>, ) -> Vec<i32>"
        assert [p.pattern for p in node.parameters] == ["nums"]

    def test_comments_are_left_out_of_text(self, parser):
        node = parser.parse_signature("fn sort(\n    self, // receiver\n    nums: Vec<i32>, /* numbers */\n) -> Vec<i32>")
        assert node.text == "fn sort( self, nums: Vec<i32>, ) -> Vec<i32>"
        assert node.receiver is not None
        assert [p.pattern for p in node.parameters] == ["nums"]

    @pytest.mark.parametrize("signature", ["fn run(self) // go", "fn run(self); // go", "// go\nfn run(self)"])
    def test_comment_around_signature(self, parser, signature):
        node = parser.parse_signature(signature)
        assert node.text == "fn run(self)"

    def test_visibility_is_dropped(self, parser):
        node = parser.parse_signature("pub fn run(self)")
        assert node.text == "fn run(self)"

    def test_async_modifier_is_kept(self, parser):
        node = parser.parse_signature("async fn run(self) -> u8")
        assert node.text == "async fn run(self) -> u8"

    @pytest.mark.parametrize(
        "receiver,kind",
        [
            ("self", ReceiverKind.BY_VALUE),
            ("mut self", ReceiverKind.BY_VALUE),
            ("&self", ReceiverKind.BY_REFERENCE),
            ("&'a self", ReceiverKind.BY_REFERENCE),
            ("&mut self", ReceiverKind.BY_MUTABLE_REFERENCE),
            ("self: Box<Self>", ReceiverKind.BY_VALUE),
            ("self: &Self", ReceiverKind.BY_REFERENCE),
            ("self: &mut Self", ReceiverKind.BY_MUTABLE_REFERENCE),
        ],
    )
    def test_receiver_forms(self, parser, receiver, kind):
        node = parser.parse_signature(f"fn run({receiver}, x: u8)")
        assert node.receiver is not None
        assert node.receiver.receiver_kind == kind
        assert [p.pattern for p in node.parameters] == ["x"]

    def test_no_receiver_passes_through(self, parser):
        node = parser.parse_signature("fn run(x: u8)")
        assert node.receiver is None
        assert node.inputs[0].kind == InputKind.TYPED

    def test_variadic_passes_through(self, parser):
        node = parser.parse_signature("fn act(self, ...)")
        assert node.variadic is not None
        assert node.variadic.kind == InputKind.VARIADIC

    def test_generics_pass_through(self, parser):
        node = parser.parse_signature("fn run<T: Display>(self, t: T)")
        assert node.has_generics
        assert node.generic_parameters == ("T: Display",)

    def test_mut_parameter_binds_identifier(self, parser):
        node = parser.parse_signature("fn run(self, mut count: u8)")
        assert node.parameters[0].pattern == "count"
        assert node.parameters[0].is_forwardable

    def test_tuple_pattern_is_not_forwardable(self, parser):
        node = parser.parse_signature("fn run(self, (a, b): (u8, u8))")
        assert not node.parameters[0].is_forwardable

    def test_anonymous_parameter(self, parser):
        node = parser.parse_signature("fn run(self, u8)")
        assert node.inputs[1].kind == InputKind.ANONYMOUS

    def test_function_with_body_is_rejected(self, parser):
        with pytest.raises(DispatchSyntaxError):
            parser.parse_signature("fn run(self) {}")

    def test_garbage_is_rejected(self, parser):
        with pytest.raises(DispatchSyntaxError) as exc_info:
            parser.parse_signature("fn run(self,, -> )")
        assert exc_info.value.span.source == "signature"
