#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_walker.py
"""Unit tests for the tree walker.

Tests cover:
- Dispatch of unknown and ignored elements
- Warning collection and ordering
- Depth limiting of pathological trees
- Context symmetry: state entered for an element never leaks to siblings
- Block elements met in inline context
- Title extraction and the trailing newline rule

"""

import pytest

from treemark import (
    Context,
    ConversionResult,
    EncodingError,
    MarkdownOptions,
    Mode,
    Node,
    TreeWalker,
    ValidationError,
    WarningKind,
    convert,
    document,
    h,
)


class RecordingWalker(TreeWalker):
    """Walker that records the context each text node is rendered in."""

    def __init__(self, options: MarkdownOptions | None = None) -> None:
        super().__init__(options)
        self.seen: dict[str, Context] = {}

    def on_node(self, node: Node, ctx: Context) -> None:
        if node.is_text and node.data.strip():
            self.seen[node.data.strip()] = ctx


def nested(tag: str, depth: int, leaf: str = "deep") -> Node:
    """Build ``depth`` levels of ``tag`` around a text leaf."""
    node: Node | str = leaf
    for _ in range(depth):
        node = h(tag, node)
    assert isinstance(node, Node)
    return node


@pytest.mark.unit
class TestUnknownElements:
    def test_unwrapped_with_warning(self) -> None:
        result = convert(h("p", "a ", h("foo", "bar"), " b"))
        assert result.markdown == "a bar b\n"
        assert len(result.warnings) == 1
        assert result.warnings[0].kind is WarningKind.UNSUPPORTED_ELEMENT
        assert result.warnings[0].tag == "foo"

    def test_drop_mode(self) -> None:
        result = convert(h("p", "a ", h("foo", "bar"), " b"), MarkdownOptions(unknown_tag_mode="drop"))
        assert result.markdown == "a b\n"
        assert [w.kind for w in result.warnings] == [WarningKind.UNSUPPORTED_ELEMENT]

    def test_unknown_with_block_content(self) -> None:
        result = convert(document(h("custom-card", h("h2", "T"), h("p", "body"))))
        assert result.markdown == "## T\n\nbody\n"
        assert len(result.warnings_of(WarningKind.UNSUPPORTED_ELEMENT)) == 1

    def test_warnings_in_document_order(self) -> None:
        tree = document(h("foo", "x"), h("p", h("a", "t")), h("bar", "y"))
        result = convert(tree)
        assert [(w.kind, w.tag) for w in result.warnings] == [
            (WarningKind.UNSUPPORTED_ELEMENT, "foo"),
            (WarningKind.MISSING_ATTRIBUTE, "a"),
            (WarningKind.UNSUPPORTED_ELEMENT, "bar"),
        ]

    def test_known_elements_produce_no_warnings(self) -> None:
        tree = document(h("h1", "T"), h("p", h("span", "s"), h("b", "x")), h("ul", h("li", "i")))
        assert convert(tree).ok


@pytest.mark.unit
class TestDepthLimit:
    def test_inline_nesting_flattened(self) -> None:
        result = convert(h("p", nested("span", 20)), MarkdownOptions(max_depth=5))
        assert result.markdown == "deep\n"
        assert len(result.warnings_of(WarningKind.DEPTH_LIMIT)) == 1

    def test_flattened_text_is_escaped(self) -> None:
        result = convert(h("p", nested("span", 10, leaf="a * b")), MarkdownOptions(max_depth=3))
        assert result.markdown == "a \\* b\n"

    def test_deep_block_nesting_does_not_exhaust_recursion(self) -> None:
        result = convert(nested("div", 5000))
        assert result.markdown == "deep\n"
        assert len(result.warnings_of(WarningKind.DEPTH_LIMIT)) == 1

    def test_deep_emphasis(self) -> None:
        result = convert(h("p", nested("b", 3000, leaf="x")))
        assert "x" in result.markdown
        assert result.warnings_of(WarningKind.DEPTH_LIMIT)

    def test_deep_lists(self) -> None:
        node: Node = h("li", "leaf")
        for _ in range(2000):
            node = h("li", h("ul", node))
        result = convert(h("ul", node))
        assert "leaf" in result.markdown
        assert result.warnings_of(WarningKind.DEPTH_LIMIT)


@pytest.mark.unit
class TestContextSymmetry:
    def test_list_context_does_not_leak(self) -> None:
        walker = RecordingWalker()
        walker.walk(document(h("p", "before"), h("ul", h("li", "inside", h("ol", h("li", "deeper")))), h("p", "after")))
        assert walker.seen["inside"].list_depth == 1
        assert walker.seen["deeper"].list_depth == 2
        assert walker.seen["after"].list_depth == 0
        assert walker.seen["after"] == walker.seen["before"]

    def test_blockquote_context_does_not_leak(self) -> None:
        walker = RecordingWalker()
        walker.walk(document(h("blockquote", h("blockquote", h("p", "quoted"))), h("p", "after")))
        assert walker.seen["quoted"].blockquote_depth == 2
        assert walker.seen["after"].blockquote_depth == 0

    def test_table_mode_restored(self) -> None:
        walker = RecordingWalker()
        walker.walk(document(h("table", h("tr", h("td", "cell"))), h("p", "after")))
        assert walker.seen["cell"].mode is Mode.TABLE_CELL
        assert walker.seen["after"].mode is Mode.NORMAL

    def test_emphasis_depth(self) -> None:
        walker = RecordingWalker()
        walker.walk(h("p", h("em", "one", h("em", "two")), "three"))
        assert walker.seen["one"].emphasis_depth == 1
        assert walker.seen["two"].emphasis_depth == 2
        assert walker.seen["three"].emphasis_depth == 0


@pytest.mark.unit
class TestInlineContext:
    def test_block_inside_link_degrades(self) -> None:
        result = convert(h("a", h("p", "x"), href="u"))
        assert result.markdown == "[x](u)"

    def test_code_block_inside_emphasis_becomes_code_span(self) -> None:
        result = convert(h("p", h("em", "a ", h("pre", "b"))))
        assert result.markdown == "*a `b`*\n"

    def test_span_with_block_content_is_block(self) -> None:
        assert convert(document(h("span", h("p", "a"), h("p", "b")))).markdown == "a\n\nb\n"


@pytest.mark.unit
class TestWalk:
    def test_trailing_newline_only_after_block(self) -> None:
        assert convert(h("p", "x")).markdown == "x\n"
        assert convert(h("span", "x")).markdown == "x"
        assert convert(document()).markdown == ""

    def test_extract_title(self) -> None:
        tree = document(h("html", h("head", h("title", "My Page")), h("body", h("h1", "Section"))))
        result = convert(tree, MarkdownOptions(extract_title=True))
        assert result.markdown == "# My Page\n\n## Section\n"

    def test_title_ignored_by_default(self) -> None:
        tree = document(h("html", h("head", h("title", "My Page")), h("body", h("h1", "Section"))))
        assert convert(tree).markdown == "# Section\n"

    def test_deterministic(self) -> None:
        tree = document(h("h1", "T"), h("p", h("a", "l", href="u"), " ", h("foo", "x")))
        first = convert(tree)
        second = convert(tree)
        assert first == second
        assert isinstance(first, ConversionResult)

    def test_walker_with_explicit_context(self) -> None:
        walker = TreeWalker()
        buffer = walker.walk(h("h1", "T"), Context(heading_offset=2))
        assert buffer.getvalue() == "### T\n"


@pytest.mark.unit
class TestFatalErrors:
    def test_malformed_text(self) -> None:
        with pytest.raises(EncodingError) as exc_info:
            convert(h("p", "ok ", Node.text("bad \udcff")))
        assert exc_info.value.conversion_stage == "decoding"

    @pytest.mark.parametrize(
        "tree",
        [
            h("p", h("a", "x", href="\ud800")),
            h("p", h("a", "x", href="u", title="t\udfff")),
            h("p", h("img", src="\ud800.png")),
            h("p", h("img", src="x.png", alt="\udcff")),
            h("p", h("img", src="x.png", title="\ud800")),
            h("p", h("code", "x\ud800")),
            h("pre", "x = '\ud800'"),
        ],
    )
    def test_malformed_attribute_or_code(self, tree: Node) -> None:
        with pytest.raises(EncodingError) as exc_info:
            convert(tree)
        assert exc_info.value.conversion_stage == "decoding"

    def test_malformed_comment(self) -> None:
        tree = h("p", "a", Node.comment("\ud800"))
        with pytest.raises(EncodingError):
            convert(tree, MarkdownOptions(comment_mode="html"))

    def test_malformed_text_past_depth_limit(self) -> None:
        tree = h("div", h("div", h("span", "bad \udcff")))
        with pytest.raises(EncodingError):
            convert(tree, MarkdownOptions(max_depth=1))

    def test_error_names_offset(self) -> None:
        with pytest.raises(EncodingError, match="href attribute at offset 3"):
            convert(h("p", h("a", "x", href="abc\ud800")))

    def test_not_a_node(self) -> None:
        with pytest.raises(ValidationError):
            convert("<p>html</p>")  # type: ignore[arg-type]
