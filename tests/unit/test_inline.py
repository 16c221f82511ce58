#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_inline.py
"""Unit tests for inline formatting.

Tests cover:
- Emphasis, strong and strikethrough markers and their nesting
- Whitespace at the edges of formatted runs
- Code spans and backtick fences
- Inline and reference links, images and line breaks
- Comments

"""

import pytest

from treemark import WarningKind, convert, document, h
from treemark.formatters.inline import format_destination, gather_code_text, longest_run
from treemark.nodes import Node
from treemark.options import MarkdownOptions


@pytest.mark.unit
class TestEmphasis:
    def test_strong(self, md) -> None:
        assert md(h("p", "Hello ", h("b", "world"))) == "Hello **world**\n"

    def test_emphasis(self, md) -> None:
        assert md(h("p", h("em", "x"))) == "*x*\n"

    def test_nested_emphasis_alternates(self, md) -> None:
        assert md(h("p", h("em", "a ", h("i", "b"), " c"))) == "*a _b_ c*\n"

    def test_underscore_symbol(self, md) -> None:
        assert md(h("p", h("strong", "x")), emphasis_symbol="_") == "__x__\n"

    def test_strikethrough(self, md) -> None:
        assert md(h("p", h("del", "gone"))) == "~~gone~~\n"

    def test_edge_whitespace_moves_outside(self, md) -> None:
        assert md(h("p", "a", h("b", " bold "), "c")) == "a **bold** c\n"

    def test_empty_strong_dropped(self, md) -> None:
        assert md(h("p", "a ", h("b"), "b")) == "a b\n"

    def test_whitespace_only_strong_keeps_space(self, md) -> None:
        assert md(h("p", "a", h("b", " "), "b")) == "a b\n"

    def test_adjacent_strong_switches_symbol(self, md) -> None:
        assert md(h("p", h("b", "a"), h("b", "b"))) == "**a**__b__\n"

    def test_strong_after_emphasis_switches_symbol(self, md) -> None:
        assert md(h("p", h("i", "a"), h("b", "b"))) == "*a*__b__\n"

    def test_adjacent_strong_across_span(self, md) -> None:
        assert md(h("p", h("span", h("b", "a")), h("b", "b"))) == "**a**__b__\n"

    def test_spaced_strong_keeps_symbol(self, md) -> None:
        assert md(h("p", h("b", "a "), h("b", "b"))) == "**a** **b**\n"

    def test_trailing_punctuation_before_word_falls_back_to_html(self, md) -> None:
        assert md(h("p", h("b", "foo."), "bar")) == "<strong>foo.</strong>bar\n"

    def test_leading_punctuation_after_word_falls_back_to_html(self, md) -> None:
        assert md(h("p", "foo", h("i", "-bar"))) == "foo<em>-bar</em>\n"

    def test_strikethrough_falls_back_to_html(self, md) -> None:
        assert md(h("p", h("del", "a."), "b")) == "<del>a.</del>b\n"

    def test_punctuation_followed_by_space_keeps_markers(self, md) -> None:
        assert md(h("p", h("b", "Note:"), " text")) == "**Note:** text\n"

    def test_intraword_emphasis_uses_asterisk(self, md) -> None:
        assert md(h("p", "snake", h("i", "case")), emphasis_symbol="_") == "snake*case*\n"


@pytest.mark.unit
class TestCodeSpans:
    def test_simple(self, md) -> None:
        assert md(h("p", h("code", "x = 1"))) == "`x = 1`\n"

    def test_content_not_escaped(self, md) -> None:
        assert md(h("p", h("code", "*args"))) == "`*args`\n"

    def test_fence_longer_than_content_run(self, md) -> None:
        assert md(h("p", h("code", "a``b"))) == "```a``b```\n"

    def test_padding_for_edge_backtick(self, md) -> None:
        assert md(h("p", h("code", "`x"))) == "`` `x ``\n"

    def test_whitespace_kept(self, md) -> None:
        assert md(h("p", h("code", "a  b"))) == "`a  b`\n"

    def test_longest_run(self) -> None:
        assert longest_run("a``b```c`", "`") == 3
        assert longest_run("none", "`") == 0

    def test_gather_code_text(self) -> None:
        node = h("code", "a", h("span", "b"), h("br"), Node.comment("skip"), "c")
        assert gather_code_text(node) == "ab\nc"


@pytest.mark.unit
class TestLinks:
    def test_inline_link(self, md) -> None:
        assert md(h("p", h("a", "text", href="https://example.com"))) == "[text](https://example.com)\n"

    def test_title(self, md) -> None:
        assert md(h("p", h("a", "t", href="u", title='Say "hi"'))) == '[t](u "Say \\"hi\\"")\n'

    def test_destination_with_space(self) -> None:
        assert format_destination("a b.html") == "<a b.html>"

    def test_destination_unbalanced_paren(self) -> None:
        assert format_destination("wiki/Foo_(bar") == "<wiki/Foo_(bar>"
        assert format_destination("wiki/Foo_(bar)") == "wiki/Foo_(bar)"

    def test_destination_pipe_in_cell(self) -> None:
        assert format_destination("a|b", in_table_cell=True) == "a%7Cb"

    def test_link_text_escaped(self, md) -> None:
        assert md(h("p", h("a", "[1]", href="u"))) == "[\\[1\\]](u)\n"

    def test_missing_href_warns(self) -> None:
        result = convert(h("p", h("a", "t")))
        assert result.markdown == "[t]()\n"
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.kind is WarningKind.MISSING_ATTRIBUTE
        assert warning.tag == "a"
        assert warning.attribute == "href"

    def test_empty_href_does_not_warn(self) -> None:
        result = convert(h("p", h("a", "t", href="")))
        assert result.markdown == "[t]()\n"
        assert result.ok

    def test_empty_link_text_dropped(self, md) -> None:
        assert md(h("p", "a ", h("a", href="u"), "b")) == "a b\n"

    def test_reference_links(self) -> None:
        tree = document(
            h(
                "p",
                h("a", "one", href="u1"),
                " ",
                h("a", "two", href="u2", title="T"),
                " ",
                h("a", "again", href="u1"),
            )
        )
        markdown = convert(tree, MarkdownOptions(link_style="reference")).markdown
        assert markdown == '[one][1] [two][2] [again][1]\n\n[1]: u1\n[2]: u2 "T"\n'


@pytest.mark.unit
class TestImagesAndBreaks:
    def test_image(self, md) -> None:
        assert md(h("p", h("img", src="cat.png", alt="A cat"))) == "![A cat](cat.png)\n"

    def test_image_alt_escaped(self, md) -> None:
        assert md(h("p", h("img", src="x.png", alt="a*b"))) == "![a\\*b](x.png)\n"

    def test_image_missing_src_warns(self) -> None:
        result = convert(h("p", h("img", alt="x")))
        assert result.markdown == "![x]()\n"
        assert [w.attribute for w in result.warnings_of(WarningKind.MISSING_ATTRIBUTE)] == ["src"]

    def test_line_break(self, md) -> None:
        assert md(h("p", "a ", h("br"), " b")) == "a  \nb\n"

    def test_double_line_break_stays_in_paragraph(self, md) -> None:
        assert md(h("p", "a", h("br"), h("br"), "b")) == "a  \nb\n"

    def test_text_after_break_escaped_at_line_start(self, md) -> None:
        assert md(h("p", "a", h("br"), "# b")) == "a  \n\\# b\n"


@pytest.mark.unit
class TestComments:
    def test_ignored_by_default(self, md) -> None:
        assert md(h("p", "a", Node.comment(" note "), "b")) == "ab\n"

    def test_html_mode(self, md) -> None:
        assert md(h("p", "a ", Node.comment(" note "), " b"), comment_mode="html") == "a <!-- note --> b\n"

    def test_html_mode_empty_comment(self, md) -> None:
        assert md(h("p", "a ", Node.comment("  "), " b"), comment_mode="html") == "a <!-- --> b\n"


@pytest.mark.unit
class TestEscapeSpecialDisabled:
    def test_text_passed_through(self, md) -> None:
        assert md(h("p", "*raw* _text_"), escape_special=False) == "*raw* _text_\n"
