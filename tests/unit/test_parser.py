#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_parser.py
"""Unit tests for the node model and HTML parsing."""

import pytest
from bs4 import FeatureNotFound

from treemark.exceptions import DependencyError, EncodingError, ParseError, ValidationError
from treemark.nodes import DOCUMENT_TAG, Node, NodeKind, document, h
from treemark.options import ParserOptions
from treemark.parsers import html as html_parser
from treemark.parsers import parse_html, sanitize_null_bytes


@pytest.mark.unit
class TestNodes:
    def test_h_builds_elements_and_text(self) -> None:
        node = h("P", "Hello ", h("b", "world"), class_="intro", data_lang="en")
        assert node.tag == "p"
        assert node.attrs == {"class": "intro", "data-lang": "en"}
        assert node.children[0] == Node.text("Hello ")
        assert node.children[1].tag == "b"

    def test_get_missing_attribute(self) -> None:
        node = h("a", "x")
        assert node.get("href") == ""
        assert not node.has_attr("href")

    def test_classes(self) -> None:
        assert h("code", class_="language-py  highlight").classes == ["language-py", "highlight"]

    def test_text_content(self) -> None:
        tree = document(h("p", "a", h("b", "b"), Node.comment("no")), "c")
        assert tree.text_content() == "abc"

    def test_iter_descendants_document_order(self) -> None:
        tree = h("div", h("p", "1"), h("p", "2"))
        texts = [node.data for node in tree.iter_descendants() if node.is_text]
        assert texts == ["1", "2"]

    def test_element_children_filter(self) -> None:
        row = h("tr", h("td", "a"), "text", h("th", "b"), h("span"))
        assert [child.tag for child in row.element_children("td", "th")] == ["td", "th"]

    def test_kinds(self) -> None:
        assert Node.comment("x").kind is NodeKind.COMMENT
        assert document().tag == DOCUMENT_TAG


@pytest.mark.unit
class TestParseHtml:
    def test_document_root(self) -> None:
        root = parse_html("<p>Hi</p>")
        assert root.tag == DOCUMENT_TAG
        assert root.children[0].tag == "p"
        assert root.children[0].children[0].data == "Hi"

    def test_attributes_joined(self) -> None:
        root = parse_html('<p class="a b" ID="x">t</p>')
        paragraph = root.children[0]
        assert paragraph.get("class") == "a b"
        assert paragraph.get("id") == "x"

    def test_comments_kept_and_doctype_dropped(self) -> None:
        root = parse_html("<!DOCTYPE html><p>a<!-- note --></p>")
        assert [child.tag for child in root.children] == ["p"]
        comment = root.children[0].children[1]
        assert comment.is_comment
        assert comment.data == " note "

    def test_pre_leading_newline_dropped(self) -> None:
        root = parse_html("<pre>\ncode\n</pre>")
        assert root.children[0].children[0].data == "code\n"

    def test_null_bytes_stripped(self) -> None:
        root = parse_html("<p>a\x00b</p>")
        assert root.children[0].children[0].data == "ab"

    def test_bytes_decoded(self) -> None:
        root = parse_html("<p>caf\u00e9</p>".encode("utf-8"))
        assert root.children[0].children[0].data == "caf\u00e9"

    def test_bytes_with_custom_encoding(self) -> None:
        root = parse_html("<p>caf\u00e9</p>".encode("latin-1"), ParserOptions(encoding="latin-1"))
        assert root.children[0].children[0].data == "caf\u00e9"

    def test_malformed_bytes(self) -> None:
        with pytest.raises(EncodingError) as exc_info:
            parse_html(b"<p>\xff\xfe</p>")
        assert exc_info.value.position == 3

    def test_unknown_encoding(self) -> None:
        with pytest.raises(ValidationError):
            parse_html(b"<p>x</p>", ParserOptions(encoding="no-such-codec"))

    def test_wrong_input_type(self) -> None:
        with pytest.raises(ValidationError):
            parse_html(42)  # type: ignore[arg-type]

    def test_missing_parser_backend(self, monkeypatch) -> None:
        def raise_feature_not_found(*args, **kwargs):
            raise FeatureNotFound("Couldn't find a tree builder with the features you requested: lxml.")

        monkeypatch.setattr(html_parser, "BeautifulSoup", raise_feature_not_found)
        with pytest.raises(DependencyError) as exc_info:
            parse_html("<p>x</p>", ParserOptions(html_parser="lxml"))
        assert exc_info.value.missing_packages == ["lxml"]

    def test_parser_failure_wrapped(self, monkeypatch) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(html_parser, "BeautifulSoup", explode)
        with pytest.raises(ParseError, match="boom"):
            parse_html("<p>x</p>")

    def test_deeply_nested_input(self) -> None:
        depth = 2000
        root = parse_html("<div>" * depth + "x" + "</div>" * depth)
        assert root.text_content() == "x"


@pytest.mark.unit
class TestSanitizeNullBytes:
    def test_removes_zero_width(self) -> None:
        assert sanitize_null_bytes("a\u200bb\u200cc\x00d") == "abcd"

    def test_empty(self) -> None:
        assert sanitize_null_bytes("") == ""
