#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_scenarios.py
"""End-to-end conversion of HTML documents."""

import pytest

from treemark import WarningKind, convert_html, html_to_markdown

pytestmark = pytest.mark.integration


class TestBasicDocuments:
    def test_heading_and_paragraph(self) -> None:
        assert html_to_markdown("<h1>Title</h1><p>Hello <b>world</b></p>") == "# Title\n\nHello **world**\n"

    def test_nested_list(self) -> None:
        html = "<ul><li>A</li><li>B<ul><li>C</li></ul></li></ul>"
        assert html_to_markdown(html) == "- A\n- B\n  - C\n"

    def test_bare_link(self) -> None:
        assert html_to_markdown('<a href="https://x.com">link</a>') == "[link](https://x.com)"

    def test_special_character_escaped(self) -> None:
        assert html_to_markdown("<p>Use the * character</p>") == "Use the \\* character\n"

    def test_decoded_angle_bracket_escaped(self) -> None:
        assert html_to_markdown("<p>Use &lt;div&gt; tags</p>") == "Use \\<div> tags\n"

    def test_decoded_entity_text_escaped(self) -> None:
        assert html_to_markdown("<p>&amp;copy; 2024</p>") == "\\&copy; 2024\n"

    def test_equals_after_break_is_not_setext_underline(self) -> None:
        assert html_to_markdown("<p>Title<br>===</p>") == "Title  \n\\===\n"

    def test_tildes_do_not_open_fence(self) -> None:
        assert html_to_markdown("<p>~~~ not code</p><p>after</p>") == "\\~\\~\\~ not code\n\nafter\n"

    def test_adjacent_bold_stays_unambiguous(self) -> None:
        assert html_to_markdown("<p><b>a</b><b>b</b></p>") == "**a**__b__\n"

    def test_adjacent_lists_stay_separate(self) -> None:
        html = "<ul><li>a</li></ul><ul><li>b</li></ul>"
        assert html_to_markdown(html) == "- a\n\n<!-- -->\n\n- b\n"

    def test_unknown_element(self) -> None:
        result = convert_html("<foo>bar</foo>")
        assert result.markdown == "bar"
        assert len(result.warnings) == 1
        assert result.warnings[0].kind is WarningKind.UNSUPPORTED_ELEMENT


ARTICLE = """<!DOCTYPE html>
<html>
<head>
  <title>Release Notes</title>
  <style>body { color: red; }</style>
</head>
<body>
  <h1>Version 2.0</h1>
  <p>
    This release brings <em>many</em> changes.
    See the <a href="https://example.com/docs" title="Docs">documentation</a>.
  </p>
  <h2>Highlights</h2>
  <ol>
    <li>Faster <code>parse_tree()</code> calls</li>
    <li>New options:
      <ul>
        <li>setext headings</li>
        <li>reference links</li>
      </ul>
    </li>
  </ol>
  <blockquote><p>Upgrade with care.</p></blockquote>
  <pre><code class="language-python">import treemark
print(treemark.html_to_markdown("&lt;p&gt;hi&lt;/p&gt;"))
</code></pre>
  <table>
    <thead><tr><th>Option</th><th align="right">Default</th></tr></thead>
    <tbody>
      <tr><td>heading_style</td><td>atx</td></tr>
      <tr><td>max_depth</td><td>100</td></tr>
    </tbody>
  </table>
  <script>trackPageView();</script>
  <hr>
  <p>Thanks<br>The team</p>
</body>
</html>
"""

EXPECTED_ARTICLE = """# Version 2.0

This release brings *many* changes. See the [documentation](https://example.com/docs "Docs").

## Highlights

1. Faster `parse_tree()` calls
2. New options:
   - setext headings
   - reference links

> Upgrade with care.

```python
import treemark
print(treemark.html_to_markdown("<p>hi</p>"))
```

| Option | Default |
| --- | ---: |
| heading_style | atx |
| max_depth | 100 |

---

"""

# The hard break keeps its two trailing spaces
EXPECTED_ARTICLE += "Thanks  \nThe team\n"


class TestFullDocument:
    def test_article(self) -> None:
        result = convert_html(ARTICLE)
        assert result.markdown == EXPECTED_ARTICLE
        assert result.ok

    def test_article_with_title(self) -> None:
        markdown = html_to_markdown(ARTICLE, extract_title=True)
        assert markdown.startswith("# Release Notes\n\n## Version 2.0\n\n")
        assert "### Highlights" in markdown

    def test_article_from_bytes(self) -> None:
        assert convert_html(ARTICLE.encode("utf-8")).markdown == EXPECTED_ARTICLE

    def test_reference_links(self) -> None:
        html = '<p><a href="https://a.example">one</a> and <a href="https://b.example">two</a></p>'
        assert html_to_markdown(html, link_style="reference") == (
            "[one][1] and [two][2]\n\n[1]: https://a.example\n[2]: https://b.example\n"
        )

    def test_warnings_collected_across_document(self) -> None:
        html = "<div><blink>a</blink><p><a>no href</a></p><marquee>b</marquee></div>"
        result = convert_html(html)
        kinds = [warning.kind for warning in result.warnings]
        assert kinds == [
            WarningKind.UNSUPPORTED_ELEMENT,
            WarningKind.MISSING_ATTRIBUTE,
            WarningKind.UNSUPPORTED_ELEMENT,
        ]
        assert "no href" in result.markdown
