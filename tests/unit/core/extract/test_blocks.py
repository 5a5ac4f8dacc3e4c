"""Unit tests for core/extract/blocks.py"""

import pytest
from markdown_it import MarkdownIt

from lessonpub.core.extract.blocks import Details, parse_attr_list, tokens_to_blocks
from lessonpub.core.models import Callout, CodeSample, Heading, ListBlock, Paragraph, Table


@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False})


def _parse_blocks(parser, md: str):
    return tokens_to_blocks(parser.parse(md), md.splitlines(keepends=True))


def test_heading_block(parser):
    """heading_open maps to Heading with level and inline text."""
    blocks = _parse_blocks(parser, "## Hello *there*\n")
    assert blocks == [Heading(level=2, text="Hello *there*")]


def test_paragraph_keeps_inline_source(parser):
    """Paragraph text is the verbatim inline markdown."""
    blocks = _parse_blocks(parser, "Use `extends` to\ninherit.\n")
    assert blocks == [Paragraph(text="Use `extends` to\ninherit.")]


def test_list_items(parser):
    """Lists produce one item per top-level entry; nested paragraphs are not separate blocks."""
    blocks = _parse_blocks(parser, "- one\n- two\n  continued\n")
    assert blocks == [ListBlock(ordered=False, items=["one", "two\ncontinued"])]


def test_ordered_list_item_with_code(parser):
    """Code inside a list item joins the item's text."""
    md = "1. First\n2. ```\n   Super\n   Sub\n   ```\n"
    blocks = _parse_blocks(parser, md)
    assert blocks == [ListBlock(ordered=True, items=["First", "Super\nSub"])]


def test_fence_language(parser):
    """Fence language is the first word of the info string."""
    blocks = _parse_blocks(parser, "```java linenums\nint x;\n```\n")
    assert blocks == [CodeSample(language="java", text="int x;")]


def test_indented_code_has_no_language(parser):
    blocks = _parse_blocks(parser, "    indented code\n")
    assert blocks == [CodeSample(language="", text="indented code")]


def test_attribute_list_sets_filename(parser):
    """A `{: file=... }` line after a fence labels the code sample and is consumed."""
    md = '```cpp\nint main() {}\n```\n{: file="main.cpp" .nolineno }\n'
    blocks = _parse_blocks(parser, md)
    assert blocks == [CodeSample(language="cpp", filename="main.cpp", text="int main() {}")]


def test_attribute_list_without_code_is_dropped(parser):
    blocks = _parse_blocks(parser, "Text.\n\n{: .nolineno }\n")
    assert blocks == [Paragraph(text="Text.")]


def test_parse_attr_list():
    assert parse_attr_list('{: file="A.java" .nolineno }') == {"file": "A.java", "nolineno": "class"}
    assert parse_attr_list("plain text") is None


def test_table(parser):
    """Tables keep header cells and row cells as inline source."""
    md = "| A | B |\n|---|---|\n| `x` | 1 |\n| y | 2 |\n"
    blocks = _parse_blocks(parser, md)
    assert blocks == [Table(headers=["A", "B"], rows=[["`x`", "1"], ["y", "2"]])]


@pytest.mark.parametrize("md,style,text", [
    ("> Careful here.\n{: .prompt-warning }\n", "warning", "Careful here."),
    ("> Careful here.\n\n{: .prompt-tip }\n", "tip", "Careful here."),
    ("> Just a quote.\n", "quote", "Just a quote."),
])
def test_callout(parser, md, style, text):
    """A trailing prompt class sets the callout style; plain blockquotes are quotes."""
    assert _parse_blocks(parser, md) == [Callout(style=style, text=text)]


def test_html_block_is_paragraph(parser):
    """Other raw HTML passes through verbatim."""
    blocks = _parse_blocks(parser, "<div class=\"note\">hi</div>\n")
    assert blocks == [Paragraph(text="<div class=\"note\">hi</div>")]


def test_details_region_spans_blank_lines(parser):
    """A <details> region is gathered through </details>, inner markdown untouched."""
    md = "<details>\n<summary>Answer</summary>\n\n**Answer: 2**\n\nBecause.\n\n</details>\n\nAfter.\n"
    blocks = _parse_blocks(parser, md)
    assert len(blocks) == 2
    assert isinstance(blocks[0], Details)
    assert blocks[0].explanation == "**Answer: 2**\n\nBecause."
    assert blocks[1] == Paragraph(text="After.")


def test_hr_is_dropped(parser):
    blocks = _parse_blocks(parser, "Above.\n\n---\n\nBelow.\n")
    assert blocks == [Paragraph(text="Above."), Paragraph(text="Below.")]
