"""Tests for the inline run tokenizer."""

import time

import pytest

from wikiscribe.formatting.inline import InlineTokenizer, tokenize
from wikiscribe.formatting.ir import TextRun


class TestInlineTokenizer:
    """Tests for the InlineTokenizer class."""

    @pytest.fixture
    def tokenizer(self) -> InlineTokenizer:
        """Create a tokenizer instance."""
        return InlineTokenizer()

    def test_plain_text(self, tokenizer: InlineTokenizer):
        """Test text without markup yields one plain run."""
        runs = tokenizer.tokenize("Hello, world!")

        assert runs == [TextRun(content="Hello, world!")]
        assert runs[0].is_plain

    @pytest.mark.parametrize("line", ["", None])
    def test_empty_input(self, tokenizer: InlineTokenizer, line):
        """Test empty input yields a single empty run."""
        assert tokenizer.tokenize(line) == [TextRun(content="")]

    def test_bold_text(self, tokenizer: InlineTokenizer):
        """Test parsing bold text."""
        runs = tokenizer.tokenize("This is **bold** text")

        assert [r.content for r in runs] == ["This is ", "bold", " text"]
        assert [r.bold for r in runs] == [False, True, False]

    def test_underscore_bold_and_italic(self, tokenizer: InlineTokenizer):
        """Test __bold__ and _italic_ forms."""
        runs = tokenizer.tokenize("__strong__ and _soft_")

        assert runs[0] == TextRun(content="strong", bold=True)
        assert runs[1] == TextRun(content=" and ")
        assert runs[2] == TextRun(content="soft", italic=True)

    def test_italic_text(self, tokenizer: InlineTokenizer):
        """Test parsing italic text."""
        runs = tokenizer.tokenize("She *ran* quickly")

        assert runs[1] == TextRun(content="ran", italic=True)

    def test_inline_code(self, tokenizer: InlineTokenizer):
        """Test inline code keeps special characters verbatim."""
        runs = tokenizer.tokenize("Run `echo $HOME @user #1 !` now")

        assert runs[1] == TextRun(content="echo $HOME @user #1 !", code=True)

    def test_code_span_hides_emphasis(self, tokenizer: InlineTokenizer):
        """Test markers inside code are not interpreted."""
        runs = tokenizer.tokenize("`**not bold**`")

        assert runs == [TextRun(content="**not bold**", code=True)]

    def test_link(self, tokenizer: InlineTokenizer):
        """Test a link keeps its label and URL."""
        runs = tokenizer.tokenize("See [the docs](https://example.com) here")

        assert runs[1] == TextRun(content="the docs", link="https://example.com")
        assert runs[1].bold is False

    def test_link_with_query_string(self, tokenizer: InlineTokenizer):
        """Test URLs with query strings are preserved verbatim."""
        url = "https://example.com/search?q=a&page=2&sort=desc"
        runs = tokenizer.tokenize(f"[search]({url})")

        assert runs[0].link == url

    def test_link_label_is_literal(self, tokenizer: InlineTokenizer):
        """Test markup inside a link label is not interpreted."""
        runs = tokenizer.tokenize("[**bold link**](https://example.com)")

        assert len(runs) == 1
        assert runs[0].content == "**bold link**"
        assert runs[0].link == "https://example.com"
        assert runs[0].bold is False

    def test_adjacent_spans_have_no_empty_run(self, tokenizer: InlineTokenizer):
        """Test adjacent styled spans with nothing between them."""
        runs = tokenizer.tokenize("**bold***italic*")

        assert runs == [
            TextRun(content="bold", bold=True),
            TextRun(content="italic", italic=True),
        ]

    def test_bold_not_read_as_italic(self, tokenizer: InlineTokenizer):
        """Test **x** is one bold run, not two italic markers."""
        runs = tokenizer.tokenize("a **x** b")

        assert runs[1] == TextRun(content="x", bold=True)
        assert not any(r.italic for r in runs)

    def test_earliest_marker_wins(self, tokenizer: InlineTokenizer):
        """Test the earliest-starting span is taken first."""
        runs = tokenizer.tokenize("*first* then **second**")

        assert runs[0] == TextRun(content="first", italic=True)
        assert runs[2] == TextRun(content="second", bold=True)

    @pytest.mark.parametrize(
        "line",
        ["**never closed", "a * b", "[label] (url)", "[](empty)", "`open"],
    )
    def test_unterminated_markers_are_literal(self, tokenizer: InlineTokenizer, line: str):
        """Test malformed markup falls back to plain text."""
        runs = tokenizer.tokenize(line)

        assert "".join(r.content for r in runs) == line
        assert all(r.is_plain for r in runs)

    def test_visible_text_preserved(self, tokenizer: InlineTokenizer):
        """Test run contents join to the visible text of the line."""
        line = "Mix **bold**, *italic*, `code` and [a link](https://x.io)."
        runs = tokenizer.tokenize(line)

        assert "".join(r.content for r in runs) == (
            "Mix bold, italic, code and a link."
        )

    def test_oversized_plain_run_split(self, tokenizer: InlineTokenizer):
        """Test a 2500-character line is split into bounded runs."""
        line = "word " * 500

        runs = tokenizer.tokenize(line)

        assert len(runs) >= 2
        assert all(len(r.content) <= 2000 for r in runs)
        assert sum(len(r.content) for r in runs) == 2500
        assert all(r.is_plain for r in runs)

    def test_oversized_bold_run_keeps_annotations(self):
        """Test split pieces of a styled run keep its annotations."""
        tokenizer = InlineTokenizer(max_run_length=10)
        runs = tokenizer.tokenize("x **one two three four five** y")

        bold = [r for r in runs if r.bold]
        assert len(bold) > 1
        assert all(len(r.content) <= 10 for r in runs)
        assert "".join(r.content for r in bold) == "one two three four five"
        assert runs[0].content == "x "
        assert runs[-1].content == " y"

    def test_link_after_stray_bracket(self, tokenizer: InlineTokenizer):
        """Test an unmatched bracket before a link becomes part of its label."""
        runs = tokenizer.tokenize("see [x [y](https://a.io) now")

        assert runs == [
            TextRun(content="see "),
            TextRun(content="x [y", link="https://a.io"),
            TextRun(content=" now"),
        ]

    @pytest.mark.parametrize("unit,span", [("[x `a` ", "code"), ("[ **b** ", "bold")])
    def test_many_spans_scale_linearly(self, tokenizer: InlineTokenizer, unit: str, span: str):
        """Test a long line full of spans and stray brackets tokenizes quickly."""
        count = 5000
        started = time.perf_counter()

        runs = tokenizer.tokenize(unit * count)

        assert time.perf_counter() - started < 1.0
        assert len(runs) == 2 * count + 1
        assert sum(1 for r in runs if getattr(r, span)) == count

    def test_invalid_limit(self):
        """Test a non-positive run limit is rejected."""
        with pytest.raises(ValueError):
            InlineTokenizer(max_run_length=0)


def test_module_level_tokenize():
    """Test the convenience function uses the default limit."""
    assert tokenize("**hi**") == [TextRun(content="hi", bold=True)]
