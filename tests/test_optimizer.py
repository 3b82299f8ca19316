"""Tests for input size analysis and optimization."""

import pytest

from wikiscribe.llm.optimizer import (
    analyze_input,
    estimate_tokens,
    extract_code_blocks,
    extract_key_information,
    optimize_input,
    summarize_code_block,
)


class TestAnalyzeInput:
    """Tests for size classification."""

    @pytest.mark.parametrize(
        "size,level,needs",
        [
            (100, "safe", False),
            (20001, "caution", False),
            (25001, "warning", True),
            (30001, "critical", True),
        ],
    )
    def test_levels(self, size: int, level: str, needs: bool):
        analysis = analyze_input("x" * size)

        assert analysis.char_count == size
        assert analysis.level == level
        assert analysis.needs_optimization is needs

    def test_token_estimate(self):
        assert estimate_tokens("three small words") == 3
        assert analyze_input("a b c d").token_estimate == 4


class TestOptimizeInput:
    """Tests for the optimize_input function."""

    def test_small_input_unchanged(self):
        result = optimize_input("short context")

        assert result.was_optimized is False
        assert result.optimized_context == "short context"
        assert result.reduction_percent == 0

    def test_large_input_reduced(self):
        """Test an oversized input keeps key facts and shrinks."""
        prose = "lorem ipsum dolor sit amet. " * 1500
        context = (
            "# Intro\n\nTicket PROJ-123 shipped on 2024-05-01.\n\n"
            f"{prose}\n\n"
            "```python\nimport os\nprint(os.getcwd())\n```"
        )

        result = optimize_input(context)

        assert result.was_optimized is True
        assert result.optimized_size < result.original_size
        assert result.reduction_percent > 0
        assert "KEY INFORMATION EXTRACTED" in result.optimized_context
        assert "PROJ-123" in result.optimized_context
        assert "CODE ARTIFACTS:\n```python\nimport os" in result.optimized_context
        assert "...(truncated)" in result.optimized_context


class TestHelpers:
    """Tests for the extraction helpers."""

    def test_extract_code_blocks(self):
        blocks, text = extract_code_blocks("before\n```sql\nSELECT 1\n```\nafter")

        assert blocks == [("sql", "SELECT 1")]
        assert "[CODE_BLOCK_PLACEHOLDER]" in text
        assert "SELECT" not in text

    def test_extract_code_blocks_default_language(self):
        blocks, _ = extract_code_blocks("```\nraw\n```")

        assert blocks == [("text", "raw")]

    def test_extract_key_information_deduplicates(self):
        text = "See ABC-12 and ABC-12 again.\nTODO: add retries\nLatency 250 ms"

        info = extract_key_information(text).split("\n")

        assert info.count("ABC-12") == 1
        assert "TODO: add retries" in info
        assert "250 ms" in info

    def test_summarize_code_block_short(self):
        code = "a = 1\nb = 2"

        assert summarize_code_block(code, max_lines=5) == code

    def test_summarize_code_block_keeps_declarations(self):
        body = [f"    value_{i} = compute({i})" for i in range(60)]
        code = "\n".join(["import math", "def main():"] + body)

        summary = summarize_code_block(code, max_lines=10)
        lines = summary.split("\n")

        assert lines[0] == "import math"
        assert "def main():" in lines
        assert "// ... (lines omitted for brevity) ..." in lines
        assert len([line for line in lines if not line.startswith("//")]) == 10
