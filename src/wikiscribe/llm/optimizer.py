"""Input size analysis and reduction before documentation generation.

Large context dumps (logs, transcripts, whole source files) easily exceed
provider rate limits. Oversized input is reduced by keeping key facts,
summarising prose section by section and trimming code blocks to their
most informative lines.
"""

import math
import re
from dataclasses import dataclass
from functools import lru_cache

import tiktoken
from loguru import logger

MAX_CHARS_WARNING = 20000
MAX_CHARS_SAFE = 25000
MAX_CHARS_ABSOLUTE = 30000

CODE_BLOCK_PATTERN = re.compile(r"```(\w+)?\n([\s\S]*?)```")
CODE_PLACEHOLDER = "[CODE_BLOCK_PLACEHOLDER]"
MAX_CODE_BLOCKS = 3

KEY_PATTERNS = (
    re.compile(r"\b[A-Z]+-\d+\b"),
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"\d+(?:\.\d+)?\s*(?:ms|seconds|minutes|hours|MB|GB|TB|%)", re.IGNORECASE),
    re.compile(r"(?:error|warning|critical|important|note|todo):\s*[^\n]+", re.IGNORECASE),
    re.compile(r"^#+\s+.+$", re.MULTILINE),
)

IMPORTANT_CODE_PATTERNS = (
    re.compile(r"^\s*(?:import|from)\s"),
    re.compile(r"^\s*(?:def|class|function|export)\s"),
    re.compile(r"^\s*const\s.*=.*=>"),
    re.compile(r"SELECT|INSERT|UPDATE|DELETE|CREATE|ALTER", re.IGNORECASE),
    re.compile(r"WHERE|JOIN|GROUP BY|ORDER BY", re.IGNORECASE),
)

HEADER_PATTERN = re.compile(r"^#+\s|^[A-Z\s]{3,}:?\s*$")


@dataclass(frozen=True)
class InputAnalysis:
    """Size classification of an input.

    Attributes:
        char_count: Number of characters
        token_estimate: Token count under the cl100k_base encoding
        needs_optimization: Whether the input should be reduced
        level: "safe", "caution", "warning" or "critical"
    """

    char_count: int
    token_estimate: int
    needs_optimization: bool
    level: str


@dataclass(frozen=True)
class OptimizationResult:
    optimized_context: str
    was_optimized: bool
    original_size: int
    optimized_size: int
    reduction_percent: int


@lru_cache(maxsize=1)
def _encoder():
    return tiktoken.get_encoding("cl100k_base")


def estimate_tokens(text: str) -> int:
    """Estimate token count for text."""
    return len(_encoder().encode(text))


def analyze_input(context: str) -> InputAnalysis:
    """Classify an input by size."""
    char_count = len(context)

    level = "safe"
    needs_optimization = False
    if char_count > MAX_CHARS_ABSOLUTE:
        level = "critical"
        needs_optimization = True
    elif char_count > MAX_CHARS_SAFE:
        level = "warning"
        needs_optimization = True
    elif char_count > MAX_CHARS_WARNING:
        level = "caution"

    return InputAnalysis(
        char_count=char_count,
        token_estimate=estimate_tokens(context),
        needs_optimization=needs_optimization,
        level=level,
    )


def extract_code_blocks(text: str) -> tuple[list[tuple[str, str]], str]:
    """Pull fenced code out of text.

    Returns:
        Tuple of ([(language, code), ...], text_with_placeholders)
    """
    blocks = [
        (match.group(1) or "text", match.group(2).strip())
        for match in CODE_BLOCK_PATTERN.finditer(text)
    ]
    return blocks, CODE_BLOCK_PATTERN.sub(CODE_PLACEHOLDER, text)


def summarize_code_block(code: str, max_lines: int = 20) -> str:
    """Keep the most informative lines of a code block.

    Lines are scored: declarations, imports and SQL clauses score high, the
    first and last five lines get a bonus. The best lines are kept in
    their original order with an elision marker over each gap.
    """
    lines = code.split("\n")
    if len(lines) <= max_lines:
        return code

    def score(index: int, line: str) -> int:
        value = sum(10 for pattern in IMPORTANT_CODE_PATTERNS if pattern.search(line))
        if index < 5 or index >= len(lines) - 5:
            value += 5
        if 10 < len(line.strip()) < 100:
            value += 2
        return value

    ranked = sorted(
        range(len(lines)), key=lambda i: score(i, lines[i]), reverse=True
    )
    selected = sorted(ranked[:max_lines])

    summarized: list[str] = []
    last_index = -1
    for index in selected:
        if last_index != -1 and index > last_index + 1:
            summarized.append("// ... (lines omitted for brevity) ...")
        summarized.append(lines[index])
        last_index = index
    return "\n".join(summarized)


def extract_key_information(text: str) -> str:
    """Collect ticket ids, dates, metrics, notes and headings, deduplicated."""
    found: list[str] = []
    for pattern in KEY_PATTERNS:
        found.extend(match.group(0) for match in pattern.finditer(text))
    return "\n".join(dict.fromkeys(found))


def summarize_sections(text: str, max_chars: int) -> str:
    """Truncate each section to an equal share of *max_chars*.

    Sections start at a Markdown heading or an all-caps label line.
    """
    sections: list[list[str]] = []
    for para in re.split(r"\n\n+", text):
        if HEADER_PATTERN.match(para) or not sections:
            sections.append([para])
        else:
            sections[-1].append(para)

    share = max_chars // max(len(sections), 1)
    summarized: list[str] = []
    for section in ("\n\n".join(paras) for paras in sections):
        if len(section) <= share:
            summarized.append(section)
            continue

        lines = section.split("\n")
        header = next((line for line in lines if HEADER_PATTERN.match(line)), None)
        if header:
            rest = "\n".join(line for line in lines if line != header)
            summarized.append(header)
            summarized.append(rest[: max(share - len(header) - 50, 0)] + "\n...(truncated)")
        else:
            summarized.append(section[:share] + "\n...(truncated)")

    return "\n\n".join(summarized)


def optimize_input(context: str) -> OptimizationResult:
    """Reduce an oversized input while keeping its key information."""
    analysis = analyze_input(context)
    if not analysis.needs_optimization:
        return OptimizationResult(
            optimized_context=context,
            was_optimized=False,
            original_size=analysis.char_count,
            optimized_size=analysis.char_count,
            reduction_percent=0,
        )

    logger.info(
        "Input size {} chars (~{} tokens), level {}; optimizing",
        analysis.char_count,
        analysis.token_estimate,
        analysis.level,
    )

    target_size = 20000 if analysis.level == "critical" else MAX_CHARS_SAFE
    code_blocks, prose = extract_code_blocks(context)
    key_info = extract_key_information(prose)
    summary = summarize_sections(prose, int(target_size * 0.8))
    max_code_lines = math.ceil(50 * (target_size / MAX_CHARS_SAFE))

    parts = [
        f"[AUTO-OPTIMIZED INPUT - Original: {analysis.char_count} chars]",
        f"KEY INFORMATION EXTRACTED:\n{key_info}",
        f"CONTEXT:\n{summary}",
    ]
    if code_blocks:
        code_parts = ["CODE ARTIFACTS:"]
        for language, code in code_blocks[:MAX_CODE_BLOCKS]:
            code_parts.append(
                f"```{language}\n{summarize_code_block(code, max_code_lines)}\n```"
            )
        if len(code_blocks) > MAX_CODE_BLOCKS:
            code_parts.append(
                f"({len(code_blocks) - MAX_CODE_BLOCKS} additional code blocks omitted)"
            )
        parts.append("\n".join(code_parts))

    optimized = "\n\n".join(parts)
    reduction = round((analysis.char_count - len(optimized)) / analysis.char_count * 100)
    logger.info("Optimization complete: {} chars ({}% reduction)", len(optimized), reduction)

    return OptimizationResult(
        optimized_context=optimized,
        was_optimized=True,
        original_size=analysis.char_count,
        optimized_size=len(optimized),
        reduction_percent=reduction,
    )
