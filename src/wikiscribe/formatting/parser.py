"""Markdown parser for converting LLM output to block IR."""

from dataclasses import dataclass, field
from typing import Optional, Union

from wikiscribe.formatting.inline import InlineTokenizer
from wikiscribe.formatting.ir import (
    DEFAULT_CODE_LANGUAGE,
    MAX_RUN_LENGTH,
    Block,
    BulletListItem,
    CodeBlock,
    Divider,
    Document,
    Heading,
    NumberedListItem,
    Paragraph,
    Quote,
)

FENCE = "```"
DIVIDER_CHARS = frozenset("-*_")
BULLET_MARKERS = ("- ", "* ")
MAX_HEADING_LEVEL = 3


@dataclass
class Scanning:
    """Outside any code fence."""


@dataclass
class InsideFence:
    """Accumulating the body of an open code fence."""

    language: str = DEFAULT_CODE_LANGUAGE
    body: list[str] = field(default_factory=list)

    def to_block(self) -> CodeBlock:
        return CodeBlock(language=self.language, content="\n".join(self.body))


FenceState = Union[Scanning, InsideFence]


def is_fence(line: str) -> bool:
    """Check if a line opens or closes a code fence."""
    return line.strip().startswith(FENCE)


def is_divider(stripped: str) -> bool:
    """Three or more of one of ``- * _`` and nothing else but whitespace."""
    compact = "".join(stripped.split())
    return len(compact) >= 3 and len(set(compact)) == 1 and compact[0] in DIVIDER_CHARS


def heading_level(stripped: str) -> int:
    """Return the heading level of a line, or 0 if it is not a heading."""
    level = len(stripped) - len(stripped.lstrip("#"))
    if 1 <= level <= MAX_HEADING_LEVEL and stripped[level : level + 1] == " ":
        return level
    return 0


def numbered_item_text(stripped: str) -> Optional[str]:
    """Return the item text of a ``1. text`` line, or None."""
    digits = len(stripped) - len(stripped.lstrip("0123456789"))
    if digits == 0 or stripped[digits : digits + 1] != ".":
        return None
    rest = stripped[digits + 1 :]
    if not rest[:1].isspace():
        return None
    return rest[1:]


class MarkdownParser:
    """Classify Markdown lines into typed blocks.

    A single forward pass over the lines. Fence tracking is held in an
    explicit state value; every other line is classified on its own, in
    this order: blank, divider, heading, bullet, numbered item, quote,
    paragraph.
    """

    def __init__(self, max_run_length: int = MAX_RUN_LENGTH) -> None:
        """Initialize the parser.

        Args:
            max_run_length: Longest content allowed in a single text run
        """
        self.tokenizer = InlineTokenizer(max_run_length=max_run_length)

    def translate(self, markdown: Optional[str]) -> list[Block]:
        """Convert Markdown into an ordered list of blocks.

        Never raises. An unterminated fence is flushed as a code block at
        the end of input.
        """
        blocks: list[Block] = []
        state: FenceState = Scanning()

        for line in (markdown or "").replace("\r\n", "\n").split("\n"):
            if isinstance(state, InsideFence):
                if is_fence(line):
                    blocks.append(state.to_block())
                    state = Scanning()
                else:
                    state.body.append(line)
                continue

            if is_fence(line):
                language = line.strip().lstrip("`").strip()
                state = InsideFence(language=language or DEFAULT_CODE_LANGUAGE)
                continue

            block = self._classify(line)
            if block is not None:
                blocks.append(block)

        if isinstance(state, InsideFence):
            blocks.append(state.to_block())

        return blocks

    def parse(self, markdown: Optional[str], metadata: Optional[dict] = None) -> Document:
        """Convert Markdown into a Document.

        Args:
            markdown: The Markdown text from the LLM
            metadata: Optional metadata to attach to the document

        Returns:
            Document with translated blocks
        """
        return Document(
            blocks=tuple(self.translate(markdown)),
            metadata=metadata or {},
        )

    def _classify(self, line: str) -> Optional[Block]:
        """Classify one line outside a fence. Blank lines yield None."""
        stripped = line.strip()
        if not stripped:
            return None

        if is_divider(stripped):
            return Divider()

        level = heading_level(stripped)
        if level:
            return Heading(level=level, runs=self._runs(stripped[level + 1 :]))

        if stripped.startswith(BULLET_MARKERS):
            return BulletListItem(runs=self._runs(stripped[2:]))

        item_text = numbered_item_text(stripped)
        if item_text is not None:
            return NumberedListItem(runs=self._runs(item_text))

        if stripped.startswith(">"):
            text = stripped[1:]
            if text.startswith(" "):
                text = text[1:]
            return Quote(runs=self._runs(text))

        return Paragraph(runs=self._runs(stripped))

    def _runs(self, text: str) -> tuple:
        return tuple(self.tokenizer.tokenize(text))


_default_parser = MarkdownParser()


def translate(markdown: Optional[str]) -> list[Block]:
    """Translate Markdown with the default run length limit."""
    return _default_parser.translate(markdown)
