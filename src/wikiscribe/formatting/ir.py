"""Intermediate Representation for translated Markdown.

This module defines the structures that sit between Markdown produced by
the LLM and a destination wiki's native block schema. Every value here is
immutable and compared structurally.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Union

# Destination limit on the length of a single rich text item
MAX_RUN_LENGTH = 2000

DEFAULT_CODE_LANGUAGE = "plain text"


@dataclass(frozen=True)
class TextRun:
    """A contiguous span of text with consistent annotations.

    Attributes:
        content: The visible text (markup delimiters removed)
        bold: Whether the span is bold
        italic: Whether the span is italic
        code: Whether the span is inline code
        link: Target URL when the span is a link label
    """

    content: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    link: Optional[str] = None

    @property
    def is_plain(self) -> bool:
        """Check if the run carries no annotations at all."""
        return not (self.bold or self.italic or self.code or self.link)

    def with_content(self, content: str) -> "TextRun":
        """Copy this run's annotations onto different content."""
        return replace(self, content=content)

    def __str__(self) -> str:
        return self.content


def _plain_text(runs: tuple[TextRun, ...]) -> str:
    return "".join(run.content for run in runs)


@dataclass(frozen=True)
class Heading:
    """Section heading, level 1 to 3."""

    level: int
    runs: tuple[TextRun, ...] = ()

    @property
    def plain_text(self) -> str:
        return _plain_text(self.runs)


@dataclass(frozen=True)
class Paragraph:
    runs: tuple[TextRun, ...] = ()

    @property
    def plain_text(self) -> str:
        return _plain_text(self.runs)


@dataclass(frozen=True)
class BulletListItem:
    runs: tuple[TextRun, ...] = ()

    @property
    def plain_text(self) -> str:
        return _plain_text(self.runs)


@dataclass(frozen=True)
class NumberedListItem:
    runs: tuple[TextRun, ...] = ()

    @property
    def plain_text(self) -> str:
        return _plain_text(self.runs)


@dataclass(frozen=True)
class Quote:
    """A single quoted line. Consecutive quote lines stay separate blocks."""

    runs: tuple[TextRun, ...] = ()

    @property
    def plain_text(self) -> str:
        return _plain_text(self.runs)


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code. Content is kept verbatim and never tokenized.

    Attributes:
        language: Tag from the opening fence, or "plain text"
        content: Body lines joined by newline
    """

    language: str = DEFAULT_CODE_LANGUAGE
    content: str = ""

    @property
    def plain_text(self) -> str:
        return self.content


@dataclass(frozen=True)
class Divider:
    """Horizontal rule."""

    @property
    def plain_text(self) -> str:
        return ""


Block = Union[
    Heading,
    Paragraph,
    BulletListItem,
    NumberedListItem,
    CodeBlock,
    Quote,
    Divider,
]


@dataclass(frozen=True)
class Document:
    """An ordered sequence of blocks produced from one Markdown string.

    Attributes:
        blocks: Blocks in source order
        metadata: Free-form metadata attached by the caller
    """

    blocks: tuple[Block, ...] = ()
    metadata: dict = field(default_factory=dict, compare=False)

    @property
    def plain_text(self) -> str:
        """Get all text content without styling, one block per line."""
        return "\n".join(
            block.plain_text for block in self.blocks if block.plain_text
        )

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)
