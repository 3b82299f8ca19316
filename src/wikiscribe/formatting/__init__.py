"""Formatting utilities for translating Markdown into wiki blocks."""

from wikiscribe.formatting.ir import (
    MAX_RUN_LENGTH,
    TextRun,
    Block,
    Heading,
    Paragraph,
    BulletListItem,
    NumberedListItem,
    CodeBlock,
    Quote,
    Divider,
    Document,
)
from wikiscribe.formatting.chunker import chunk_text
from wikiscribe.formatting.inline import InlineTokenizer, tokenize
from wikiscribe.formatting.parser import MarkdownParser, translate

__all__ = [
    "MAX_RUN_LENGTH",
    "TextRun",
    "Block",
    "Heading",
    "Paragraph",
    "BulletListItem",
    "NumberedListItem",
    "CodeBlock",
    "Quote",
    "Divider",
    "Document",
    "chunk_text",
    "InlineTokenizer",
    "tokenize",
    "MarkdownParser",
    "translate",
]
