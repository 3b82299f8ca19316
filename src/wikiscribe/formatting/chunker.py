"""Length-bounded text splitting for destination run limits."""

from typing import Optional

from wikiscribe.formatting.ir import MAX_RUN_LENGTH


def chunk_text(text: Optional[str], max_length: int = MAX_RUN_LENGTH) -> list[str]:
    """Split text into chunks of at most *max_length* characters.

    Chunks concatenate back to the original text exactly; no whitespace is
    trimmed. A boundary is placed right after the last whitespace character
    that keeps the chunk within the limit, so words are not broken across
    chunks. A run of non-whitespace longer than the limit is hard-cut at
    exactly *max_length*.

    Args:
        text: Text to split (None is treated as empty)
        max_length: Maximum chunk length, must be positive

    Returns:
        Non-empty list of chunks

    Raises:
        ValueError: If max_length is not a positive integer
    """
    if not isinstance(max_length, int) or isinstance(max_length, bool) or max_length <= 0:
        raise ValueError(f"max_length must be a positive integer, got {max_length!r}")

    text = text or ""
    if len(text) <= max_length:
        return [text]

    chunks: list[str] = []
    start = 0
    while len(text) - start > max_length:
        end = start + _find_split(text, start, max_length)
        chunks.append(text[start:end])
        start = end

    chunks.append(text[start:])
    return chunks


def _find_split(text: str, start: int, max_length: int) -> int:
    """Find the length of the next chunk beginning at *start*."""
    # The window fills exactly up to a word boundary
    if text[start + max_length].isspace():
        return max_length

    for offset in range(max_length - 1, -1, -1):
        if text[start + offset].isspace():
            return offset + 1

    return max_length
