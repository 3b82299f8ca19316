"""Destination wiki writers for Wikiscribe."""

from wikiscribe.destinations.base import (
    DestinationError,
    PageRef,
    PageWriter,
    WriteResult,
)
from wikiscribe.destinations.notion import NotionWriter, to_notion_blocks

__all__ = [
    "DestinationError",
    "PageRef",
    "PageWriter",
    "WriteResult",
    "NotionWriter",
    "to_notion_blocks",
]

# Map destination names to writer classes
WRITER_MAP: dict[str, type[PageWriter]] = {
    "notion": NotionWriter,
}

SUPPORTED_DESTINATIONS = tuple(WRITER_MAP.keys())


def get_writer(name: str) -> type[PageWriter]:
    """Get the writer class for a destination name."""
    key = name.lower()
    if key not in WRITER_MAP:
        raise ValueError(
            f"Unsupported destination: {name}. "
            f"Supported destinations: {', '.join(SUPPORTED_DESTINATIONS)}"
        )
    return WRITER_MAP[key]
