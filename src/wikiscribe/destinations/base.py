"""Abstract base class for destination page writers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from wikiscribe.formatting.ir import Block


class DestinationError(Exception):
    """Error writing to a destination wiki."""

    pass


@dataclass(frozen=True)
class PageRef:
    """A page the integration can write to."""

    id: str
    title: str


@dataclass(frozen=True)
class WriteResult:
    """Outcome of appending blocks to a page.

    Attributes:
        page_id: Target page
        blocks_added: Number of blocks written
        batches: Number of API requests used
    """

    page_id: str
    blocks_added: int
    batches: int


class PageWriter(ABC):
    """Abstract base class for destination writers.

    Each writer maps translated blocks into its destination's native schema
    and appends them to an existing page.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the destination name (e.g., 'notion')."""
        ...

    @abstractmethod
    def write(self, page_id: str, blocks: Sequence[Block]) -> WriteResult:
        """Append blocks to the end of a page.

        Args:
            page_id: Destination page identifier
            blocks: Translated blocks in document order

        Returns:
            WriteResult describing what was written

        Raises:
            DestinationError: If the destination rejects the write
        """
        ...

    @abstractmethod
    def list_pages(self) -> list[PageRef]:
        """List pages shared with the integration."""
        ...

    def close(self) -> None:
        """Release any held connections. Default does nothing."""

    def __enter__(self) -> "PageWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
