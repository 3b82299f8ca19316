"""Core publishing logic for Wikiscribe."""

from wikiscribe.core.publisher import DocumentPublisher, PublishError, PublishResult

__all__ = [
    "DocumentPublisher",
    "PublishError",
    "PublishResult",
]
