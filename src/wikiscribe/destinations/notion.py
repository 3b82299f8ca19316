"""Notion destination: block schema mapping and the append-only writer."""

from typing import Any, Iterator, Optional, Sequence

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    wait_exponential,
    retry_if_exception_type,
)

from wikiscribe.config import get_settings
from wikiscribe.destinations.base import (
    DestinationError,
    PageRef,
    PageWriter,
    WriteResult,
)
from wikiscribe.formatting.chunker import chunk_text
from wikiscribe.formatting.ir import (
    DEFAULT_CODE_LANGUAGE,
    MAX_RUN_LENGTH,
    Block,
    BulletListItem,
    CodeBlock,
    Divider,
    Heading,
    NumberedListItem,
    Paragraph,
    Quote,
    TextRun,
)

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

# The append endpoint accepts at most this many children per request
MAX_BLOCKS_PER_REQUEST = 100

LANGUAGE_MAP = {
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "python": "python",
    "py": "python",
    "sql": "sql",
    "bash": "bash",
    "sh": "shell",
    "shell": "shell",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "java": "java",
    "cpp": "c++",
    "c++": "c++",
    "c": "c",
    "go": "go",
    "rust": "rust",
    "ruby": "ruby",
    "php": "php",
    "html": "html",
    "css": "css",
    "markdown": "markdown",
    "md": "markdown",
}

_LIST_TYPES = {
    Paragraph: "paragraph",
    BulletListItem: "bulleted_list_item",
    NumberedListItem: "numbered_list_item",
    Quote: "quote",
}


def map_language(language: str) -> str:
    """Map a fence language tag to a Notion code language."""
    return LANGUAGE_MAP.get(language.strip().lower(), DEFAULT_CODE_LANGUAGE)


def to_rich_text(run: TextRun) -> dict[str, Any]:
    """Convert a TextRun to a Notion rich text object."""
    text: dict[str, Any] = {"content": run.content}
    if run.link:
        text["link"] = {"url": run.link}
    return {
        "type": "text",
        "text": text,
        "annotations": {
            "bold": run.bold,
            "italic": run.italic,
            "strikethrough": False,
            "underline": False,
            "code": run.code,
            "color": "default",
        },
    }


def to_notion_block(block: Block, max_run_length: int = MAX_RUN_LENGTH) -> dict[str, Any]:
    """Convert one translated block to a Notion block object."""
    if isinstance(block, Divider):
        return {"object": "block", "type": "divider", "divider": {}}

    if isinstance(block, CodeBlock):
        return {
            "object": "block",
            "type": "code",
            "code": {
                "rich_text": [
                    {"type": "text", "text": {"content": chunk}}
                    for chunk in chunk_text(block.content, max_run_length)
                ],
                "language": map_language(block.language),
            },
        }

    if isinstance(block, Heading):
        block_type = f"heading_{block.level}"
    else:
        block_type = _LIST_TYPES[type(block)]

    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": [to_rich_text(run) for run in block.runs]},
    }


def to_notion_blocks(
    blocks: Sequence[Block], max_run_length: int = MAX_RUN_LENGTH
) -> list[dict[str, Any]]:
    """Convert translated blocks to Notion block objects."""
    return [to_notion_block(block, max_run_length) for block in blocks]


def batch_blocks(
    blocks: Sequence[Any], size: int = MAX_BLOCKS_PER_REQUEST
) -> Iterator[list[Any]]:
    """Yield consecutive batches of at most *size* blocks."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(blocks), size):
        yield list(blocks[start : start + size])


def extract_page_title(page: dict[str, Any]) -> str:
    """Read a page title from a search result, defaulting to 'Untitled'."""
    properties = page.get("properties") or {}
    title_prop = properties.get("title") or properties.get("Title")
    if not isinstance(title_prop, dict):
        return "Untitled"
    parts = title_prop.get("title") or []
    if parts and isinstance(parts[0], dict):
        return parts[0].get("plain_text") or "Untitled"
    return "Untitled"


def _stop_after_configured_attempts(retry_state: RetryCallState) -> bool:
    return retry_state.attempt_number >= get_settings().max_retries


class RetryableStatus(DestinationError):
    """Transient API failure (rate limit or server error)."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotionWriter(PageWriter):
    """Append translated blocks to Notion pages over the REST API."""

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        max_run_length: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the writer.

        Args:
            token: Notion integration token (default from settings)
            timeout: Request timeout in seconds (default from settings)
            max_run_length: Rich text length limit (default from settings)
            transport: Optional httpx transport, mainly for testing
        """
        settings = get_settings()
        self.token = token or settings.notion_api_key
        if not self.token:
            raise DestinationError("Notion API token is required (set NOTION_API_KEY)")

        self.max_run_length = max_run_length or settings.max_run_length
        self._client = httpx.Client(
            base_url=NOTION_API_BASE,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json",
                "Notion-Version": NOTION_VERSION,
            },
            timeout=timeout or settings.http_timeout,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "notion"

    def close(self) -> None:
        self._client.close()

    @retry(
        stop=_stop_after_configured_attempts,
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((RetryableStatus, httpx.TransportError)),
        reraise=True,
    )
    def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        """Send one API request, retrying on 429, 5xx and transport errors."""
        response = self._client.request(method, path, json=json)
        if response.is_success:
            return response.json()

        status = response.status_code
        try:
            error = response.json()
        except ValueError:
            error = {}
        if not isinstance(error, dict):
            error = {}
        message = error.get("message") or f"Notion API returned {status}"

        if status == 429 or status >= 500:
            logger.warning("Notion {} {} returned {}, retrying", method, path, status)
            raise RetryableStatus(message, status)
        if status == 403:
            raise DestinationError(
                f"Notion permission error: {message}. Ensure the page is shared "
                "with your integration and it has 'Insert content' capability."
            )
        if status == 404:
            raise DestinationError(f"Notion page not found: {message}")
        if status == 400 and error.get("code") == "validation_error":
            raise DestinationError(f"Notion validation error: {message}")
        raise DestinationError(message)

    def write(self, page_id: str, blocks: Sequence[Block]) -> WriteResult:
        """Append blocks to a page in batches of 100."""
        if not page_id:
            raise DestinationError("Page ID is required")

        children = to_notion_blocks(blocks, self.max_run_length)
        return self.append_blocks(page_id, children)

    def append_blocks(self, page_id: str, children: list[dict[str, Any]]) -> WriteResult:
        """Append already-mapped Notion block objects to a page."""
        if not children:
            return WriteResult(page_id=page_id, blocks_added=0, batches=0)

        batches = list(batch_blocks(children))
        for index, batch in enumerate(batches, start=1):
            logger.debug(
                "Appending batch {}/{} ({} blocks) to {}",
                index,
                len(batches),
                len(batch),
                page_id,
            )
            try:
                self._request("PATCH", f"/blocks/{page_id}/children", {"children": batch})
            except RetryableStatus as e:
                raise DestinationError(
                    f"Failed to append blocks (batch {index}/{len(batches)}): {e}"
                ) from e
            except httpx.TransportError as e:
                raise DestinationError(f"Could not reach Notion: {e}") from e

        logger.info("Appended {} blocks to {} in {} batches", len(children), page_id, len(batches))
        return WriteResult(page_id=page_id, blocks_added=len(children), batches=len(batches))

    def list_pages(self) -> list[PageRef]:
        """List all pages shared with the integration, following pagination."""
        pages: list[PageRef] = []
        cursor: Optional[str] = None
        while True:
            body: dict[str, Any] = {
                "filter": {"value": "page", "property": "object"},
                "page_size": 100,
            }
            if cursor:
                body["start_cursor"] = cursor

            try:
                data = self._request("POST", "/search", body)
            except httpx.TransportError as e:
                raise DestinationError(f"Could not reach Notion: {e}") from e

            for page in data.get("results", []):
                pages.append(PageRef(id=page["id"], title=extract_page_title(page)))

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                return pages

    def check_access(self, page_id: str) -> tuple[bool, Optional[str]]:
        """Check whether the integration can read a page.

        Returns:
            Tuple of (accessible, error_message)
        """
        try:
            self._request("GET", f"/blocks/{page_id}")
        except (DestinationError, httpx.TransportError) as e:
            return False, str(e)
        return True, None
