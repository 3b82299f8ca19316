"""Main documentation publishing orchestrator."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from wikiscribe.config import get_settings
from wikiscribe.destinations.base import DestinationError, PageWriter
from wikiscribe.formatting.ir import Document
from wikiscribe.formatting.parser import MarkdownParser
from wikiscribe.llm.client import LLMClient, LLMError
from wikiscribe.llm.prompts import DocMode, GenerationRequest


class PublishError(Exception):
    """Error during generation or publishing."""

    pass


@dataclass
class PublishResult:
    """Outcome of one publish run.

    Attributes:
        markdown: The Markdown that was translated
        document: The translated blocks
        page_id: Page written to
        blocks_added: Number of blocks appended
        batches: Number of write requests
        model: Model that generated the Markdown, None when given directly
    """

    markdown: str
    document: Document
    page_id: str
    blocks_added: int
    batches: int
    model: Optional[str] = None


class DocumentPublisher:
    """Orchestrates the documentation pipeline.

    Pipeline:
    1. Generate Markdown via the LLM (or take Markdown as given)
    2. Translate Markdown to blocks
    3. Append blocks to the destination page
    """

    def __init__(
        self,
        writer: PageWriter,
        llm_client: Optional[LLMClient] = None,
        parser: Optional[MarkdownParser] = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            writer: Destination writer
            llm_client: Client for generation (created lazily if needed)
            parser: Markdown parser (default uses the configured run limit)
        """
        settings = get_settings()
        self.writer = writer
        self._llm_client = llm_client
        self.parser = parser or MarkdownParser(max_run_length=settings.max_run_length)

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    def resolve_page_id(self, page_id: Optional[str]) -> str:
        """Use the given page or fall back to NOTION_PAGE_ID."""
        target = page_id or get_settings().notion_page_id
        if not target:
            raise PublishError(
                "No target page. Pass a page ID or set NOTION_PAGE_ID."
            )
        return target

    def translate(self, markdown: str, mode: DocMode = DocMode.TASK) -> Document:
        """Translate Markdown to blocks, applying mode-specific framing.

        Architecture documents are closed with a divider so that several
        appended to one page stay visually separate.
        """
        if DocMode(mode) == DocMode.ARCHITECTURE:
            markdown = f"{markdown}\n\n---\n"
        return self.parser.parse(markdown, metadata={"mode": DocMode(mode).value})

    def publish_markdown(
        self,
        markdown: str,
        page_id: Optional[str] = None,
        mode: DocMode = DocMode.TASK,
        model: Optional[str] = None,
    ) -> PublishResult:
        """Translate existing Markdown and append it to a page.

        Raises:
            PublishError: If there is no target page, nothing to write,
                or the destination rejects the write
        """
        target = self.resolve_page_id(page_id)
        if not markdown or not markdown.strip():
            raise PublishError("Nothing to publish: Markdown is empty")

        document = self.translate(markdown, mode)
        logger.info(
            "Generated {} {} blocks (mode: {})",
            document.block_count,
            self.writer.name,
            DocMode(mode).value,
        )

        try:
            result = self.writer.write(target, document.blocks)
        except DestinationError as e:
            raise PublishError(f"Failed to write to {self.writer.name}: {e}") from e

        return PublishResult(
            markdown=markdown,
            document=document,
            page_id=result.page_id,
            blocks_added=result.blocks_added,
            batches=result.batches,
            model=model,
        )

    def publish(
        self,
        request: GenerationRequest,
        page_id: Optional[str] = None,
    ) -> PublishResult:
        """Generate documentation for a request and append it to a page."""
        target = self.resolve_page_id(page_id)
        try:
            generated = self.llm_client.generate_documentation(request)
        except LLMError as e:
            raise PublishError(f"Documentation generation failed: {e}") from e

        return self.publish_markdown(
            generated.documentation,
            page_id=target,
            mode=request.mode,
            model=generated.model,
        )
