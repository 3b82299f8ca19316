"""Command-line interface for Wikiscribe."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from wikiscribe import __version__
from wikiscribe.config import get_settings, load_settings
from wikiscribe.core.publisher import DocumentPublisher, PublishError
from wikiscribe.destinations import DestinationError, NotionWriter, to_notion_blocks
from wikiscribe.formatting.ir import CodeBlock, Document, Heading
from wikiscribe.formatting.parser import MarkdownParser
from wikiscribe.llm.client import LLMClient, LLMError
from wikiscribe.llm.prompts import DocMode, GenerationRequest

app = typer.Typer(
    name="wikiscribe",
    help="Generate Markdown documentation with an LLM and publish it as Notion blocks.",
    add_completion=False,
)
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logs to stderr; DEBUG when verbose, otherwise warnings only."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Wikiscribe v{__version__}")
        raise typer.Exit()


def read_optional(path: Optional[Path]) -> str:
    """Read a text file if given, otherwise return an empty string."""
    if path is None:
        return ""
    return path.read_text(encoding="utf-8")


def build_request(
    context_file: Path,
    mode: DocMode,
    code_file: Optional[Path],
    challenges_file: Optional[Path],
) -> GenerationRequest:
    """Build a generation request from input files."""
    return GenerationRequest(
        context=context_file.read_text(encoding="utf-8"),
        mode=mode,
        code=read_optional(code_file),
        challenges=read_optional(challenges_file),
    )


def describe_blocks(document: Document) -> Table:
    """Render a one-row-per-block summary table."""
    table = Table("#", "Block", "Text")
    for index, block in enumerate(document.blocks, start=1):
        kind = type(block).__name__
        if isinstance(block, CodeBlock):
            kind = f"CodeBlock ({block.language})"
        elif isinstance(block, Heading):
            kind = f"Heading {block.level}"
        text = block.plain_text
        if len(text) > 60:
            text = text[:57] + "..."
        table.add_row(str(index), kind, text)
    return table


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Read settings from this .env file instead of ./.env",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    Generate documentation and publish it to a wiki page.

    Examples:

        wikiscribe generate notes.txt --mode task

        wikiscribe blocks docs.md --json

        wikiscribe publish docs.md --page <page-id>

        wikiscribe publish notes.txt --generate --mode meeting
    """
    if env_file:
        load_settings(env_file)


@app.command()
def generate(
    context_file: Path = typer.Argument(..., help="File with the context dump", exists=True),
    mode: DocMode = typer.Option(DocMode.TASK, "--mode", help="Documentation mode"),
    code_file: Optional[Path] = typer.Option(
        None, "--code", help="File with the code implementation (task mode)", exists=True
    ),
    challenges_file: Optional[Path] = typer.Option(
        None, "--challenges", help="File with challenges and solutions (task mode)", exists=True
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write Markdown here instead of stdout"
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="LiteLLM model string"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Generate Markdown documentation from a context file."""
    configure_logging(verbose)
    request = build_request(context_file, mode, code_file, challenges_file)

    try:
        result = LLMClient(model=model).generate_documentation(request)
    except LLMError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if verbose:
        console.print(f"[blue]Model:[/blue] {result.model}")
        if result.was_optimized:
            console.print(
                f"[blue]Input optimized:[/blue] "
                f"{result.metadata.get('reduction_percent', 0)}% reduction"
            )

    if output:
        output.write_text(result.documentation, encoding="utf-8")
        console.print(f"[green]Success:[/green] {output}")
    else:
        typer.echo(result.documentation)


@app.command()
def blocks(
    markdown_file: Path = typer.Argument(..., help="Markdown file to translate", exists=True),
    as_json: bool = typer.Option(
        False, "--json", help="Print the Notion block JSON instead of a summary"
    ),
) -> None:
    """Translate a Markdown file into blocks without publishing."""
    settings = get_settings()
    parser = MarkdownParser(max_run_length=settings.max_run_length)
    document = parser.parse(markdown_file.read_text(encoding="utf-8"))

    if as_json:
        payload = to_notion_blocks(document.blocks, settings.max_run_length)
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    console.print(describe_blocks(document))
    console.print(f"[bold]{document.block_count}[/bold] block(s)")


@app.command()
def publish(
    input_file: Path = typer.Argument(
        ..., help="Markdown file (or context file with --generate)", exists=True
    ),
    page: Optional[str] = typer.Option(
        None, "--page", "-p", help="Target page ID (default: NOTION_PAGE_ID)"
    ),
    mode: DocMode = typer.Option(DocMode.TASK, "--mode", help="Documentation mode"),
    generate_first: bool = typer.Option(
        False, "--generate", "-g", help="Treat the input as context and generate first"
    ),
    code_file: Optional[Path] = typer.Option(None, "--code", exists=True),
    challenges_file: Optional[Path] = typer.Option(None, "--challenges", exists=True),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="LiteLLM model string"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Append documentation to a Notion page."""
    configure_logging(verbose)

    try:
        with NotionWriter() as writer:
            publisher = DocumentPublisher(
                writer,
                llm_client=LLMClient(model=model) if generate_first else None,
            )
            if generate_first:
                request = build_request(input_file, mode, code_file, challenges_file)
                result = publisher.publish(request, page_id=page)
            else:
                markdown = input_file.read_text(encoding="utf-8")
                result = publisher.publish_markdown(markdown, page_id=page, mode=mode)
    except (PublishError, DestinationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    console.print(
        f"[green]Success:[/green] appended {result.blocks_added} block(s) "
        f"to {result.page_id} in {result.batches} request(s)"
    )
    if verbose and result.model:
        console.print(f"[blue]Model:[/blue] {result.model}")


@app.command()
def pages(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """List Notion pages shared with the integration."""
    configure_logging(verbose)

    try:
        with NotionWriter() as writer:
            found = writer.list_pages()
    except DestinationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not found:
        console.print("[yellow]No pages shared with this integration[/yellow]")
        return

    table = Table("ID", "Title")
    for ref in found:
        table.add_row(ref.id, ref.title)
    console.print(table)


if __name__ == "__main__":
    app()
