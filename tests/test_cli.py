"""Tests for the CLI interface."""

import json
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from wikiscribe.cli import app
from wikiscribe.destinations.base import PageRef, WriteResult


runner = CliRunner()


class TestCLI:
    """Tests for CLI commands."""

    def test_version_flag(self):
        """Test --version flag."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "Wikiscribe" in result.stdout

    def test_help_flag(self):
        """Test --help flag."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "publish" in result.stdout

    def test_blocks_summary(self, tmp_markdown_file: Path):
        """Test translating a file prints a block count."""
        result = runner.invoke(app, ["blocks", str(tmp_markdown_file)])

        assert result.exit_code == 0
        assert "11 block(s)" in result.stdout

    def test_blocks_json(self, tmp_path: Path):
        """Test the Notion JSON output."""
        md = tmp_path / "doc.md"
        md.write_text("# Title\n\n---", encoding="utf-8")

        result = runner.invoke(app, ["blocks", str(md), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [b["type"] for b in payload] == ["heading_1", "divider"]

    def test_env_file_option(self, tmp_path: Path):
        """Test settings are read from the given .env file."""
        env = tmp_path / "custom.env"
        env.write_text("WIKISCRIBE_MAX_RUN_LENGTH=5\n", encoding="utf-8")
        md = tmp_path / "doc.md"
        md.write_text("abcdefghij", encoding="utf-8")

        result = runner.invoke(app, ["--env-file", str(env), "blocks", str(md), "--json"])

        assert result.exit_code == 0
        rich_text = json.loads(result.stdout)[0]["paragraph"]["rich_text"]
        assert [item["text"]["content"] for item in rich_text] == ["abcde", "fghij"]

    def test_blocks_missing_file(self, tmp_path: Path):
        """Test error when file doesn't exist."""
        result = runner.invoke(app, ["blocks", str(tmp_path / "nope.md")])

        assert result.exit_code != 0

    def test_generate_mock_mode(self, tmp_path: Path):
        """Test generation without API keys prints mock documentation."""
        context = tmp_path / "notes.txt"
        context.write_text("Rebuilt the billing export", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(context), "--mode", "architecture"])

        assert result.exit_code == 0
        assert "Architecture Documentation (mock mode)" in result.stdout

    def test_generate_to_file(self, tmp_path: Path):
        context = tmp_path / "notes.txt"
        context.write_text("Rebuilt the billing export", encoding="utf-8")
        output = tmp_path / "out.md"

        result = runner.invoke(app, ["generate", str(context), "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8").startswith("# Task Documentation")

    def test_publish_without_token(self, tmp_markdown_file: Path):
        """Test publishing fails cleanly without NOTION_API_KEY."""
        result = runner.invoke(app, ["publish", str(tmp_markdown_file), "--page", "p1"])

        assert result.exit_code == 1
        assert "NOTION_API_KEY" in result.stdout

    def test_publish_markdown(self, tmp_markdown_file: Path):
        """Test publishing an existing Markdown file."""
        writer = MagicMock()
        writer.name = "notion"
        writer.write.return_value = WriteResult(page_id="p1", blocks_added=11, batches=1)

        with patch("wikiscribe.cli.NotionWriter") as writer_cls:
            writer_cls.return_value.__enter__.return_value = writer
            result = runner.invoke(app, ["publish", str(tmp_markdown_file), "--page", "p1"])

        assert result.exit_code == 0
        assert "appended 11 block(s)" in result.stdout
        page_id, blocks = writer.write.call_args.args
        assert page_id == "p1"
        assert len(blocks) == 11

    def test_pages(self):
        """Test listing shared pages."""
        writer = MagicMock()
        writer.list_pages.return_value = [PageRef(id="abc", title="Roadmap")]

        with patch("wikiscribe.cli.NotionWriter") as writer_cls:
            writer_cls.return_value.__enter__.return_value = writer
            result = runner.invoke(app, ["pages"])

        assert result.exit_code == 0
        assert "Roadmap" in result.stdout
