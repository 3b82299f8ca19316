"""Pytest fixtures for Wikiscribe tests."""

import pytest
from pathlib import Path
from unittest.mock import Mock, patch

from wikiscribe.config import reset_settings

_ENV_VARS = (
    "WIKISCRIBE_MODEL",
    "WIKISCRIBE_FALLBACK_MODEL",
    "WIKISCRIBE_MAX_RUN_LENGTH",
    "GEMINI_API_KEY",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "NOTION_API_KEY",
    "NOTION_PAGE_ID",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path: Path):
    """Run every test without real credentials or a local .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def fake_token_encoder():
    """Count whitespace-separated words instead of loading tiktoken data."""
    encoder = Mock()
    encoder.encode.side_effect = lambda text: text.split()
    with patch("wikiscribe.llm.optimizer._encoder", return_value=encoder):
        yield encoder


@pytest.fixture
def sample_markdown() -> str:
    """Sample generated documentation covering every block type."""
    return '''# Project Summary

This is a paragraph with **bold** and *italic* text.

## Implementation

- Used httpx for the API
- Connected to [Notion](https://developers.notion.com)

```python
def hello_world():
    print("Hello")
```

### Next Steps

1. Add tests
2. Deploy to production

> Ship it.

---'''


@pytest.fixture
def mock_llm_response(sample_markdown: str) -> str:
    """Mock LLM response."""
    return sample_markdown


@pytest.fixture
def mock_completion(mock_llm_response: str):
    """Patch LiteLLM so no API calls are made."""
    with patch("wikiscribe.llm.client.completion") as mock:
        mock.return_value = Mock(
            choices=[Mock(message=Mock(content=mock_llm_response))]
        )
        yield mock


@pytest.fixture
def tmp_markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Create a temporary Markdown file."""
    file_path = tmp_path / "docs.md"
    file_path.write_text(sample_markdown, encoding="utf-8")
    return file_path
