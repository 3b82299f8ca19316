#!/usr/bin/env python3
"""
Wikiscribe - generate documentation and publish it to Notion

Simple usage:
    python scribe.py generate notes.txt             # Print generated Markdown
    python scribe.py blocks docs.md --json          # Show the Notion block JSON
    python scribe.py publish docs.md --page <id>    # Append to a Notion page
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from wikiscribe.cli import app

if __name__ == "__main__":
    app()
