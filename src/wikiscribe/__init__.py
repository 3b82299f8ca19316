"""Wikiscribe - generate Markdown documentation and publish it as wiki blocks."""

__version__ = "0.1.0"
