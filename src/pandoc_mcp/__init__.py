"""MCP server exposing Pandoc document conversion."""

__version__ = "1.0.0"
