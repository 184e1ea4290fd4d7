"""
Format converters for the Pandoc MCP server.

This package provides the pandoc-backed document converter.
"""

from .pandoc import ConversionOptions, PandocConverter

__all__ = [
    "ConversionOptions",
    "PandocConverter",
]
