"""
Document formats understood by the server.

Each format is a ``PandocFormat`` member whose value is the token passed to
pandoc's ``-f``/``-t`` flags. Capabilities live in a fixed lookup table
built at import time.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .logging_config import UnsupportedFormatError


class PandocFormat(str, Enum):
    """Supported Pandoc formats."""

    MARKDOWN = "markdown"
    HTML = "html"
    PLAIN = "plain"
    IPYNB = "ipynb"
    ODT = "odt"
    PDF = "pdf"
    DOCX = "docx"
    RST = "rst"
    LATEX = "latex"
    EPUB = "epub"


@dataclass(frozen=True)
class FormatInfo:
    """Capabilities of a single format."""

    token: str
    input_capable: bool
    requires_file_output: bool


FORMAT_TABLE: Mapping[PandocFormat, FormatInfo] = MappingProxyType(
    {
        PandocFormat.MARKDOWN: FormatInfo("markdown", True, False),
        PandocFormat.HTML: FormatInfo("html", True, False),
        PandocFormat.PLAIN: FormatInfo("plain", True, False),
        PandocFormat.IPYNB: FormatInfo("ipynb", True, False),
        PandocFormat.ODT: FormatInfo("odt", True, True),
        PandocFormat.DOCX: FormatInfo("docx", True, True),
        PandocFormat.RST: FormatInfo("rst", True, False),
        PandocFormat.LATEX: FormatInfo("latex", True, False),
        PandocFormat.EPUB: FormatInfo("epub", True, True),
        PandocFormat.PDF: FormatInfo("pdf", False, True),
    }
)

# Legacy spellings accepted on input.
FORMAT_ALIASES = {
    "txt": "plain",
}

_BY_TOKEN = {info.token: fmt for fmt, info in FORMAT_TABLE.items()}


def normalize_format(format_name: str) -> PandocFormat:
    """Map a case-insensitive token (or alias) onto its format.

    Raises:
        UnsupportedFormatError: If the token is not a known format. The error
            carries the token exactly as given.
    """
    normalized = format_name.lower()
    normalized = FORMAT_ALIASES.get(normalized, normalized)

    try:
        return _BY_TOKEN[normalized]
    except KeyError:
        raise UnsupportedFormatError(format_name) from None


def is_input_capable(fmt: PandocFormat) -> bool:
    return FORMAT_TABLE[fmt].input_capable


def requires_file_output(fmt: PandocFormat) -> bool:
    """Check if a format cannot be returned inline and must be written to a file."""
    return FORMAT_TABLE[fmt].requires_file_output


def validate_input_format(format_name: str) -> PandocFormat:
    """Validate a format used in input position.

    Raises:
        UnsupportedFormatError: If the token is unknown, or known but
            output-only (the message then says "for input").
    """
    fmt = normalize_format(format_name)
    if not is_input_capable(fmt):
        raise UnsupportedFormatError(format_name, "for input")
    return fmt


def validate_output_format(format_name: str) -> PandocFormat:
    """Validate a format used in output position. Every known format is accepted."""
    return normalize_format(format_name)


def get_supported_formats() -> list[str]:
    """Get all supported format tokens, input formats first."""
    return [info.token for info in FORMAT_TABLE.values()]


def get_input_formats() -> list[str]:
    """Get format tokens that can be used as input."""
    return [info.token for info in FORMAT_TABLE.values() if info.input_capable]


def get_file_output_formats() -> list[str]:
    """Get format tokens that require an output file."""
    return [info.token for info in FORMAT_TABLE.values() if info.requires_file_output]
