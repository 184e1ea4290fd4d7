"""Tests for the format registry."""

import pytest

from pandoc_mcp.formats import (
    FORMAT_TABLE,
    PandocFormat,
    get_file_output_formats,
    get_input_formats,
    get_supported_formats,
    is_input_capable,
    normalize_format,
    requires_file_output,
    validate_input_format,
    validate_output_format,
)
from pandoc_mcp.logging_config import UnsupportedFormatError


class TestNormalizeFormat:
    """Tests for token normalization."""

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("markdown", PandocFormat.MARKDOWN),
            ("html", PandocFormat.HTML),
            ("plain", PandocFormat.PLAIN),
            ("ipynb", PandocFormat.IPYNB),
            ("odt", PandocFormat.ODT),
            ("pdf", PandocFormat.PDF),
            ("docx", PandocFormat.DOCX),
            ("rst", PandocFormat.RST),
            ("latex", PandocFormat.LATEX),
            ("epub", PandocFormat.EPUB),
        ],
    )
    def test_canonical_tokens(self, token, expected):
        """Test every canonical token maps to its format."""
        assert normalize_format(token) is expected

    def test_case_insensitive(self):
        """Test tokens are matched regardless of case."""
        assert normalize_format("MARKDOWN") is PandocFormat.MARKDOWN
        assert normalize_format("Html") is PandocFormat.HTML
        assert normalize_format("DocX") is PandocFormat.DOCX

    def test_txt_alias(self):
        """Test the legacy txt alias maps to plain."""
        assert normalize_format("txt") is PandocFormat.PLAIN
        assert normalize_format("TXT") is PandocFormat.PLAIN

    @pytest.mark.parametrize("token", ["invalid", "mp4", "", "mark down", "Word"])
    def test_unknown_token(self, token):
        """Test unknown tokens are rejected."""
        with pytest.raises(UnsupportedFormatError):
            normalize_format(token)

    def test_error_echoes_raw_token(self):
        """Test the error reports the token as given, not lower-cased."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            normalize_format("FooBar")

        assert exc_info.value.format_name == "FooBar"
        assert '"FooBar"' in str(exc_info.value)

    def test_enum_value_is_pandoc_token(self):
        """Test enum values are the strings passed to pandoc."""
        assert PandocFormat.PLAIN.value == "plain"
        assert PandocFormat.MARKDOWN == "markdown"


class TestInputOutputValidation:
    """Tests for position-specific validation."""

    def test_pdf_rejected_for_input(self):
        """Test PDF cannot be used as input."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            validate_input_format("pdf")

        assert "for input" in str(exc_info.value)
        assert exc_info.value.context == "for input"

    def test_pdf_accepted_for_output(self):
        """Test PDF can be used as output."""
        assert validate_output_format("pdf") is PandocFormat.PDF

    def test_unknown_input_not_reported_as_input_error(self):
        """Test unknown formats get the plain unsupported message."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            validate_input_format("invalid")

        assert "for input" not in str(exc_info.value)

    @pytest.mark.parametrize("token", get_input_formats())
    def test_input_formats_accepted(self, token):
        """Test every input format passes input validation."""
        assert validate_input_format(token).value == token


class TestCapabilities:
    """Tests for per-format capabilities."""

    @pytest.mark.parametrize("fmt", ["pdf", "docx", "epub", "odt"])
    def test_requires_file_output(self, fmt):
        """Test binary formats require an output file."""
        assert requires_file_output(PandocFormat(fmt)) is True

    @pytest.mark.parametrize("fmt", ["markdown", "html", "plain", "latex", "rst"])
    def test_text_formats_inline(self, fmt):
        """Test text formats can be returned inline."""
        assert requires_file_output(PandocFormat(fmt)) is False

    def test_only_pdf_is_output_only(self):
        """Test PDF is the only format that is not input-capable."""
        output_only = [fmt for fmt in PandocFormat if not is_input_capable(fmt)]
        assert output_only == [PandocFormat.PDF]

    def test_table_covers_every_format(self):
        """Test every enum member has a capability record."""
        assert set(FORMAT_TABLE) == set(PandocFormat)
        for fmt, info in FORMAT_TABLE.items():
            assert info.token == fmt.value

    def test_table_is_read_only(self):
        """Test the capability table cannot be modified at runtime."""
        with pytest.raises(TypeError):
            FORMAT_TABLE[PandocFormat.PDF] = FORMAT_TABLE[PandocFormat.HTML]

        assert FORMAT_TABLE[PandocFormat.PDF].input_capable is False


class TestFormatLists:
    """Tests for format listing helpers."""

    def test_supported_formats(self):
        """Test all ten formats are listed, PDF last."""
        formats = get_supported_formats()
        assert len(formats) == 10
        assert formats[-1] == "pdf"
        assert "plain" in formats

    def test_input_formats_exclude_pdf(self):
        """Test input formats are all formats but PDF."""
        assert "pdf" not in get_input_formats()
        assert get_input_formats() == get_supported_formats()[:-1]

    def test_file_output_formats(self):
        """Test the file output formats."""
        assert sorted(get_file_output_formats()) == ["docx", "epub", "odt", "pdf"]
