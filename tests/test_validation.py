"""Tests for conversion parameter validation."""

import pytest

from pandoc_mcp.formats import PandocFormat
from pandoc_mcp.logging_config import UnsupportedFormatError, ValidationError
from pandoc_mcp.validation import ConversionParams, validate_conversion_params


class TestValidateConversionParams:
    """Tests for validate_conversion_params."""

    def test_inline_content(self):
        """Test valid inline conversion."""
        params = ConversionParams(contents="# Hi", input_format="markdown", output_format="html")

        assert validate_conversion_params(params) == (PandocFormat.MARKDOWN, PandocFormat.HTML)

    def test_defaults_to_markdown(self):
        """Test formats default to markdown."""
        params = ConversionParams(contents="text")

        assert validate_conversion_params(params) == (
            PandocFormat.MARKDOWN,
            PandocFormat.MARKDOWN,
        )

    def test_both_sources(self):
        """Test contents and input_file together are rejected."""
        params = ConversionParams(contents="# Hi", input_file="in.md")

        with pytest.raises(ValidationError) as exc_info:
            validate_conversion_params(params)

        assert "Cannot specify both" in str(exc_info.value)

    def test_neither_source(self):
        """Test a request without contents or input_file is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_conversion_params(ConversionParams())

        assert "Must specify either" in str(exc_info.value)

    def test_empty_strings_count_as_absent(self):
        """Test empty contents and input_file are treated as missing."""
        with pytest.raises(ValidationError, match="Must specify either"):
            validate_conversion_params(ConversionParams(contents="", input_file=""))

    def test_source_checked_before_formats(self):
        """Test the source check wins over a bad format."""
        params = ConversionParams(contents="x", input_file="y", input_format="bogus")

        with pytest.raises(ValidationError):
            validate_conversion_params(params)

    def test_invalid_input_format(self):
        """Test unknown input formats propagate UnsupportedFormatError."""
        params = ConversionParams(contents="x", input_format="invalid")

        with pytest.raises(UnsupportedFormatError):
            validate_conversion_params(params)

    def test_pdf_input_rejected(self):
        """Test PDF as input is rejected as unsupported for input."""
        params = ConversionParams(input_file="doc.pdf", input_format="pdf", output_file="out.md")

        with pytest.raises(UnsupportedFormatError, match="for input"):
            validate_conversion_params(params)

    def test_invalid_output_format(self):
        """Test unknown output formats propagate UnsupportedFormatError."""
        params = ConversionParams(contents="x", output_format="mp3")

        with pytest.raises(UnsupportedFormatError):
            validate_conversion_params(params)

    @pytest.mark.parametrize("fmt", ["pdf", "docx", "epub", "odt"])
    def test_binary_output_requires_output_file(self, fmt):
        """Test binary output formats need output_file."""
        params = ConversionParams(contents="# Hi", output_format=fmt)

        with pytest.raises(ValidationError) as exc_info:
            validate_conversion_params(params)

        assert "requires 'output_file'" in str(exc_info.value)
        assert fmt in str(exc_info.value)

    def test_binary_output_with_output_file(self):
        """Test binary output succeeds when output_file is given."""
        params = ConversionParams(contents="# Hi", output_format="docx", output_file="out.docx")

        assert validate_conversion_params(params) == (PandocFormat.MARKDOWN, PandocFormat.DOCX)

    def test_txt_alias(self):
        """Test the txt alias resolves to plain in both positions."""
        params = ConversionParams(contents="hi", input_format="txt", output_format="TXT")

        assert validate_conversion_params(params) == (PandocFormat.PLAIN, PandocFormat.PLAIN)
