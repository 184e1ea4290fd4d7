"""Validation of conversion request parameters."""

from dataclasses import dataclass
from typing import Optional

from .formats import (
    PandocFormat,
    requires_file_output,
    validate_input_format,
    validate_output_format,
)
from .logging_config import ValidationError


@dataclass
class ConversionParams:
    """Raw parameters of a single conversion request."""

    contents: Optional[str] = None
    input_file: Optional[str] = None
    input_format: str = "markdown"
    output_format: str = "markdown"
    output_file: Optional[str] = None
    reference_doc: Optional[str] = None
    defaults_file: Optional[str] = None
    filters: Optional[list[str]] = None


def validate_conversion_params(params: ConversionParams) -> tuple[PandocFormat, PandocFormat]:
    """
    Validate conversion parameters and return the validated formats.

    Checks run in a fixed order and the first violation wins. Empty strings
    count as absent.

    Args:
        params: Request parameters

    Returns:
        Tuple of (input_format, output_format)

    Raises:
        ValidationError: If the request shape is invalid
        UnsupportedFormatError: If a format is unknown or not usable as input
    """
    if params.contents and params.input_file:
        raise ValidationError(
            "Cannot specify both 'contents' and 'input_file'. Please provide only one."
        )

    if not params.contents and not params.input_file:
        raise ValidationError("Must specify either 'contents' or 'input_file' for conversion.")

    input_format = validate_input_format(params.input_format)
    output_format = validate_output_format(params.output_format)

    if requires_file_output(output_format) and not params.output_file:
        raise ValidationError(
            f"Output format '{output_format.value}' requires 'output_file' to be specified."
        )

    return input_format, output_format
