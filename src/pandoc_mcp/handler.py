"""
Conversion request handling.

Runs a single request through validation, defaults-file checking, filter
resolution and conversion. The first error raised by any step propagates
unchanged.
"""

import os
import time
from typing import Optional

from .converters.pandoc import ConversionOptions, PandocConverter
from .defaults import validate_defaults_file
from .filters import resolve_filter_paths
from .formats import requires_file_output
from .logging_config import (
    ValidationError,
    get_logger,
    log_conversion_complete,
    log_conversion_start,
)
from .validation import ConversionParams, validate_conversion_params

logger = get_logger("handler")


async def handle_conversion(
    params: ConversionParams, converter: Optional[PandocConverter] = None
) -> str:
    """
    Handle one conversion request.

    Args:
        params: Request parameters
        converter: Converter to use (a default PandocConverter if None)

    Returns:
        The converted text for inline conversions, or a confirmation
        message naming both files for file conversions

    Raises:
        ValidationError, UnsupportedFormatError, DefaultsFileError,
        FilterNotFoundError, PandocNotFoundError, ConversionError
    """
    input_format, output_format = validate_conversion_params(params)

    # File-to-file conversion writes to output_file, whatever the format.
    if not params.contents and not params.output_file:
        raise ValidationError(
            "Converting 'input_file' requires 'output_file' to be specified."
        )

    defaults_file_dir: Optional[str] = None
    if params.defaults_file:
        validate_defaults_file(params.defaults_file)
        defaults_file_dir = os.path.dirname(params.defaults_file) or "."

    resolved_filters: list[str] = []
    if params.filters:
        resolved_filters = resolve_filter_paths(params.filters, defaults_file_dir)

    options = ConversionOptions(
        reference_doc=params.reference_doc,
        defaults_file=params.defaults_file,
        filters=resolved_filters,
    )
    converter = converter or PandocConverter()

    log_conversion_start(
        logger,
        params.input_file or "<inline content>",
        input_format.value,
        output_format.value,
        reference_doc=params.reference_doc,
        defaults_file=params.defaults_file,
        filters=", ".join(resolved_filters),
    )
    start = time.monotonic()

    try:
        if params.contents and requires_file_output(output_format):
            await converter.convert_text(
                params.contents, input_format, output_format, options, output_file=params.output_file
            )
            result = f"Successfully converted contents to {params.output_file}"
        elif params.contents:
            result = await converter.convert_text(
                params.contents, input_format, output_format, options
            )
        else:
            await converter.convert_file(
                params.input_file, params.output_file, input_format, output_format, options
            )
            result = f"Successfully converted {params.input_file} to {params.output_file}"
    except Exception:
        log_conversion_complete(logger, False, time.monotonic() - start)
        raise

    log_conversion_complete(logger, True, time.monotonic() - start, output_file=params.output_file)
    return result
