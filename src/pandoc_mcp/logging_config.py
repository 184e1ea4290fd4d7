"""
Logging configuration and error hierarchy for the Pandoc MCP server.

This module provides:
- Structured logging setup with console and file handlers
- Custom exception hierarchy for different error types
- Error categorization (user vs technical errors)
"""

import logging
import sys
from typing import Any, Dict, Optional, Sequence


class ConverterError(Exception):
    """Base error for all conversion operations."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} (Suggestion: {self.suggestion})"
        return self.message


class UserError(ConverterError):
    """Error caused by user input/action."""

    pass


class SystemError(ConverterError):
    """Error caused by system/environment issues."""

    def __init__(
        self,
        message: str,
        technical_details: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        self.technical_details = technical_details
        super().__init__(message, suggestion)


class DependencyError(SystemError):
    """Error when required dependency is missing."""

    pass


class PandocNotFoundError(DependencyError):
    """Error when the pandoc binary cannot be located or executed."""

    def __init__(self, message: Optional[str] = None, technical_details: Optional[str] = None):
        super().__init__(
            message
            or (
                "Pandoc not found. Please install Pandoc from https://pandoc.org/installing.html "
                "or set the PANDOC_PATH environment variable to the location of the pandoc binary."
            ),
            technical_details=technical_details,
        )


class ConversionError(ConverterError):
    """Error during conversion process."""

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        suggestion: Optional[str] = None,
    ):
        self.exit_code = exit_code
        super().__init__(message, suggestion)


class UnsupportedFormatError(UserError):
    """Error when requested format is not supported."""

    def __init__(self, format_name: str, context: str = ""):
        self.format_name = format_name
        self.context = context
        ctx = f" {context}" if context else ""
        super().__init__(
            f'Unsupported format: "{format_name}"{ctx}',
            suggestion=(
                "Supported formats are: markdown, html, txt, ipynb, odt, pdf, docx, rst, "
                "latex, epub. PDF cannot be used as an input format."
            ),
        )


class ValidationError(UserError):
    """Error when request parameters are invalid."""

    pass


class FilterNotFoundError(UserError):
    """Error when a Pandoc filter cannot be found in any search location."""

    def __init__(self, filter_name: str, search_paths: Sequence[str]):
        self.filter_name = filter_name
        self.search_paths = list(search_paths)
        searched = "\n".join(f"  - {p}" for p in self.search_paths)
        super().__init__(
            f'Filter "{filter_name}" not found. Searched in:\n{searched}',
            suggestion=(
                "Ensure the filter exists in one of the searched paths and is executable, "
                "or pass the full path to the filter. The default filter directory is "
                "~/.pandoc/filters/"
            ),
        )


class DefaultsFileError(UserError):
    """Error when a Pandoc defaults file is missing or invalid."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        self.file_path = file_path
        path = f" ({file_path})" if file_path else ""
        super().__init__(f"Defaults file error{path}: {message}")


def setup_logging(
    level: int | str = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging configuration for the server.

    Console output always goes to stderr: stdout carries the MCP stdio
    transport.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to log file
        format_string: Optional custom format string

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("pandoc_mcp")
    logger.setLevel(level)
    logger.handlers.clear()

    fmt = format_string or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., 'server', 'filters')

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(f"pandoc_mcp.{name}")


def log_conversion_start(
    logger: logging.Logger, source: str, input_format: str, output_format: str, **kwargs: Any
) -> None:
    """Log the start of a conversion operation.

    Args:
        logger: Logger instance
        source: Input file path, or a description of inline content
        input_format: Input format token
        output_format: Output format token
        **kwargs: Additional metadata (only non-empty values are logged)
    """
    logger.info(f"Starting conversion: {source} ({input_format} -> {output_format})")
    for key, value in kwargs.items():
        if value:
            logger.debug(f"  {key}: {value}")


def log_conversion_complete(
    logger: logging.Logger,
    success: bool,
    duration_seconds: float,
    output_file: Optional[str] = None,
    **kwargs: Dict[str, Any],
) -> None:
    """Log the completion of a conversion operation.

    Args:
        logger: Logger instance
        success: Whether conversion succeeded
        duration_seconds: Duration in seconds
        output_file: Path to output file (if any)
        **kwargs: Additional metadata
    """
    status = "✓ SUCCESS" if success else "✗ FAILED"
    logger.info(f"{status} - Conversion completed in {duration_seconds:.2f}s")
    if output_file:
        logger.info(f"  Output: {output_file}")
    for key, value in kwargs.items():
        logger.info(f"  {key}: {value}")


def log_error(logger: logging.Logger, error: Exception, include_traceback: bool = True) -> None:
    """Log an error with appropriate formatting.

    Args:
        logger: Logger instance
        error: Exception to log
        include_traceback: Whether to include stack trace
    """
    logger.error(f"Error occurred: {error}")

    if isinstance(error, ConverterError) and error.suggestion:
        logger.info(f"Suggestion: {error.suggestion}")

    if isinstance(error, SystemError) and error.technical_details:
        logger.debug(f"Technical details: {error.technical_details}")

    if include_traceback:
        import traceback

        logger.debug("\n".join(traceback.format_exception(type(error), error, error.__traceback__)))
