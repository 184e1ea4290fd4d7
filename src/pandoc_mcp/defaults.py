"""Validation of Pandoc defaults (YAML) files."""

from pathlib import Path
from typing import Any

import yaml

from .logging_config import DefaultsFileError, get_logger

logger = get_logger("defaults")


def _load_defaults(file_path: str) -> dict[str, Any]:
    path = Path(file_path)
    if not path.is_file():
        raise DefaultsFileError("File not found", file_path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            parsed = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DefaultsFileError(f"Failed to parse YAML: {e}", file_path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise DefaultsFileError(f"Failed to read file: {e}", file_path) from e

    if parsed is None:
        raise DefaultsFileError("Defaults file is empty", file_path)

    if not isinstance(parsed, dict):
        raise DefaultsFileError(
            "Defaults file must contain a YAML object/dictionary, not a list or primitive value",
            file_path,
        )

    # from/to come from the request's input_format/output_format.
    if "from" in parsed and "to" in parsed:
        raise DefaultsFileError(
            "Defaults file should not specify both 'from' and 'to' formats. "
            "These will be provided via command-line arguments.",
            file_path,
        )

    return parsed


def validate_defaults_file(file_path: str) -> bool:
    """
    Validate a Pandoc defaults file.

    Args:
        file_path: Path to the defaults file

    Returns:
        True if the file is valid

    Raises:
        DefaultsFileError: If the file is missing, empty, not a mapping,
            not valid YAML, or sets both 'from' and 'to'
    """
    _load_defaults(file_path)
    logger.debug(f"Defaults file validated: {file_path}")
    return True


def read_defaults_file(file_path: str) -> dict[str, Any]:
    """Validate a defaults file and return its parsed content."""
    return _load_defaults(file_path)
