"""Dependency verification module for pandoc-mcp.

This module provides functions to verify that the pandoc binary and a
compatible Python interpreter are available.
"""

import shutil
import sys
from typing import Dict, Optional, Tuple

from .config import config
from .converters.pandoc import PandocConverter
from .logging_config import ConverterError, DependencyError

PANDOC_INSTALL_HINT = (
    "Pandoc not found. Install with:\n"
    "  Ubuntu/Debian: sudo apt install pandoc\n"
    "  Fedora/RHEL: sudo dnf install pandoc\n"
    "  macOS: brew install pandoc\n"
    "  Windows: Download from https://pandoc.org/installing.html\n"
    "or set PANDOC_PATH to the pandoc binary."
)


async def check_pandoc(pandoc_path: Optional[str] = None) -> Tuple[bool, str]:
    """Check if pandoc is installed and return version information.

    Returns:
        Tuple of (is_installed: bool, message: str)
    """
    pandoc_path = pandoc_path or config.pandoc_path
    if not shutil.which(pandoc_path):
        return False, PANDOC_INSTALL_HINT

    try:
        version = await PandocConverter(pandoc_path).get_pandoc_version()
    except ConverterError as e:
        return False, f"{PANDOC_INSTALL_HINT}\n({e})"

    return True, version


async def check_python_version() -> Tuple[bool, str]:
    """Check if Python version meets requirements.

    Returns:
        Tuple of (is_compatible: bool, message: str)
    """
    py_version = sys.version_info
    py_ok = py_version >= (3, 10)

    message = f"Python {py_version.major}.{py_version.minor}.{py_version.micro}"
    if not py_ok:
        message += " - Requires Python 3.10+"

    return py_ok, message


async def verify_dependencies() -> Dict[str, Dict]:
    """Verify all system dependencies and return status.

    Raises:
        DependencyError: If any critical dependency is missing

    Returns:
        Dictionary with dependency status for:
        - pandoc: installed status and message
        - python: version compatibility and message
    """
    results = {}

    pandoc_ok, pandoc_msg = await check_pandoc()
    results["pandoc"] = {"installed": pandoc_ok, "message": pandoc_msg}

    py_ok, py_msg = await check_python_version()
    results["python"] = {"compatible": py_ok, "message": py_msg}

    if not pandoc_ok:
        raise DependencyError(f"Pandoc required: {pandoc_msg}")

    if not py_ok:
        raise DependencyError(f"Python version too old: {py_msg}")

    return results
