"""
Pandoc filter path resolution.

A filter name is looked up in these locations, in order:
1. The name itself, if it is an absolute path
2. The current working directory
3. The directory of the defaults file (if provided)
4. ``~/.pandoc/filters/``
"""

import os
import stat
import sys
from pathlib import Path
from typing import Iterator, Optional, Sequence

from .logging_config import FilterNotFoundError, get_logger

logger = get_logger("filters")

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def get_home_dir() -> str:
    """Get the user's home directory from the environment."""
    if sys.platform == "win32":
        return os.environ.get("USERPROFILE") or os.environ.get("HOME") or "C:\\"
    return os.environ.get("HOME") or "/"


def get_pandoc_filters_dir() -> str:
    """Get the default per-user Pandoc filters directory."""
    return os.path.join(get_home_dir(), ".pandoc", "filters")


def _join_under(base: str, name: str) -> str:
    # An absolute name is looked up beneath base rather than replacing it.
    path = Path(name)
    if path.is_absolute():
        path = path.relative_to(path.anchor)
    return str(Path(base) / path)


def _candidate_paths(filter_name: str, defaults_file_dir: Optional[str]) -> Iterator[str]:
    if os.path.isabs(filter_name):
        yield filter_name

    yield _join_under(os.getcwd(), filter_name)

    if defaults_file_dir:
        yield _join_under(defaults_file_dir, filter_name)

    yield _join_under(get_pandoc_filters_dir(), filter_name)


def _make_executable(file_path: str) -> None:
    """Add the executable bits to a filter. Failures are logged, not raised."""
    if sys.platform == "win32":
        return

    try:
        mode = os.stat(file_path).st_mode
        if mode & _EXEC_BITS != _EXEC_BITS:
            os.chmod(file_path, mode | _EXEC_BITS)
    except OSError as e:
        logger.warning(f"Could not make filter executable: {file_path}: {e}")


def resolve_filter_path(filter_name: str, defaults_file_dir: Optional[str] = None) -> str:
    """
    Resolve the full path to a Pandoc filter.

    Args:
        filter_name: The filter name or path
        defaults_file_dir: Optional directory of the defaults file

    Returns:
        The first candidate path that is an existing regular file

    Raises:
        FilterNotFoundError: If no candidate exists. The error lists every
            path that was tried, in search order.
    """
    search_paths: list[str] = []

    for candidate in _candidate_paths(filter_name, defaults_file_dir):
        search_paths.append(candidate)
        if os.path.isfile(candidate):
            _make_executable(candidate)
            logger.debug(f"Resolved filter {filter_name!r} -> {candidate}")
            return candidate

    raise FilterNotFoundError(filter_name, search_paths)


def resolve_filter_paths(
    filter_names: Sequence[str], defaults_file_dir: Optional[str] = None
) -> list[str]:
    """Resolve several filters in order, failing on the first one not found."""
    return [resolve_filter_path(name, defaults_file_dir) for name in filter_names]
