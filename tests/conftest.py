"""Pytest configuration and fixtures for pandoc-mcp tests."""

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_markdown_file(temp_dir: Path) -> Path:
    """Create a sample markdown file for testing."""
    md_file = temp_dir / "sample.md"
    md_file.write_text("# Hello World\n\nThis is **bold** text.\n")
    return md_file


@pytest.fixture
def defaults_file(temp_dir: Path) -> Path:
    """Create a valid defaults file."""
    path = temp_dir / "defaults" / "defaults.yaml"
    path.parent.mkdir()
    path.write_text("standalone: true\nmetadata:\n  title: Test\n")
    return path


@pytest.fixture
def fake_pandoc(temp_dir: Path) -> Callable[[str], str]:
    """Factory writing an executable shell script that stands in for pandoc.

    The script body receives pandoc's arguments as "$@".
    """

    def _make(body: str, name: str = "pandoc") -> str:
        script = temp_dir / "bin" / name
        script.parent.mkdir(exist_ok=True)
        script.write_text(f"#!/bin/sh\n{body}\n")
        os.chmod(script, 0o755)
        return str(script)

    return _make
