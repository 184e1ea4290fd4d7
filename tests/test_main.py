"""Tests for the command-line entry point."""

from unittest.mock import patch

import pytest

from pandoc_mcp.__main__ import main, parse_args
from pandoc_mcp.config import config


@pytest.fixture
def server_main():
    with patch("pandoc_mcp.__main__.server_main") as mock_main:
        yield mock_main


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test no arguments means stdio with configured defaults."""
        args = parse_args([])

        assert args.http is False
        assert args.transport is None
        assert args.host is None
        assert args.port is None

    def test_invalid_transport(self):
        """Test unknown transports are rejected by argparse."""
        with pytest.raises(SystemExit):
            parse_args(["--transport", "websocket"])

    def test_version(self, capsys):
        """Test --version prints the package version."""
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "pandoc-mcp" in capsys.readouterr().out


class TestMain:
    """Tests for transport selection."""

    def test_stdio_by_default(self, server_main):
        """Test the server runs over stdio by default."""
        assert main([]) == 0

        server_main.assert_called_once_with(transport="stdio", host=None, port=None)

    def test_http_flag(self, server_main):
        """Test --http selects the streamable HTTP transport."""
        main(["--http", "--host", "0.0.0.0", "--port", "8080"])

        server_main.assert_called_once_with(transport="streamable-http", host="0.0.0.0", port=8080)

    def test_explicit_transport_wins(self, server_main):
        """Test --transport overrides --http."""
        main(["--http", "--transport", "sse"])

        assert server_main.call_args.kwargs["transport"] == "sse"

    def test_log_level(self, server_main, monkeypatch):
        """Test --log-level updates the configuration."""
        monkeypatch.setattr(config, "log_level", "INFO")

        main(["--log-level", "DEBUG"])

        assert config.log_level == "DEBUG"
