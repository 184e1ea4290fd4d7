"""Configuration management for the Pandoc MCP server."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class PandocConfig:
    """Configuration settings for the server."""

    pandoc_path: str = "pandoc"
    max_concurrent: int = field(default_factory=lambda: min(4, os.cpu_count() or 4))
    timeout: int = 300

    host: str = "localhost"
    port: int = 3000

    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {self.max_concurrent}")

        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls) -> "PandocConfig":
        """Load configuration from environment variables."""
        return cls(
            pandoc_path=os.environ.get("PANDOC_PATH") or "pandoc",
            max_concurrent=int(
                os.environ.get("PANDOC_MCP_MAX_CONCURRENT", min(4, os.cpu_count() or 4))
            ),
            timeout=int(os.environ.get("PANDOC_MCP_TIMEOUT", 300)),
            host=os.environ.get("HOST", "localhost"),
            port=int(os.environ.get("PORT", 3000)),
            log_level=os.environ.get("PANDOC_MCP_LOG_LEVEL", "INFO"),
            log_file=Path(p) if (p := os.environ.get("PANDOC_MCP_LOG_FILE")) else None,
        )


config = PandocConfig.from_env()
