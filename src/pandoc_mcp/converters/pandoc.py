"""
Document converter using the Pandoc CLI.

Content is either piped through pandoc's stdin/stdout or converted
file-to-file with pandoc writing the output itself.
"""

import errno
from dataclasses import dataclass, field
from typing import Optional

from ..async_utils import (
    ConcurrencyLimiter,
    SubprocessError,
    SubprocessTimeoutError,
    concurrency_limiter,
    safe_subprocess,
)
from ..config import config
from ..formats import PandocFormat
from ..logging_config import ConversionError, PandocNotFoundError, get_logger

logger = get_logger("converters.pandoc")

PDF_ENGINE = "xelatex"
PDF_MARGIN = "geometry:margin=1in"
VERSION_TIMEOUT = 30

_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR, errno.EACCES, errno.ENOEXEC}


@dataclass
class ConversionOptions:
    """Optional pandoc arguments for a conversion."""

    reference_doc: Optional[str] = None
    defaults_file: Optional[str] = None
    filters: list[str] = field(default_factory=list)
    extra_args: list[str] = field(default_factory=list)


def _is_pandoc_missing(error: OSError) -> bool:
    """Check whether a spawn failure means the binary could not be located or executed."""
    if isinstance(error, (FileNotFoundError, PermissionError, NotADirectoryError)):
        return True
    if error.errno in _NOT_FOUND_ERRNOS:
        return True
    message = str(error).lower()
    return "not found" in message or "no such file" in message or "enoent" in message


class PandocConverter:
    """Convert documents between formats using pandoc."""

    def __init__(
        self,
        pandoc_path: Optional[str] = None,
        timeout: Optional[float] = None,
        limiter: Optional[ConcurrencyLimiter] = None,
    ):
        self.pandoc_path = pandoc_path or config.pandoc_path
        self.timeout = timeout if timeout is not None else config.timeout
        self.limiter = limiter or concurrency_limiter

    @staticmethod
    def build_args(
        input_format: PandocFormat,
        output_format: PandocFormat,
        options: Optional[ConversionOptions] = None,
    ) -> list[str]:
        """Build pandoc command-line arguments (without the binary itself)."""
        args = ["-f", input_format.value, "-t", output_format.value]

        if output_format == PandocFormat.PDF:
            args.append(f"--pdf-engine={PDF_ENGINE}")
            args.extend(["-V", PDF_MARGIN])

        if options is None:
            return args

        if options.reference_doc:
            args.extend(["--reference-doc", options.reference_doc])

        if options.defaults_file:
            args.extend(["--defaults", options.defaults_file])

        for filter_path in options.filters:
            args.extend(["--filter", filter_path])

        args.extend(options.extra_args)

        return args

    async def convert_text(
        self,
        content: str,
        input_format: PandocFormat,
        output_format: PandocFormat,
        options: Optional[ConversionOptions] = None,
        output_file: Optional[str] = None,
    ) -> str:
        """
        Convert text content from one format to another.

        Args:
            content: The content to convert, written to pandoc's stdin
            input_format: The input format
            output_format: The output format
            options: Additional conversion options
            output_file: If set, pandoc writes the result here instead of stdout

        Returns:
            The converted content ("" when output_file is set)

        Raises:
            PandocNotFoundError: If pandoc cannot be executed
            ConversionError: If pandoc fails or times out
        """
        args = self.build_args(input_format, output_format, options)
        if output_file:
            args.extend(["-o", output_file])
        return await self._run(args, input_text=content)

    async def convert_file(
        self,
        input_file: str,
        output_file: str,
        input_format: PandocFormat,
        output_format: PandocFormat,
        options: Optional[ConversionOptions] = None,
    ) -> None:
        """
        Convert a file from one format to another. Pandoc writes output_file itself.

        Raises:
            PandocNotFoundError: If pandoc cannot be executed
            ConversionError: If pandoc fails or times out
        """
        args = self.build_args(input_format, output_format, options)
        args.extend([input_file, "-o", output_file])
        await self._run(args)
        logger.info(f"Converted {input_file} -> {output_file}")

    async def _run(self, args: list[str], input_text: Optional[str] = None) -> str:
        cmd = [self.pandoc_path, *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        async with self.limiter:
            try:
                _, stdout, _ = await safe_subprocess(
                    cmd, timeout=self.timeout, input_text=input_text
                )
            except SubprocessError as e:
                detail = e.stderr.strip() or f"pandoc exited with code {e.returncode}"
                raise ConversionError(
                    f"Pandoc conversion failed: {detail}", exit_code=e.returncode
                ) from e
            except SubprocessTimeoutError as e:
                raise ConversionError(
                    f"Pandoc conversion timed out after {e.timeout}s",
                    suggestion="Large documents may take longer. Raise PANDOC_MCP_TIMEOUT.",
                ) from e
            except OSError as e:
                if _is_pandoc_missing(e):
                    raise PandocNotFoundError(technical_details=str(e)) from e
                raise ConversionError(f"Pandoc conversion failed: {e}") from e

        return stdout

    async def is_pandoc_available(self) -> bool:
        """Check if pandoc can be executed."""
        try:
            await safe_subprocess([self.pandoc_path, "--version"], timeout=VERSION_TIMEOUT)
            return True
        except (OSError, SubprocessError, SubprocessTimeoutError):
            return False

    async def get_pandoc_version(self) -> str:
        """
        Get the pandoc version line, e.g. ``pandoc 3.1.11``.

        Raises:
            PandocNotFoundError: If pandoc cannot be executed
            ConversionError: If ``pandoc --version`` fails
        """
        try:
            _, stdout, _ = await safe_subprocess(
                [self.pandoc_path, "--version"], timeout=VERSION_TIMEOUT
            )
        except OSError as e:
            if _is_pandoc_missing(e):
                raise PandocNotFoundError(technical_details=str(e)) from e
            raise ConversionError(f"Failed to query pandoc version: {e}") from e
        except (SubprocessError, SubprocessTimeoutError) as e:
            raise ConversionError(f"Failed to query pandoc version: {e}") from e

        lines = stdout.splitlines()
        return lines[0].strip() if lines else ""
