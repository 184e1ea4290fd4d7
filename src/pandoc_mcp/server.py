"""MCP Server for Pandoc document conversion.

This module provides a FastMCP-based MCP server exposing pandoc conversions
over stdio or HTTP (SSE / streamable HTTP).
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from . import __version__
from .config import config
from .converters.pandoc import PandocConverter
from .deps import verify_dependencies
from .formats import get_file_output_formats, get_input_formats, get_supported_formats
from .handler import handle_conversion
from .logging_config import (
    ConverterError,
    DependencyError,
    get_logger,
    log_error,
    setup_logging,
)
from .validation import ConversionParams

logger = get_logger("server")

TRANSPORTS = ("stdio", "sse", "streamable-http")
LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")

CORS_ALLOW_ORIGINS = ["*"]
CORS_ALLOW_METHODS = ["GET", "POST", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "X-Session-Id", "Mcp-Session-Id", "Mcp-Protocol-Version"]
CORS_EXPOSE_HEADERS = ["Mcp-Session-Id"]


class GracefulShutdown:
    """Handle graceful shutdown of the MCP server."""

    def __init__(self):
        self._shutdown = False
        self._tasks: set[asyncio.Task] = set()

    def is_shutting_down(self) -> bool:
        """Check if shutdown has been initiated."""
        return self._shutdown

    def initiate_shutdown(self):
        """Initiate graceful shutdown."""
        if not self._shutdown:
            self._shutdown = True
            logger.info("Shutdown signal received, cleaning up...")

    def register_task(self, task: asyncio.Task):
        """Register a task to be tracked during shutdown."""
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._tasks.discard(t))

    async def wait_for_tasks(self, timeout: float = 10.0):
        """Wait for registered tasks to complete with timeout."""
        if not self._tasks:
            return

        logger.info(f"Waiting for {len(self._tasks)} conversions to complete...")
        try:
            await asyncio.wait_for(
                asyncio.gather(*self._tasks, return_exceptions=True), timeout=timeout
            )
            logger.info("All conversions completed")
        except asyncio.TimeoutError:
            logger.warning(f"Timeout waiting for conversions after {timeout}s")


shutdown_handler = GracefulShutdown()


@asynccontextmanager
async def server_lifespan():
    """Manage server startup and shutdown.

    Wraps a whole server run (not a single MCP session, which in stateless
    HTTP mode is one request). It handles:
    - Pandoc availability check at startup (a missing pandoc is logged,
      each conversion then reports it)
    - Graceful shutdown of running conversions
    """
    try:
        logger.info("Starting Pandoc MCP Server...")
        try:
            deps = await verify_dependencies()
            logger.info(
                f"Dependencies verified: "
                f"{deps['pandoc']['message']}, {deps['python']['message']}"
            )
        except DependencyError as e:
            logger.warning(f"Dependency check failed: {e}")

        yield

    finally:
        logger.info("Shutting down server...")
        shutdown_handler.initiate_shutdown()
        await shutdown_handler.wait_for_tasks()
        logger.info("Server shutdown complete")


mcp = FastMCP(
    name="pandoc-mcp",
    instructions=(
        "MCP server for document conversion with Pandoc. "
        "Supports markdown, html, txt, ipynb, odt, pdf, docx, rst, latex and epub. "
        "PDF can only be used as an output format."
    ),
    stateless_http=True,
)


@mcp.tool(name="convert-contents")
async def convert_contents(
    contents: Optional[str] = None,
    input_file: Optional[str] = None,
    input_format: str = "markdown",
    output_format: str = "markdown",
    output_file: Optional[str] = None,
    reference_doc: Optional[str] = None,
    defaults_file: Optional[str] = None,
    filters: Optional[list[str]] = None,
) -> str:
    """Convert document contents between formats using Pandoc.

    Supports: markdown, html, txt, ipynb, odt, pdf, docx, rst, latex, epub.
    PDF can only be used as output format. Binary formats (PDF, DOCX, EPUB, ODT)
    require output_file.

    Args:
        contents: The content to convert (use this OR input_file, not both)
        input_file: Path to input file (use this OR contents, not both)
        input_format: Input format (default: markdown)
        output_format: Output format (default: markdown)
        output_file: Path to output file (required for PDF, DOCX, EPUB, ODT and for input_file)
        reference_doc: Path to reference document for styling (DOCX/ODT output)
        defaults_file: Path to Pandoc defaults YAML file
        filters: List of Pandoc filter names or paths

    Returns:
        The converted content, or a confirmation message when a file was written
    """
    if shutdown_handler.is_shutting_down():
        raise ConverterError("Server is shutting down, new conversions not accepted")

    params = ConversionParams(
        contents=contents,
        input_file=input_file,
        input_format=input_format or "markdown",
        output_format=output_format or "markdown",
        output_file=output_file,
        reference_doc=reference_doc,
        defaults_file=defaults_file,
        filters=filters,
    )

    task = asyncio.ensure_future(handle_conversion(params))
    shutdown_handler.register_task(task)

    try:
        return await task
    except ConverterError as e:
        log_error(logger, e, include_traceback=False)
        raise


@mcp.tool()
async def list_supported_formats() -> dict[str, list[str]]:
    """List the formats this server can convert between.

    Returns:
        dict with:
            - formats: All supported formats
            - input_formats: Formats usable as input_format
            - file_output_formats: Formats that require output_file
    """
    return {
        "formats": get_supported_formats(),
        "input_formats": get_input_formats(),
        "file_output_formats": get_file_output_formats(),
    }


@mcp.tool()
async def get_pandoc_info() -> dict[str, Any]:
    """Report whether pandoc is available and which version is installed.

    Returns:
        dict with:
            - available: Whether pandoc can be executed
            - version: Pandoc version line (None if unavailable)
            - pandoc_path: Binary that is invoked
    """
    converter = PandocConverter()
    version = None
    try:
        version = await converter.get_pandoc_version()
    except ConverterError as e:
        logger.warning(f"Pandoc unavailable: {e}")

    return {
        "available": version is not None,
        "version": version,
        "pandoc_path": converter.pandoc_path,
    }


@mcp.custom_route("/health", methods=["GET"])
async def health(request: Request) -> JSONResponse:
    """Health check endpoint for HTTP transports."""
    return JSONResponse({"status": "ok", "service": "pandoc-mcp", "version": __version__})


def _disable_host_check_for_public_bind(host: str) -> None:
    """Drop the localhost-only Host header check when serving on another interface."""
    if host in LOCAL_HOSTS:
        return
    if getattr(mcp.settings, "transport_security", None) is not None:
        mcp.settings.transport_security = None


def create_http_app(transport: str = "streamable-http") -> Starlette:
    """Create the Starlette app for an HTTP transport.

    Streamable HTTP is served on /mcp and on /sse. With the "sse" transport
    /sse is the legacy SSE endpoint instead. Every response carries CORS
    headers, and /health is always available.
    """
    if transport == "sse":
        app = mcp.sse_app()
    else:
        app = mcp.streamable_http_app()
        mcp_route = next(
            r for r in app.routes if getattr(r, "path", None) == mcp.settings.streamable_http_path
        )
        if isinstance(mcp_route, Mount):
            app.router.routes.append(Mount("/sse", app=mcp_route.app))
        else:
            app.router.routes.append(Route("/sse", endpoint=mcp_route.endpoint))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=CORS_EXPOSE_HEADERS,
    )
    return app


async def serve(transport: str = "stdio", host: Optional[str] = None, port: Optional[int] = None):
    """Run the server on the given transport until it is stopped."""
    async with server_lifespan():
        if transport == "stdio":
            await mcp.run_stdio_async()
            return

        host = host or config.host
        port = port or config.port
        mcp.settings.host = host
        mcp.settings.port = port
        _disable_host_check_for_public_bind(host)

        app = create_http_app(transport)
        logger.info(f"HTTP server on http://{host}:{port}")
        logger.info(f"  Health check: http://{host}:{port}/health")
        logger.info(f"  MCP endpoint: http://{host}:{port}/mcp")

        server = uvicorn.Server(
            uvicorn.Config(app, host=host, port=port, log_level=config.log_level.lower())
        )
        await server.serve()


def main(transport: str = "stdio", host: Optional[str] = None, port: Optional[int] = None):
    """Main entry point for the MCP server."""
    if transport not in TRANSPORTS:
        raise ValueError(f"Unknown transport '{transport}'. Must be one of: {', '.join(TRANSPORTS)}")

    setup_logging(config.log_level, str(config.log_file) if config.log_file else None)

    try:
        logger.info(f"Starting server with {transport} transport...")
        asyncio.run(serve(transport, host, port))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        shutdown_handler.initiate_shutdown()
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
