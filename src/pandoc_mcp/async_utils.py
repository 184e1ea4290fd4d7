"""Async utilities for subprocess management and concurrency control."""

import asyncio
import threading
from typing import Optional

from .config import config
from .logging_config import get_logger

logger = get_logger("async_utils")


class ConcurrencyLimiter:
    """Semaphore-based concurrency control for conversions."""

    def __init__(self, max_concurrent: int = 4):
        self._max_concurrent = max_concurrent
        self._local = threading.local()

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    async def acquire(self):
        """Acquire the semaphore."""
        sem = self._get_semaphore()
        await sem.acquire()
        return self

    def release(self):
        """Release the semaphore."""
        sem = self._get_semaphore()
        sem.release()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def _get_semaphore(self) -> asyncio.Semaphore:
        """Get semaphore for current event loop."""
        try:
            loop = asyncio.get_running_loop()
            loop_id = id(loop)
            if not hasattr(self._local, "semaphores"):
                self._local.semaphores = {}
            if loop_id not in self._local.semaphores:
                self._local.semaphores[loop_id] = asyncio.Semaphore(self._max_concurrent)
            return self._local.semaphores[loop_id]
        except RuntimeError:
            return asyncio.Semaphore(self._max_concurrent)


class SubprocessTimeoutError(RuntimeError):
    """Raised when a subprocess times out."""

    def __init__(self, cmd: list[str], timeout: float):
        self.cmd = cmd
        self.timeout = timeout
        super().__init__(f"Subprocess timed out after {timeout}s: {' '.join(cmd)}")


class SubprocessError(RuntimeError):
    """Raised when a subprocess exits with non-zero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Subprocess failed with code {returncode}: {' '.join(cmd)}"
        if stderr:
            msg += f"\nstderr: {stderr}"
        super().__init__(msg)


async def safe_subprocess(
    cmd: list[str],
    timeout: Optional[float] = 1800,
    input_text: Optional[str] = None,
    check_returncode: bool = True,
) -> tuple[int, str, str]:
    """Run subprocess with timeout and zombie prevention.

    Output is always captured and stdin is never inherited, since the
    server's own stdio may be carrying the MCP transport.

    Args:
        cmd: Command and arguments as a list.
        timeout: Maximum time in seconds before the process is killed
            (None waits forever).
        input_text: Optional text written to the process's stdin.
        check_returncode: If True, raise SubprocessError on non-zero exit.

    Returns:
        Tuple of (returncode, stdout, stderr).

    Raises:
        OSError: If the process cannot be spawned (e.g. FileNotFoundError).
        SubprocessTimeoutError: If the process exceeds the timeout.
        SubprocessError: If check_returncode is True and process fails.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.PIPE if input_text is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    stdin_bytes = input_text.encode("utf-8") if input_text is not None else None

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(stdin_bytes), timeout=timeout)
        returncode = proc.returncode or 0
        stdout_str = stdout.decode("utf-8", errors="replace") if stdout else ""
        stderr_str = stderr.decode("utf-8", errors="replace") if stderr else ""
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        try:
            await asyncio.wait_for(proc.wait(), timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning(f"Process {cmd[0]} did not terminate after kill, PID: {proc.pid}")
        raise SubprocessTimeoutError(cmd, timeout) from None
    finally:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            try:
                await proc.wait()
            except Exception as e:
                logger.warning(f"Failed to wait for process {cmd[0]}: {e}")

    if check_returncode and returncode != 0:
        raise SubprocessError(cmd, returncode, stderr_str)

    return returncode, stdout_str, stderr_str


concurrency_limiter = ConcurrencyLimiter(config.max_concurrent)
