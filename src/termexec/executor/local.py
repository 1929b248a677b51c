"""
Local subprocess executor.

Runs each command through `<shell> -c` with asyncio.subprocess, drains
stdout and stderr concurrently and kills the whole process group when
the deadline passes.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time
from pathlib import Path

from termexec._types import CommandRequest, ExecutionResult, ErrorKind, SpawnFailure
from termexec.classify import classify
from termexec.config import ExecutorConfig
from termexec.errors import ExecutorClosed
from termexec.executor._base import Executor

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124
EXECUTION_ERROR_EXIT_CODE = -1

# Upper bound on waiting for pipes to close after the kill signal
KILL_GRACE_SECONDS = 5.0

_READ_CHUNK = 65536


async def _drain(stream: asyncio.StreamReader, sink: bytearray) -> None:
    """Read a stream to EOF, keeping everything read so far in `sink`."""
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        sink.extend(chunk)


def _decode(data: bytes | bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def _normalize_exit_code(returncode: int | None) -> int:
    """Map signal deaths (negative return codes) to the shell's 128+N convention."""
    if returncode is None:
        return EXECUTION_ERROR_EXIT_CODE
    if returncode < 0:
        return 128 - returncode
    return returncode


def _kill_process_group(proc: asyncio.subprocess.Process) -> None:
    """Send SIGKILL to the child's process group."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass  # Already gone
    except PermissionError:
        # Group id no longer ours; fall back to the direct child
        try:
            proc.kill()
        except ProcessLookupError:
            pass


class LocalExecutor(Executor):
    """
    Subprocess-based executor.

    Each call owns its subprocess exclusively, so concurrent calls on the
    same executor need no locking.

    Example:
        >>> executor = LocalExecutor()
        >>> result = await executor.execute("ls -la")
        >>> print(result.stdout)
    """

    def __init__(
        self,
        *,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        config: ExecutorConfig | None = None,
    ) -> None:
        """
        Initialize a local executor.

        Args:
            cwd: Working directory for commands. Defaults to the current
                 directory of this process at call time.
            env: Environment for commands. Defaults to this process's environment.
            config: Timeouts and shell. Defaults to ExecutorConfig().
        """
        self._cwd = Path(cwd).resolve() if cwd is not None else None
        self._env = dict(env) if env is not None else None
        self._config = config or ExecutorConfig()
        self._closed = False

    @property
    def config(self) -> ExecutorConfig:
        return self._config

    @property
    def working_directory(self) -> str:
        """The directory commands run in."""
        if self._cwd is not None:
            return str(self._cwd)
        return os.getcwd()

    def effective_timeout_ms(self, request: CommandRequest) -> int:
        """Requested timeout (or the default), clamped to the configured maximum."""
        return self._config.effective_timeout_ms(request.timeout_ms)

    async def execute(
        self, request: CommandRequest | str, *, timeout_ms: int | None = None
    ) -> ExecutionResult:
        """
        Execute a command in a fresh shell process.

        Args:
            request: A CommandRequest, or a bare command string.
            timeout_ms: Timeout for a bare command string.

        Returns:
            ExecutionResult. Spawn failures, read failures and timeouts are
            reported in the result rather than raised.

        Raises:
            ExecutorClosed: If the executor has been closed.
        """
        if self._closed:
            raise ExecutorClosed("Executor has been closed")

        if isinstance(request, str):
            request = CommandRequest(request, timeout_ms)

        deadline_ms = self.effective_timeout_ms(request)
        cwd = self.working_directory
        start = time.monotonic()

        logger.debug(f"Running command (timeout {deadline_ms}ms) in {cwd}: {request.command}")

        spawned = await self._spawn(request.command, cwd)
        if isinstance(spawned, SpawnFailure):
            logger.warning(f"Failed to start command: {spawned.message}")
            return self._failure_result(request, cwd, start, spawned)

        proc = spawned
        stdout_buf = bytearray()
        stderr_buf = bytearray()
        try:
            timed_out, exited_in_time = await self._collect(
                proc, stdout_buf, stderr_buf, deadline_ms
            )
        except OSError as exc:
            logger.warning(f"Failed to read command output: {exc}")
            return self._failure_result(
                request,
                cwd,
                start,
                SpawnFailure(f"Failed to read command output: {exc}", exc),
                stdout=_decode(stdout_buf),
                stderr=_decode(stderr_buf),
            )
        finally:
            await self._reap(proc)

        duration_ms = self._elapsed_ms(start)
        stdout = _decode(stdout_buf)
        stderr = _decode(stderr_buf)

        if timed_out:
            logger.warning(f"Command timed out after {deadline_ms}ms: {request.command}")
            message = f"Command timed out after {deadline_ms}ms."
            if exited_in_time:
                message = (
                    f"Command timed out after {deadline_ms}ms: the shell exited but its "
                    "output pipes were still held open, probably by a background process."
                )
            return ExecutionResult(
                success=False,
                exit_code=TIMEOUT_EXIT_CODE,
                stdout=stdout,
                stderr=stderr,
                command=request.command,
                working_directory=cwd,
                duration_ms=duration_ms,
                error_kind=ErrorKind.TIMEOUT,
                error_message=message,
                hint=(
                    "Increase the timeout, or simplify the command "
                    "(for example by splitting it into smaller steps)."
                ),
                timed_out=True,
            )

        exit_code = _normalize_exit_code(proc.returncode)
        logger.debug(f"Command exited with {exit_code} in {duration_ms}ms")

        if exit_code == 0:
            return ExecutionResult(
                success=True,
                exit_code=0,
                stdout=stdout,
                stderr=stderr,
                command=request.command,
                working_directory=cwd,
                duration_ms=duration_ms,
            )

        outcome = classify(exit_code, stderr, request.command)
        return ExecutionResult(
            success=False,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            command=request.command,
            working_directory=cwd,
            duration_ms=duration_ms,
            error_kind=outcome.kind,
            error_message=outcome.message,
            hint=outcome.hint,
        )

    async def _spawn(self, command: str, cwd: str) -> asyncio.subprocess.Process | SpawnFailure:
        """Start `<shell> -c command` in a new session, or describe why it could not start."""
        try:
            return await asyncio.create_subprocess_exec(
                self._config.shell,
                "-c",
                command,
                cwd=cwd,
                env=self._env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except (OSError, ValueError) as exc:
            return SpawnFailure(str(exc), exc)

    async def _collect(
        self,
        proc: asyncio.subprocess.Process,
        stdout_buf: bytearray,
        stderr_buf: bytearray,
        deadline_ms: int,
    ) -> tuple[bool, bool]:
        """
        Drain both pipes and wait for exit, racing them against the deadline.

        Returns:
            (timed_out, exited_in_time). `timed_out` is True if the deadline
            passed before the process exited and both pipes reached EOF;
            `exited_in_time` tells whether the shell itself had exited by then.
        """
        assert proc.stdout is not None and proc.stderr is not None
        tasks = {
            asyncio.ensure_future(_drain(proc.stdout, stdout_buf)),
            asyncio.ensure_future(_drain(proc.stderr, stderr_buf)),
            asyncio.ensure_future(proc.wait()),
        }
        try:
            _, pending = await asyncio.wait(tasks, timeout=deadline_ms / 1000)
            timed_out = bool(pending)
            exited_in_time = proc.returncode is not None
            if timed_out:
                _kill_process_group(proc)
                # Whatever was flushed before the kill is still in the pipes
                _, pending = await asyncio.wait(pending, timeout=KILL_GRACE_SECONDS)
                if pending:
                    logger.warning(
                        f"Output pipes still open {KILL_GRACE_SECONDS}s after kill, abandoning them"
                    )
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()  # type: ignore[misc]
        return timed_out, exited_in_time

    async def _reap(self, proc: asyncio.subprocess.Process) -> None:
        """Make sure the child is dead and reaped, then release its pipes."""
        try:
            if proc.returncode is None:
                _kill_process_group(proc)
                await proc.wait()
        finally:
            # Close the transport while its loop is alive; left to the GC it
            # may be finalized after asyncio.run() has closed the loop.
            transport = getattr(proc, "_transport", None)
            if transport is not None:
                transport.close()

    def _failure_result(
        self,
        request: CommandRequest,
        cwd: str,
        start: float,
        failure: SpawnFailure,
        *,
        stdout: str = "",
        stderr: str = "",
    ) -> ExecutionResult:
        return ExecutionResult(
            success=False,
            exit_code=EXECUTION_ERROR_EXIT_CODE,
            stdout=stdout,
            stderr=stderr or failure.message,
            command=request.command,
            working_directory=cwd,
            duration_ms=self._elapsed_ms(start),
            error_kind=ErrorKind.EXECUTION_ERROR,
            error_message=f"Failed to execute command: {failure.message}",
            hint=(
                f"Check the command syntax and that it is compatible with {self._config.shell}."
            ),
        )

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int(round((time.monotonic() - start) * 1000))

    async def close(self) -> None:
        """Mark the executor closed. Safe to call multiple times."""
        self._closed = True
