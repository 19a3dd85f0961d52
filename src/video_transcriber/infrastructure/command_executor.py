"""Runs external programs with bounded output capture and network-aware retries."""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from video_transcriber.config import ExecutorConfig, RetryConfig
from video_transcriber.domain.models import ExecutionOutcome, RetryNotifier
from video_transcriber.exceptions import (
    CommandExecutionError,
    OutputLimitExceededError,
)
from video_transcriber.logging import setup_logging

logger = setup_logging()

TRANSIENT_MARKERS = (
    "network",
    "connection",
    "timeout",
    "unreachable",
    "temporary failure",
)

_READ_CHUNK = 64 * 1024


def is_transient_failure(error: BaseException) -> bool:
    """True for command failures whose error text points at the network."""
    if not isinstance(error, CommandExecutionError):
        return False
    if isinstance(error, OutputLimitExceededError):
        return False
    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def build_backoff(config: RetryConfig) -> wait_exponential:
    """Delay before retry n is base * 2^(n-1), capped at max_delay_seconds."""
    return wait_exponential(
        multiplier=config.base_delay_seconds, max=config.max_delay_seconds
    )


class CommandExecutor:
    """Executes one external program invocation to completion."""

    def __init__(
        self,
        config: ExecutorConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._max_buffer_bytes = config.max_buffer_bytes
        self._retry = config.retry
        self._backoff = build_backoff(config.retry)
        self._sleep = sleep

    async def execute(
        self, args: Sequence[str], cwd: Path | None = None
    ) -> ExecutionOutcome:
        """
        Runs a program and captures its output streams.

        A program that cannot be started yields an outcome without a return
        code and with the OS error as its stderr.

        Raises:
            OutputLimitExceededError: If either stream exceeds the capture buffer.
        """
        program = args[0]
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                cwd=str(cwd) if cwd else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning(
                "Command could not be started",
                extra={"program": program, "error": str(e)},
            )
            return ExecutionOutcome(program=program, returncode=None, stderr=str(e))

        try:
            stdout, stderr = await asyncio.gather(
                self._read_bounded(process.stdout, program),
                self._read_bounded(process.stderr, program),
            )
        except OutputLimitExceededError:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            logger.error(
                "Command output exceeded capture buffer",
                extra={"program": program, "limit": self._max_buffer_bytes},
            )
            raise

        returncode = await process.wait()
        return ExecutionOutcome(
            program=program,
            returncode=returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    async def run(
        self, args: Sequence[str], cwd: Path | None = None
    ) -> ExecutionOutcome:
        """
        Runs a program once and requires it to succeed.

        Raises:
            CommandExecutionError: If the program exits non-zero or cannot start.
            OutputLimitExceededError: If either stream exceeds the capture buffer.
        """
        outcome = await self.execute(args, cwd)
        if not outcome.success:
            raise CommandExecutionError(
                outcome.program, outcome.returncode, outcome.stderr
            )
        return outcome

    async def run_with_retry(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        on_retry: RetryNotifier | None = None,
    ) -> ExecutionOutcome:
        """
        Runs a program, retrying with exponential backoff on network-class failures.

        Args:
            args: Program and arguments.
            cwd: Working directory for the program.
            on_retry: Called with a message before each backoff delay.

        Raises:
            CommandExecutionError: The last failure once attempts are exhausted,
                or the first failure that is not network-related.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._retry.max_attempts),
            wait=self._backoff,
            retry=retry_if_exception(is_transient_failure),
            before_sleep=self._announce_retry(args[0], on_retry),
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(self.run, args, cwd)

    def _announce_retry(
        self, program: str, on_retry: RetryNotifier | None
    ) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            delay_ms = int(retry_state.next_action.sleep * 1000)
            next_attempt = retry_state.attempt_number + 1
            message = (
                f"Network error running {program}, retrying in {delay_ms}ms "
                f"(attempt {next_attempt}/{self._retry.max_attempts})"
            )
            logger.warning(
                "Transient command failure, retry scheduled",
                extra={
                    "program": program,
                    "delay_ms": delay_ms,
                    "attempt": next_attempt,
                    "max_attempts": self._retry.max_attempts,
                    "error": str(retry_state.outcome.exception()),
                },
            )
            if on_retry:
                on_retry(message)

        return before_sleep

    async def _read_bounded(
        self, stream: asyncio.StreamReader | None, program: str
    ) -> bytes:
        """Reads a stream to EOF, failing once it grows past the buffer bound."""
        if stream is None:
            return b""
        chunks: list[bytes] = []
        size = 0
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                break
            size += len(chunk)
            if size > self._max_buffer_bytes:
                raise OutputLimitExceededError(program, self._max_buffer_bytes)
            chunks.append(chunk)
        return b"".join(chunks)
