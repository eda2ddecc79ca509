"""
Process Supervisor

Runs an external worker process against a wall-clock deadline.

The worker and a timer are started together and raced; whichever finishes
first decides the outcome. On timeout the worker receives the configured
termination signal. In every case the worker is reaped and the timer task is
finished before ``run_async`` returns, so no zombie processes or dangling
tasks are left behind.
"""

import asyncio
import signal
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Optional, Sequence, Union

from ..utils.logging_utils import get_structured_logger

PathLike = Union[str, Path]


class RunStatus(Enum):
    """How a supervised run ended."""
    COMPLETED = "completed"  # Worker exited before the deadline
    TIMEOUT = "timeout"  # Deadline hit, worker was signalled
    LAUNCH_FAILURE = "launch-failure"  # Worker could not be started


@dataclass
class RunOutcome:
    """Result of a supervised run."""
    status: RunStatus
    returncode: Optional[int] = None
    pid: Optional[int] = None
    signal_sent: Optional[int] = None  # Signal delivered on timeout
    elapsed: float = 0.0
    error_message: Optional[str] = None

    @property
    def completed_normally(self) -> bool:
        return self.status == RunStatus.COMPLETED

    def __str__(self):
        if self.status == RunStatus.LAUNCH_FAILURE:
            return f"Launch failed: {self.error_message}"
        if self.status == RunStatus.TIMEOUT:
            return f"Timed out after {self.elapsed:.2f}s (sent {signal_name(self.signal_sent)})"
        return f"Completed in {self.elapsed:.2f}s (exit code {self.returncode})"


def signal_name(sig: Optional[int]) -> str:
    if sig is None:
        return "no signal"
    try:
        return signal.Signals(sig).name
    except ValueError:
        return str(sig)


class ProcessSupervisor:
    """
    Launches a worker process and enforces a deadline on it.

    Example:
        >>> supervisor = ProcessSupervisor()
        >>> outcome = supervisor.run("/usr/bin/python", ["fast-downward.py", "prob.pddl"], timeout=5)
        >>> if not outcome.completed_normally:
        ...     print(outcome)
    """

    def __init__(self):
        self.logger = get_structured_logger("ProcessSupervisor")

    def run(
        self,
        executable: PathLike,
        arguments: Sequence[str],
        timeout: float,
        termination_signal: int = signal.SIGKILL,
        cwd: Optional[PathLike] = None,
        output_path: Optional[PathLike] = None,
    ) -> RunOutcome:
        """Blocking wrapper around ``run_async``; not usable inside a running event loop."""
        return asyncio.run(
            self.run_async(
                executable,
                arguments,
                timeout,
                termination_signal=termination_signal,
                cwd=cwd,
                output_path=output_path,
            )
        )

    async def run_async(
        self,
        executable: PathLike,
        arguments: Sequence[str],
        timeout: float,
        termination_signal: int = signal.SIGKILL,
        cwd: Optional[PathLike] = None,
        output_path: Optional[PathLike] = None,
    ) -> RunOutcome:
        """
        Run ``executable`` with ``arguments`` and wait at most ``timeout`` seconds.

        Args:
            executable: Program to execute
            arguments: Arguments passed after the program
            timeout: Deadline in seconds
            termination_signal: Signal sent to the worker when the deadline expires
            cwd: Working directory for the worker
            output_path: Append worker stdout/stderr here (inherited when None)

        Returns:
            RunOutcome describing which side of the race won
        """
        if timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout}")

        cmd = [str(executable)] + [str(arg) for arg in arguments]
        self.logger.debug("Running: %s", " ".join(cmd))

        start = time.monotonic()
        log_handle: Optional[IO[bytes]] = None
        try:
            try:
                if output_path is not None:
                    log_handle = open(output_path, "ab")
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    cwd=str(cwd) if cwd is not None else None,
                    stdout=log_handle,
                    stderr=asyncio.subprocess.STDOUT if log_handle is not None else None,
                )
            except OSError as e:
                self.logger.error("Failed to launch %s: %s", executable, e)
                return RunOutcome(
                    status=RunStatus.LAUNCH_FAILURE,
                    elapsed=time.monotonic() - start,
                    error_message=f"Failed to launch {executable}: {e}",
                )

            return await self._race(process, timeout, termination_signal, start)
        finally:
            if log_handle is not None:
                log_handle.close()

    async def _race(
        self,
        process: asyncio.subprocess.Process,
        timeout: float,
        termination_signal: int,
        start: float,
    ) -> RunOutcome:
        worker = asyncio.ensure_future(process.wait())
        timer = asyncio.ensure_future(asyncio.sleep(timeout))
        signal_sent = None
        try:
            done, _ = await asyncio.wait({worker, timer}, return_when=asyncio.FIRST_COMPLETED)
            if worker in done:
                status = RunStatus.COMPLETED
            else:
                self.logger.warning(
                    "timeout reached after %.1fs, sending %s to pid %d",
                    timeout, signal_name(termination_signal), process.pid,
                )
                signal_sent = self._deliver(process, termination_signal)
                status = RunStatus.TIMEOUT
            # Reap the worker whichever side won
            returncode = await worker
        finally:
            timer.cancel()
            if not worker.done():
                # Supervisor itself was cancelled mid-race
                self._deliver(process, signal.SIGKILL)
                await process.wait()
            await asyncio.gather(worker, timer, return_exceptions=True)

        elapsed = time.monotonic() - start
        self.logger.debug("pid %d exited with %s after %.2fs", process.pid, returncode, elapsed)
        return RunOutcome(
            status=status,
            returncode=returncode,
            pid=process.pid,
            signal_sent=signal_sent,
            elapsed=elapsed,
            error_message=f"Worker timeout after {timeout}s" if status == RunStatus.TIMEOUT else None,
        )

    def _deliver(self, process: asyncio.subprocess.Process, sig: int) -> Optional[int]:
        try:
            process.send_signal(sig)
        except ProcessLookupError:
            self.logger.debug("pid %d exited before %s was delivered", process.pid, signal_name(sig))
            return None
        return sig
