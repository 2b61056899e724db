"""
Process supervision shared by the build and run stages.

:func:`run_process` launches one command inside a workspace and races it
against a wall-clock timeout.  The two contenders, process completion and
timer expiry, both try to resolve the same :class:`Outcome`; only the first
resolution is kept and the other is discarded.  When the timer wins the
child is killed with ``SIGKILL`` and reaped before the call returns.

Only the direct child is killed.  Processes it spawned itself are not
tracked and may outlive the timeout.

The ``popen`` argument exists so tests can substitute a fake process and
exercise the race without spawning anything.
"""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..errors import ExecutionError

logger = logging.getLogger("compilex.executor")

T = TypeVar("T")

PopenFactory = Callable[..., Any]


class Outcome(Generic[T]):
    """A value that can be resolved exactly once.

    :meth:`resolve` returns ``True`` only for the caller that actually set
    the value; later callers are ignored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._value: Optional[T] = None

    def resolve(self, value: T) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self._value = value
            self._event.set()
            return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    @property
    def value(self) -> Optional[T]:
        return self._value


@dataclass
class ProcessResult:
    """Result of one supervised process.

    Attributes
    ----------
    output: str
        Combined standard output and standard error.  Always empty when
        the process timed out.
    exit_code: Optional[int]
        Exit status, or ``None`` when the process timed out.
    timed_out: bool
        Whether the timeout fired before the process finished.
    duration_ms: int
        Wall-clock time spent waiting, in milliseconds.
    """

    output: str
    exit_code: Optional[int]
    timed_out: bool
    duration_ms: int

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.exit_code == 0


@dataclass
class ExecutionResult:
    """Outcome of a full execution request as returned by the coordinator."""

    output: str = ""
    error: Optional[ExecutionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


_TIMED_OUT = object()


def run_process(
    args: Sequence[str],
    cwd: Path,
    timeout: float,
    popen: PopenFactory = subprocess.Popen,
) -> ProcessResult:
    """
    Run ``args`` in ``cwd`` and wait at most ``timeout`` seconds.

    Parameters
    ----------
    args: Sequence[str]
        Program and arguments.  No shell is involved.
    cwd: Path
        Working directory for the child; always the execution workspace.
    timeout: float
        Seconds to wait before the child is killed.
    popen: callable, optional
        Factory with the :class:`subprocess.Popen` signature.

    Returns
    -------
    ProcessResult
        Either the completed process's output and exit status, or a
        timed-out result with no output.

    Raises
    ------
    OSError
        If the program cannot be launched.  Callers translate this into
        their own stage error.
    """
    start_time = time.perf_counter()
    process = popen(
        list(args),
        cwd=str(cwd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    )

    outcome: Outcome[Any] = Outcome()

    def wait_for_exit() -> None:
        try:
            output, _ = process.communicate()
        except Exception as exc:  # surfaced to the caller through the outcome
            outcome.resolve(exc)
            return
        outcome.resolve((output or "", process.returncode))

    waiter = threading.Thread(target=wait_for_exit, name=f"supervise-{process.pid}", daemon=True)
    waiter.start()

    if not outcome.wait(timeout) and outcome.resolve(_TIMED_OUT):
        logger.warning("Process %s exceeded %ss; killing it", process.pid, timeout)
        try:
            process.kill()
        except ProcessLookupError:
            pass
        process.wait()
        # The waiter may stay blocked if a grandchild still holds the pipe.
        waiter.join(timeout=1.0)

    duration = int((time.perf_counter() - start_time) * 1000)
    value = outcome.value
    if value is _TIMED_OUT:
        return ProcessResult(output="", exit_code=None, timed_out=True, duration_ms=duration)
    if isinstance(value, BaseException):
        raise value
    output, exit_code = value
    return ProcessResult(output=output, exit_code=exit_code, timed_out=False, duration_ms=duration)
