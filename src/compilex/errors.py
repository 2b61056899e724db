"""Error taxonomy for the execution engine.

Every failure the engine can report is an :class:`ExecutionError`.  The
coordinator catches these and folds them into an ``ExecutionResult``; the
HTTP layer then maps them to a non-success status.  Malformed requests never
reach the engine and therefore have no class here.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    SETUP = "setup"
    COMPILATION = "compilation"
    RUN = "run"
    TIMEOUT = "timeout"


class ExecutionError(Exception):
    """Base class for engine failures.

    Attributes
    ----------
    kind: ErrorKind
        Which stage of the pipeline failed.
    output: str
        Captured text that accompanies the failure.  Empty when nothing
        useful was captured (setup errors, timeouts).
    """

    kind: ErrorKind

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class UnsupportedLanguageError(ExecutionError):
    kind = ErrorKind.UNSUPPORTED_LANGUAGE

    def __init__(self, language: str) -> None:
        super().__init__(f"unsupported language: {language}")
        self.language = language


class SetupError(ExecutionError):
    """Workspace creation or source staging failed."""

    kind = ErrorKind.SETUP


class CompilationError(ExecutionError):
    """The compiler exited non-zero or could not be launched."""

    kind = ErrorKind.COMPILATION


class RunError(ExecutionError):
    """The program exited non-zero or could not be launched."""

    kind = ErrorKind.RUN


class ExecutionTimeout(ExecutionError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: float) -> None:
        super().__init__(f"execution timeout after {_format_seconds(timeout)}")
        self.timeout = timeout


def _format_seconds(seconds: float) -> str:
    if float(seconds).is_integer():
        return f"{int(seconds)}s"
    return f"{seconds:g}s"
