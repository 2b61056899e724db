"""
Execution engine.

The engine is a two-stage pipeline (optional build, then run) driven by
:class:`CodeExecutor`.  Language differences live entirely in the
:class:`~compilex.languages.LanguageProfile` table; the stages resolve a
profile into concrete command lines and supervise the resulting processes
with :func:`run_process`, which enforces the wall-clock timeout.
"""

from .base import ExecutionResult, Outcome, ProcessResult, run_process
from .coordinator import CodeExecutor

__all__ = [
    "ExecutionResult",
    "Outcome",
    "ProcessResult",
    "run_process",
    "CodeExecutor",
]
