"""
Build and run stages.

Both stages turn a :class:`LanguageProfile` plus a staged
:class:`Workspace` into a concrete command line, hand it to
:func:`run_process` and translate the outcome into either a
:class:`ProcessResult` or one of the engine errors.  The profile itself is
never modified; the completed commands are local values.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List

from ..errors import CompilationError, ExecutionTimeout, RunError
from ..languages import LanguageProfile, RunStyle
from ..workspace import Workspace
from .base import PopenFactory, ProcessResult, run_process

logger = logging.getLogger("compilex.executor")

COMPILE_ERROR_PREFIX = "Compilation Error:\n"


def build_command(profile: LanguageProfile, workspace: Workspace) -> List[str]:
    source = str(workspace.source_path)
    if profile.run_style is RunStyle.BINARY:
        # compile_cmd ends with the output flag; its value is the artifact.
        return [*profile.compile_cmd, str(workspace.artifact_path), source]
    return [*profile.compile_cmd, source]


def resolve_run_command(profile: LanguageProfile, workspace: Workspace) -> List[str]:
    if profile.run_style is RunStyle.CLASS:
        # Compiled classes are looked up by name on the classpath, which
        # defaults to the working directory.
        return [*profile.run_cmd, str(workspace.entry_name)]
    if profile.run_style is RunStyle.BINARY:
        return [str(workspace.artifact_path)]
    return [*profile.run_cmd, str(workspace.source_path)]


def build(
    profile: LanguageProfile,
    workspace: Workspace,
    popen: PopenFactory = subprocess.Popen,
) -> ProcessResult:
    """Compile the staged source inside ``workspace``.

    Raises :class:`CompilationError` carrying the compiler's diagnostics
    (prefixed with :data:`COMPILE_ERROR_PREFIX`) when compilation fails,
    and :class:`ExecutionTimeout` when it does not finish in time.
    """
    cmd = build_command(profile, workspace)
    logger.info("Compiling %s: %s", profile.name, cmd)
    try:
        result = run_process(cmd, workspace.path, profile.timeout, popen=popen)
    except OSError as exc:
        raise CompilationError(
            f"compilation failed: {exc}", output=COMPILE_ERROR_PREFIX + str(exc)
        ) from exc
    if result.timed_out:
        raise ExecutionTimeout(profile.timeout)
    if result.exit_code != 0:
        logger.info("Compilation of %s failed with exit status %s", profile.name, result.exit_code)
        raise CompilationError(
            f"compilation failed: exit status {result.exit_code}",
            output=COMPILE_ERROR_PREFIX + result.output,
        )
    return result


def run(
    profile: LanguageProfile,
    workspace: Workspace,
    popen: PopenFactory = subprocess.Popen,
) -> ProcessResult:
    """Run the staged (and, if needed, compiled) program under the profile timeout."""
    cmd = resolve_run_command(profile, workspace)
    logger.info("Running %s: %s", profile.name, cmd)
    try:
        result = run_process(cmd, workspace.path, profile.timeout, popen=popen)
    except OSError as exc:
        raise RunError(f"failed to start program: {exc}") from exc
    if result.timed_out:
        raise ExecutionTimeout(profile.timeout)
    if result.exit_code != 0:
        raise RunError(f"exit status {result.exit_code}", output=result.output)
    return result
