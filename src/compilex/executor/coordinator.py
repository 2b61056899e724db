"""
Execution coordinator.

:class:`CodeExecutor` sequences one request through the pipeline:
profile lookup, workspace creation and staging, an optional build and the
run.  Every stage failure is terminal and is returned to the caller as part
of the :class:`ExecutionResult`; nothing is retried.  The workspace is
removed on every exit path.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Mapping

from ..errors import ExecutionError
from ..languages import LANGUAGES, LanguageProfile, get_profile
from ..workspace import WorkspaceManager
from . import stages
from .base import ExecutionResult, PopenFactory

logger = logging.getLogger("compilex.executor")


class CodeExecutor:
    """Compile and run submitted code for every language in ``languages``."""

    def __init__(
        self,
        workspaces: WorkspaceManager,
        languages: Mapping[str, LanguageProfile] = LANGUAGES,
        popen: PopenFactory = subprocess.Popen,
    ) -> None:
        self.workspaces = workspaces
        self.languages = languages
        self.popen = popen

    def execute(self, language: str, code: str) -> ExecutionResult:
        try:
            return self._execute(language, code)
        except ExecutionError as exc:
            logger.warning("Execution of %s failed (%s): %s", language, exc.kind.value, exc)
            return ExecutionResult(output=exc.output, error=exc)

    def _execute(self, language: str, code: str) -> ExecutionResult:
        profile = get_profile(language, self.languages)
        with self.workspaces.open() as workspace:
            self.workspaces.stage(workspace, profile, code)
            if profile.needs_compile:
                stages.build(profile, workspace, popen=self.popen)
            result = stages.run(profile, workspace, popen=self.popen)
        logger.info(
            "Execution of %s finished: exit_code=%s, duration_ms=%s",
            language,
            result.exit_code,
            result.duration_ms,
        )
        return ExecutionResult(output=result.output)
