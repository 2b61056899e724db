"""Per-execution workspaces.

Every execution gets its own directory under a shared root.  The submitted
source is written there, compilers drop their artifacts next to it and the
program runs with it as the working directory.  Nothing in a workspace
outlives the execution: :meth:`WorkspaceManager.open` removes the directory
on every exit path.

Directory names are derived from ``time.time_ns()``.  A process-wide
sequence number is appended so that two executions started within the same
clock tick still get distinct directories.
"""

from __future__ import annotations

import itertools
import logging
import re
import shutil
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .errors import SetupError
from .languages import LanguageProfile, RunStyle

logger = logging.getLogger("compilex.workspace")

DEFAULT_SOURCE_STEM = "main"
DEFAULT_CLASS_NAME = "Main"
ARTIFACT_NAME = "main"

_CLASS_PREFIX = "public class "
_JAVA_IDENTIFIER = re.compile(r"(?:[^\W\d]|\$)[\w$]*")

_sequence = itertools.count()


def extract_class_name(code: str) -> str:
    """Return the name of the first ``public class`` declared in ``code``.

    This is a line-oriented heuristic, not a parser.  The declaration must
    sit on one line that starts (after indentation) with ``public class``
    separated by single spaces; annotations or other modifiers in front of
    ``public`` and declarations split across lines are not recognised.
    Only a valid Java identifier is accepted, since the name becomes the
    staged file name.  :data:`DEFAULT_CLASS_NAME` is returned otherwise.
    """
    for line in code.splitlines():
        line = line.strip()
        if not line.startswith(_CLASS_PREFIX):
            continue
        parts = line.split()
        if len(parts) >= 3:
            name = parts[2].rstrip("{")
            if _JAVA_IDENTIFIER.fullmatch(name):
                return name
    return DEFAULT_CLASS_NAME


@dataclass
class Workspace:
    id: str
    path: Path
    source_path: Optional[Path] = None
    entry_name: Optional[str] = None
    artifact_path: Optional[Path] = None


class WorkspaceManager:
    """Create, populate and remove execution workspaces under ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def create(self) -> Workspace:
        workspace_id = f"{time.time_ns()}-{next(_sequence)}"
        path = (self.root / workspace_id).resolve()
        try:
            path.mkdir(mode=0o755)
        except OSError as exc:
            raise SetupError(f"failed to create execution directory: {exc}") from exc
        logger.debug("Created workspace %s", path)
        return Workspace(id=workspace_id, path=path)

    def stage(self, workspace: Workspace, profile: LanguageProfile, code: str) -> Path:
        """Write ``code`` into ``workspace`` under the name ``profile`` expects.

        Class-based languages must be staged as ``<ClassName><ext>`` because
        their compiler refuses any other file name; everything else is
        staged as ``main<ext>``.
        """
        if profile.run_style is RunStyle.CLASS:
            workspace.entry_name = extract_class_name(code)
            stem = workspace.entry_name
        else:
            stem = DEFAULT_SOURCE_STEM
        if profile.run_style is RunStyle.BINARY:
            workspace.artifact_path = workspace.path / ARTIFACT_NAME

        source_path = workspace.path / (stem + profile.extension)
        try:
            source_path.write_text(code, encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise SetupError(f"failed to write code file: {exc}") from exc
        workspace.source_path = source_path
        return source_path

    def destroy(self, workspace: Workspace) -> None:
        shutil.rmtree(workspace.path, ignore_errors=True)
        logger.debug("Removed workspace %s", workspace.path)

    @contextmanager
    def open(self) -> Iterator[Workspace]:
        """Yield a fresh workspace and remove it however the block exits."""
        workspace = self.create()
        try:
            yield workspace
        finally:
            self.destroy(workspace)
