"""Shared fixtures: isolated workspace roots and a scriptable fake ``Popen``."""

from __future__ import annotations

import itertools
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from shutil import which
from typing import List, Optional

import pytest

from compilex.workspace import WorkspaceManager


def have(*tools: str) -> bool:
    return all(which(tool) is not None for tool in tools)


def requires(*tools: str):
    return pytest.mark.skipif(
        not have(*tools), reason=f"toolchain not installed: {', '.join(tools)}"
    )


@dataclass
class Script:
    output: str = ""
    returncode: int = 0
    delay: float = 0.0
    raises: Optional[BaseException] = None


class FakeProcess:
    _pids = itertools.count(4000)

    def __init__(self, args: List[str], kwargs: dict, script: Script) -> None:
        self.args = args
        self.kwargs = kwargs
        self.pid = next(self._pids)
        self.returncode: Optional[int] = None
        self.killed = False
        self._script = script
        self._done = threading.Event()

    def communicate(self, input=None, timeout=None):
        if not self._done.wait(self._script.delay):
            self.returncode = self._script.returncode
            self._done.set()
            return self._script.output, None
        return "", None

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9
        self._done.set()

    def poll(self) -> Optional[int]:
        return self.returncode

    def wait(self, timeout=None) -> Optional[int]:
        self._done.wait(timeout)
        return self.returncode


class FakePopen:
    """Stands in for :class:`subprocess.Popen`; each launch consumes one script."""

    def __init__(self) -> None:
        self.scripts: List[Script] = []
        self.processes: List[FakeProcess] = []

    def script(self, **kwargs) -> "FakePopen":
        self.scripts.append(Script(**kwargs))
        return self

    def __call__(self, args, **kwargs) -> FakeProcess:
        script = self.scripts.pop(0) if self.scripts else Script()
        if script.raises is not None:
            raise script.raises
        process = FakeProcess(list(args), kwargs, script)
        self.processes.append(process)
        return process


class RecordingPopen:
    """Real :class:`subprocess.Popen` that remembers every process it started."""

    def __init__(self) -> None:
        self.processes: List[subprocess.Popen] = []

    def __call__(self, args, **kwargs) -> subprocess.Popen:
        process = subprocess.Popen(args, **kwargs)
        self.processes.append(process)
        return process


@pytest.fixture
def fake_popen() -> FakePopen:
    return FakePopen()


@pytest.fixture
def recording_popen() -> RecordingPopen:
    return RecordingPopen()


@pytest.fixture
def workspace_root(tmp_path) -> Path:
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def workspaces(workspace_root) -> WorkspaceManager:
    return WorkspaceManager(workspace_root)
