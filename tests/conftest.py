import subprocess
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from fermentrack_installer.errors import InstallerError


class FakeRunner:
    """Stands in for CommandRunner; every command succeeds unless told otherwise."""

    def __init__(self, available=()):
        self.available = set(available)
        self.calls: List[Tuple[List[str], Optional[str]]] = []
        self._responses: Dict[Tuple[str, ...], list] = {}

    def on(self, cmd, returncode: int = 0, stdout: str = "", effect: Optional[Callable] = None):
        """Queue a result for `cmd`. The last queued result repeats."""
        self._responses.setdefault(tuple(cmd), []).append((returncode, stdout, effect))
        return self

    def _next(self, cmd):
        queued = self._responses.get(tuple(cmd))
        if not queued:
            return 0, "", None
        if len(queued) > 1:
            return queued.pop(0)
        return queued[0]

    def run(self, cmd, check=True, capture_output=False, timeout=None, cwd=None, env=None):
        self.calls.append((list(cmd), cwd))
        returncode, stdout, effect = self._next(cmd)
        if effect is not None:
            effect(cmd, cwd)
        result = subprocess.CompletedProcess(list(cmd), returncode, stdout=stdout, stderr="")
        if check and returncode != 0:
            raise InstallerError(f"Command failed ({returncode}): {' '.join(cmd)}")
        return result

    def succeeds(self, cmd, cwd=None) -> bool:
        return self.run(cmd, check=False, capture_output=True, cwd=cwd).returncode == 0

    def output(self, cmd, cwd=None) -> str:
        result = self.run(cmd, check=False, capture_output=True, cwd=cwd)
        if result.returncode != 0:
            return ""
        return (result.stdout or "").strip()

    def which(self, command):
        if command in self.available:
            return f"/usr/bin/{command}"
        return None

    def privileged(self, cmd, preserve_env=False):
        prefix = ["sudo", "-E"] if preserve_env else ["sudo"]
        return prefix + list(cmd)

    @property
    def commands(self) -> List[List[str]]:
        return [cmd for cmd, _cwd in self.calls]

    def count(self, cmd) -> int:
        return sum(1 for called in self.commands if called == list(cmd))


@pytest.fixture
def fake_runner():
    return FakeRunner()
