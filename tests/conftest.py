"""Shared fixtures: a dispatcher wired to a recording launcher."""

import pytest

from config import DispatchConfig
from dispatch import Dispatcher
from facts import FactSet
from timers import Timers


class FakeLauncher:
    """Records launches instead of starting processes."""

    def __init__(self, status: int = 0):
        self.status = status
        self.verbose = False
        self.calls: list[tuple[str, list[str]]] = []

    def launch(self, tool_name: str, args: list[str]) -> int:
        self.calls.append((tool_name, list(args)))
        return self.status


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def make_dispatcher(tmp_path, launcher, monkeypatch):
    """Build a Dispatcher running in an empty tmp_path with no VFLAGS."""
    monkeypatch.chdir(tmp_path)

    def _make(tty: bool = True, environ=None, host_os: str = "linux", codegen=None):
        cfg = DispatchConfig(vroot=tmp_path, host_os=host_os)
        return Dispatcher(cfg, Timers(), launcher, FactSet(), lambda: tty,
                          environ=environ if environ is not None else {},
                          codegen=codegen)

    return _make
