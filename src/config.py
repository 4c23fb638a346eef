"""Configuration loading for vfront."""

import os
import platform
import shlex
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

from errors import ConfigurationError


PROG = "v"

GLOBAL_CONFIG_DIR = Path.home() / ".vfront"
GLOBAL_CONFIG_PATH = GLOBAL_CONFIG_DIR / "config.toml"

# Environment variables
VFLAGS_ENV = "VFLAGS"
VROOT_ENV = "VROOT"
TIME_V_ENV = "VFRONT_TIME_V"

STDIN_DETECTION_MODES = ("isatty", "tty", "pipe")


# ======================================================================
# Data classes
# ======================================================================

@dataclass
class DispatchConfig:
    vroot: Path = field(default_factory=lambda: Path(sys.argv[0]).resolve().parent)
    tools_dir: Optional[Path] = None
    time_v: bool = False
    stdin_detection: str = "isatty"
    host_os: str = ""

    def __post_init__(self):
        if not self.host_os:
            self.host_os = host_os()

    @property
    def resolved_tools_dir(self) -> Path:
        return self.tools_dir or self.vroot / "cmd" / "tools"


# ======================================================================
# Host detection
# ======================================================================

OS_NAMES = {
    "darwin": "macos",
    "win32": "windows",
    "cygwin": "windows",
}

ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "i386",
    "i686": "i386",
    "x86": "i386",
    "armv7l": "arm32",
    "riscv64": "rv64",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def host_os() -> str:
    """Return the host OS name the way target OS values are spelled."""
    name = sys.platform
    for prefix, os_name in OS_NAMES.items():
        if name.startswith(prefix):
            return os_name
    # freebsd13 -> freebsd
    return name.rstrip("0123456789") or "linux"


def host_arch() -> str:
    machine = platform.machine().lower()
    return ARCH_NAMES.get(machine, machine or "amd64")


# ======================================================================
# Loading
# ======================================================================

def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(path: Optional[Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> DispatchConfig:
    """Load ~/.vfront/config.toml, returning defaults if not found.

    VROOT and VFRONT_TIME_V from the environment override the file.
    """
    env = os.environ if environ is None else environ
    cfg = DispatchConfig()
    config_path = path or GLOBAL_CONFIG_PATH

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        paths = data.get("paths", {})
        if "vroot" in paths:
            cfg.vroot = Path(paths["vroot"])
        if "tools_dir" in paths:
            cfg.tools_dir = Path(paths["tools_dir"])

        timing = data.get("timing", {})
        cfg.time_v = bool(timing.get("time_v", False))

        terminal = data.get("terminal", {})
        cfg.stdin_detection = terminal.get("stdin_detection", "isatty")

    if env.get(VROOT_ENV):
        cfg.vroot = Path(env[VROOT_ENV])
    if env.get(TIME_V_ENV):
        cfg.time_v = _truthy(env[TIME_V_ENV])

    if cfg.stdin_detection not in STDIN_DETECTION_MODES:
        raise ConfigurationError(
            f"unknown stdin_detection '{cfg.stdin_detection}' in {config_path} "
            f"(valid: {', '.join(STDIN_DETECTION_MODES)})")

    return cfg


def stdin_detector(cfg: DispatchConfig) -> Callable[[], bool]:
    """Return the check used to decide whether stdin is an interactive terminal."""
    if cfg.stdin_detection == "tty":
        return lambda: True
    if cfg.stdin_detection == "pipe":
        return lambda: False

    def _isatty() -> bool:
        stream = sys.stdin
        return stream is not None and stream.isatty()

    return _isatty


def join_env_vflags_and_os_args(args: list[str],
                                environ: Optional[Mapping[str, str]] = None) -> list[str]:
    """Put the contents of VFLAGS ahead of the command line arguments."""
    env = os.environ if environ is None else environ
    vflags = env.get(VFLAGS_ENV, "").strip()
    if not vflags:
        return list(args)
    return shlex.split(vflags) + list(args)
