"""v version - print the toolchain version."""

import subprocess
from pathlib import Path
from typing import Optional


VERSION = "0.4.3"
VERBOSE_FLAGS = ("v", "verbose")


def commit_hash(vroot: Optional[Path], full: bool = False) -> str:
    """Return the git commit of the toolchain checkout, or '' if unknown."""
    if vroot is None or not (vroot / ".git").exists():
        return ""
    cmd = ["git", "-C", str(vroot), "rev-parse"]
    if not full:
        cmd.append("--short")
    cmd.append("HEAD")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError:
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def full_version(verbose: bool = False, vroot: Optional[Path] = None) -> str:
    commit = commit_hash(vroot, full=verbose)
    return f"V {VERSION} {commit}".rstrip()


def run(args: list[str], verbose: bool = False, vroot: Optional[Path] = None) -> int:
    # `v version -v` leaves the flag among the command arguments
    verbose = verbose or any(a.lstrip("-") in VERBOSE_FLAGS for a in args)
    print(full_version(verbose, vroot))
    return 0
