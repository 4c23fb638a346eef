"""External tool registry and the subprocess launcher for delegated tools."""

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Mapping, Optional

from errors import DelegatedFailure
from facts import FACTS_ENV, FactSet


# Subcommands handled by a standalone `v<name>` executable.
EXTERNAL_TOOLS = (
    "ast",
    "bin2v",
    "bug",
    "build-docs",
    "build-examples",
    "build-tools",
    "build-vbinaries",
    "bump",
    "check-md",
    "complete",
    "compress",
    "cover",
    "doc",
    "doctor",
    "download",
    "fmt",
    "git-fmt-hook",
    "gret",
    "ls",
    "missdoc",
    "reduce",
    "repeat",
    "repl",
    "retry",
    "scan",
    "self",
    "setup-freetype",
    "shader",
    "share",
    "should-compile-all",
    "symlink",
    "test",
    "test-all",
    "test-cleancode",
    "test-fmt",
    "test-parser",
    "test-self",
    "time",
    "timeout",
    "tracev",
    "up",
    "vet",
    "watch",
    "where",
    "wipe-cache",
)


def tool_executable(command: str) -> str:
    """Return the executable name for an external tool subcommand."""
    return "v" + command


class ToolLauncher:
    """Runs delegated tools and backend builders as blocking child processes."""

    def __init__(self, tools_dir: Path, verbose: bool = False,
                 facts: Optional[FactSet] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.tools_dir = tools_dir
        self.verbose = verbose
        self.facts = facts
        self.environ = environ

    def resolve(self, tool_name: str) -> Path:
        """Find the executable for tool_name (which may be `builders/js_builder`)."""
        exe_name = tool_name + ".exe" if sys.platform == "win32" else tool_name
        candidate = self.tools_dir / exe_name
        if candidate.is_file():
            return candidate

        found = shutil.which(Path(exe_name).name)
        if found:
            return Path(found)

        raise DelegatedFailure(tool_name, output=f"{candidate} not found")

    def environment(self) -> dict[str, str]:
        env = dict(os.environ if self.environ is None else self.environ)
        if self.facts is not None and len(self.facts):
            env[FACTS_ENV] = self.facts.as_env()
        return env

    def launch(self, tool_name: str, args: list[str]) -> int:
        """Run the tool with args, wait for it, and return its exit status."""
        exe = self.resolve(tool_name)
        cmd = [str(exe), *args]

        if self.verbose:
            print(f"  > {' '.join(cmd)}", file=sys.stderr)

        try:
            result = subprocess.run(cmd, env=self.environment())
        except OSError as e:
            raise DelegatedFailure(tool_name, output=str(e)) from e

        if self.verbose and result.returncode != 0:
            print(f"  {tool_name} exited with status {result.returncode}", file=sys.stderr)

        return result.returncode
