"""In-process build path for the native C backend.

The C code generator itself is provided by whatever package registers a
`vfront.codegen` entry point. This module asks it for a C file, compiles that
with the configured C compiler and, for `run`/`crun`, runs the result.
"""

import importlib.metadata
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional

from errors import ConfigurationError, DelegatedFailure
from facts import FactSet
from prefs import SOURCE_SUFFIX, Preferences, output_name


CODEGEN_GROUP = "vfront.codegen"

# (prefs, facts) -> path of the generated C file
CodeGenerator = Callable[[Preferences, list[str]], Path]


def load_code_generator() -> CodeGenerator:
    """Load the first registered C code generator, by entry point name."""
    entry_points = sorted(importlib.metadata.entry_points(group=CODEGEN_GROUP),
                          key=lambda ep: ep.name)
    if not entry_points:
        raise ConfigurationError(
            f"no C code generator installed (entry point group '{CODEGEN_GROUP}')")
    return entry_points[0].load()


def cc_command(prefs: Preferences, c_file: Path, output: Path) -> list[str]:
    """Build the C compiler command line."""
    cmd = [prefs.ccompiler]

    if prefs.ccompiler_type == "msvc":
        cmd.append("/O2" if prefs.is_prod else "/Zi")
        for flags in prefs.cflags:
            cmd.extend(shlex.split(flags))
        cmd.append(str(c_file))
        cmd.append(f"/Fe:{output}")
        return cmd

    # Optimization
    if prefs.is_prod:
        cmd.append("-O2")
    else:
        cmd.append("-g")

    # User flags, in the order given
    for flags in prefs.cflags:
        cmd.extend(shlex.split(flags))

    cmd.extend(["-o", str(output), str(c_file)])

    if prefs.os != "windows":
        cmd.append("-lm")
    return cmd


def _newest_source_mtime(target: Path) -> float:
    if target.is_dir():
        mtimes = [p.stat().st_mtime for p in target.rglob("*" + SOURCE_SUFFIX)]
        return max(mtimes, default=0.0)
    return target.stat().st_mtime


def is_up_to_date(output: Path, target: Path) -> bool:
    """True when output exists and is newer than every source in target."""
    if not output.exists() or not target.exists():
        return False
    return output.stat().st_mtime >= _newest_source_mtime(target)


class CBuild:
    """One native C build: generate C, compile it, maybe run it."""

    def __init__(self, prefs: Preferences, command: str, facts: FactSet,
                 codegen: Optional[CodeGenerator] = None):
        self.prefs = prefs
        self.command = command
        self.facts = facts
        self.codegen = codegen
        self.output = Path(output_name(prefs))
        if prefs.os == "windows" and not self.output.suffix:
            self.output = self.output.with_suffix(".exe")

    def _run_checked(self, cmd: list[str], tool_name: str) -> int:
        if self.prefs.is_verbose:
            print(f"  > {' '.join(cmd)}", file=sys.stderr)
        try:
            result = subprocess.run(cmd)
        except OSError as e:
            raise DelegatedFailure(tool_name, output=str(e)) from e
        return result.returncode

    def compile(self) -> int:
        """Generate C and compile it. Returns the C compiler's exit status."""
        if not self.prefs.path:
            raise ConfigurationError(f"v {self.command}: no source target given")

        if (self.command == "crun" and self.prefs.path != "-"
                and is_up_to_date(self.output, Path(self.prefs.path))):
            if self.prefs.is_verbose:
                print(f"  {self.output} is up to date", file=sys.stderr)
            return 0

        codegen = self.codegen or load_code_generator()
        c_file = codegen(self.prefs, self.facts.as_list())
        cmd = cc_command(self.prefs, Path(c_file), self.output)
        return self._run_checked(cmd, self.prefs.ccompiler)

    def run(self) -> int:
        exe = self.output.resolve()
        try:
            return self._run_checked([str(exe), *self.prefs.run_args], str(exe))
        finally:
            # `run` builds a throwaway binary, `crun` keeps it for the next call
            if self.command == "run" and exe.exists():
                exe.unlink()

    def build(self) -> int:
        status = self.compile()
        if status != 0 or self.command not in ("run", "crun"):
            return status
        return self.run()


def compile_c(prefs: Preferences, command: str, facts: FactSet,
              codegen: Optional[CodeGenerator] = None) -> int:
    """Build (and for run/crun, execute) the target with the in-process C backend."""
    return CBuild(prefs, command, facts, codegen).build()
