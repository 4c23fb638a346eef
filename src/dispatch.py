"""Command resolution: map an argument vector to exactly one action.

resolve() decides what to do and has no side effects beyond timing.
execute() does it and returns the exit status. Failures are raised as
DispatchError subclasses and turned into a status by main().
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping, Optional, assert_never

import backends
from cbuilder import CodeGenerator
from commands import help as help_cmd
from commands import version as version_cmd
from config import PROG, DispatchConfig, join_env_vflags_and_os_args
from errors import DeprecatedCommand, PlatformUnsupported, UnknownCommand
from facts import FactSet
from launcher import EXTERNAL_TOOLS, ToolLauncher, tool_executable
from prefs import Preferences, is_direct_target, parse_args
from suggest import Suggestion
from timers import Timers


REPL_TOOL = "vrepl"
REPL_SHORTCUTS = ("-", "repl")
STDIN_RUN = ["run", "-"]

BUILD_COMMANDS = ("run", "crun", "build", "build-module")
FIXED_RESPONSE_COMMANDS = ("help", "version")
PACKAGE_COMMANDS = (
    "install", "list", "outdated", "remove", "search", "show", "update", "upgrade",
)

# builtin command -> tool it is delegated to
DELEGATED_COMMANDS = {
    "new": "vcreate",
    "init": "vcreate",
    **{name: "vpm" for name in PACKAGE_COMMANDS},
    "vlib-docs": "vdoc",
    "interpret": "builders/interpret_builder",
    "translate": "translate",
}

# delegations that ignore the command line and always get these arguments
FIXED_TOOL_ARGS = {
    "vlib-docs": ["doc", "vlib"],
}

DEPRECATED_COMMANDS = {
    "get": f"V Error: Use `{PROG} install` to install modules from vpm.vlang.io",
}

BUILTIN_COMMANDS = tuple(sorted(
    BUILD_COMMANDS
    + FIXED_RESPONSE_COMMANDS
    + tuple(DELEGATED_COMMANDS)
    + tuple(DEPRECATED_COMMANDS)
))

# commands whose arguments belong to someone else and are not parsed as flags
STOP_COMMANDS = tuple(c for c in BUILTIN_COMMANDS if c not in BUILD_COMMANDS)

# value flags that may be given more than once
DUPLICATE_FLAGS = ("cc", "d", "define", "cf", "cflags")

# names offered when a command is not recognized
SUGGESTABLE_COMMANDS = tuple(sorted(set(EXTERNAL_TOOLS) | set(BUILTIN_COMMANDS)))


class State(Enum):
    NO_ARGS = "no-args"
    REPL_SHORTCUT = "repl-shortcut"
    EXTERNAL_TOOL = "external-tool"
    BUILTIN_ACTION = "builtin-action"
    DIRECT_FILE_PATH = "direct-file-path"
    UNKNOWN = "unknown"


@dataclass
class Resolution:
    """The single action an invocation resolved to."""
    state: State
    command: str = ""
    prefs: Optional[Preferences] = None
    raw_args: list[str] = field(default_factory=list)
    tool: str = ""
    tool_args: list[str] = field(default_factory=list)
    message: str = ""


def unknown_command_message(command: str) -> str:
    suggestion = Suggestion(command, SUGGESTABLE_COMMANDS)
    text = suggestion.say(f"{PROG}: unknown command `{command}`")
    return f"{text}\nRun `{PROG} help` for usage."


class Dispatcher:
    """Resolves and executes one invocation of the front end."""

    def __init__(self, config: DispatchConfig, timers: Timers, launcher: ToolLauncher,
                 facts: FactSet, stdin_is_tty: Callable[[], bool],
                 environ: Optional[Mapping[str, str]] = None,
                 codegen: Optional[CodeGenerator] = None):
        self.config = config
        self.timers = timers
        self.launcher = launcher
        self.facts = facts
        self.stdin_is_tty = stdin_is_tty
        self.environ = environ
        self.codegen = codegen

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, args: list[str]) -> Resolution:
        raw_args = list(args)
        from_stdin = False

        if not raw_args:
            if self.stdin_is_tty():
                return Resolution(State.REPL_SHORTCUT, command="repl", tool=REPL_TOOL)
            # piped input: build and run the program read from stdin
            raw_args = list(STDIN_RUN)
            from_stdin = True
        elif raw_args[0] in REPL_SHORTCUTS:
            return Resolution(State.REPL_SHORTCUT, command=raw_args[0],
                              raw_args=raw_args, tool=REPL_TOOL, tool_args=raw_args)

        self.timers.start("v parsing CLI args")
        merged = join_env_vflags_and_os_args(raw_args, self.environ)
        prefs, command = parse_args(EXTERNAL_TOOLS, merged,
                                    duplicate_flags=DUPLICATE_FLAGS,
                                    stop_commands=STOP_COMMANDS)
        self.timers.show("v parsing CLI args")

        if prefs.use_cache and self.config.host_os == "windows":
            raise PlatformUnsupported("-usecache is currently disabled on windows")

        resolved = Resolution(State.BUILTIN_ACTION, command=command, prefs=prefs,
                              raw_args=raw_args)

        if command in EXTERNAL_TOOLS:
            resolved.state = State.EXTERNAL_TOOL
            resolved.tool = tool_executable(command)
            resolved.tool_args = raw_args
            return resolved

        if command in BUILD_COMMANDS or command in DEPRECATED_COMMANDS:
            if from_stdin:
                resolved.state = State.NO_ARGS
            return resolved

        if command in FIXED_RESPONSE_COMMANDS:
            resolved.tool_args = list(prefs.command_args)
            return resolved

        if command in DELEGATED_COMMANDS:
            resolved.tool = DELEGATED_COMMANDS[command]
            resolved.tool_args = list(FIXED_TOOL_ARGS.get(command, raw_args))
            return resolved

        if command and is_direct_target(command):
            resolved.state = State.DIRECT_FILE_PATH
            return resolved

        if prefs.is_help:
            resolved.command = "help"
            resolved.tool_args = [command] if help_cmd.known_topic(command) else []
            return resolved

        resolved.state = State.UNKNOWN
        resolved.message = unknown_command_message(command)
        return resolved

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, resolution: Resolution) -> int:
        if resolution.prefs is not None:
            self.launcher.verbose = resolution.prefs.is_verbose

        match resolution.state:
            case State.REPL_SHORTCUT | State.EXTERNAL_TOOL:
                return self.launcher.launch(resolution.tool, resolution.tool_args)
            case State.NO_ARGS:
                return self.rebuild(resolution, resolution.command)
            case State.DIRECT_FILE_PATH:
                return self.rebuild(resolution, "build")
            case State.BUILTIN_ACTION:
                return self._builtin(resolution)
            case State.UNKNOWN:
                raise UnknownCommand(resolution.command, resolution.message)
            case _:
                assert_never(resolution.state)

    def _builtin(self, resolution: Resolution) -> int:
        command = resolution.command
        prefs = resolution.prefs

        if command in BUILD_COMMANDS:
            return self.rebuild(resolution, command)
        if command == "help":
            return help_cmd.run(resolution.tool_args)
        if command == "version":
            return version_cmd.run(resolution.tool_args,
                                   verbose=prefs is not None and prefs.is_verbose,
                                   vroot=self.config.vroot)
        if command in DEPRECATED_COMMANDS:
            raise DeprecatedCommand(command, DEPRECATED_COMMANDS[command])
        return self.launcher.launch(resolution.tool, resolution.tool_args)

    def rebuild(self, resolution: Resolution, command: str) -> int:
        ctx = backends.BuildContext(
            prefs=resolution.prefs,
            command=command,
            raw_args=resolution.raw_args,
            launcher=self.launcher,
            facts=self.facts,
            environ=self.environ,
            codegen=self.codegen,
        )
        self.timers.start("v build")
        try:
            return backends.rebuild(ctx)
        finally:
            self.timers.show("v build")

    def run(self, args: list[str]) -> int:
        return self.execute(self.resolve(args))
