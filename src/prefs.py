"""Build preferences and the flag parser that produces them.

The parser only understands the flags the dispatcher and the in-process C
build path act on. Everything after a delegated command is left untouched
for the tool that receives it.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

from config import host_arch, host_os
from errors import ConfigurationError


SOURCE_SUFFIX = ".v"


class Backend(Enum):
    C = "c"
    JS_NODE = "js_node"
    JS_FREESTANDING = "js_freestanding"
    JS_BROWSER = "js_browser"
    NATIVE = "native"
    INTERPRET = "interpret"
    GOLANG = "golang"
    WASM = "wasm"


BACKEND_NAMES = {
    "c": Backend.C,
    "js": Backend.JS_NODE,
    "js_node": Backend.JS_NODE,
    "js_freestanding": Backend.JS_FREESTANDING,
    "js_browser": Backend.JS_BROWSER,
    "native": Backend.NATIVE,
    "interpret": Backend.INTERPRET,
    "go": Backend.GOLANG,
    "golang": Backend.GOLANG,
    "wasm": Backend.WASM,
}

OS_ALIASES = {
    "darwin": "macos",
    "mac": "macos",
    "win": "windows",
}


@dataclass(frozen=True)
class Preferences:
    backend: Backend = Backend.C
    os: str = field(default_factory=host_os)
    arch: str = field(default_factory=host_arch)
    ccompiler: str = "cc"
    ccompiler_type: str = "gcc"
    is_prod: bool = False
    is_verbose: bool = False
    is_help: bool = False
    use_cache: bool = False
    show_timings: bool = False
    compile_defines_all: tuple[str, ...] = ()
    cflags: tuple[str, ...] = ()
    out_name: str = ""
    path: str = ""
    run_args: tuple[str, ...] = ()
    command_args: tuple[str, ...] = ()


# ======================================================================
# Flag tables
# ======================================================================

# flag name -> preference it feeds
VALUE_FLAGS = {
    "b": "backend",
    "backend": "backend",
    "os": "os",
    "arch": "arch",
    "cc": "cc",
    "o": "output",
    "output": "output",
    "d": "define",
    "define": "define",
    "cf": "cflags",
    "cflags": "cflags",
}

SWITCH_FLAGS = {
    "prod": "prod",
    "v": "verbose",
    "verbose": "verbose",
    "h": "help",
    "help": "help",
    "usecache": "usecache",
    "show-timings": "show-timings",
    "g": "debug",
    "cg": "debug",
    "keepc": "keepc",
    "stats": "stats",
    "shared": "shared",
    "w": "no-warnings",
}

RUN_COMMANDS = ("run", "crun")
TARGET_COMMANDS = ("run", "crun", "build", "build-module")


def parse_backend(name: str) -> Backend:
    backend = BACKEND_NAMES.get(name.lower())
    if backend is None:
        raise ConfigurationError(
            f"unknown backend `{name}` (valid: {', '.join(sorted(BACKEND_NAMES))})")
    return backend


def ccompiler_type(cc: str) -> str:
    """Classify a C compiler command into the identifier used for build facts."""
    name = Path(cc).name.lower()
    if "++" in name:
        return "cplusplus"
    if "tcc" in name or "tinyc" in name:
        return "tinyc"
    if "clang" in name:
        return "clang"
    if "emcc" in name:
        return "emcc"
    if "mingw" in name:
        return "mingw"
    if "msvc" in name or name in ("cl", "cl.exe"):
        return "msvc"
    return "gcc"


def is_source_target(command: str) -> bool:
    return command.endswith(SOURCE_SUFFIX)


def is_direct_target(command: str) -> bool:
    """A `.v` file or an existing path given in place of a command."""
    return is_source_target(command) or Path(command).exists()


# ======================================================================
# Parsing
# ======================================================================

def parse_args(known_external_commands: Iterable[str], args: list[str],
               duplicate_flags: Iterable[str] = (),
               stop_commands: Iterable[str] = ()) -> tuple[Preferences, str]:
    """Parse args into (Preferences, command).

    Parsing stops at an external tool name or any command in stop_commands;
    the remaining arguments are kept verbatim in Preferences.command_args.
    Value flags may only be repeated when listed in duplicate_flags.
    """
    external = set(known_external_commands)
    stops = set(stop_commands)
    repeatable = set(duplicate_flags)

    values: dict[str, list[str]] = {}
    switches: set[str] = set()
    command = ""
    path = ""
    run_args: list[str] = []
    command_args: list[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        if arg.startswith("-") and arg != "-":
            name = arg.lstrip("-")
            if name in VALUE_FLAGS:
                if i + 1 >= len(args):
                    raise ConfigurationError(f"`{arg}` requires a value")
                key = VALUE_FLAGS[name]
                if key in values and name not in repeatable:
                    raise ConfigurationError(f"flag `{arg}` can only be used once")
                values.setdefault(key, []).append(args[i + 1])
                i += 2
                continue
            if name in SWITCH_FLAGS:
                switches.add(SWITCH_FLAGS[name])
                i += 1
                continue
            raise ConfigurationError(f"unknown argument `{arg}`")

        if not command:
            command = arg
            if command in external or command in stops:
                command_args = args[i + 1:]
                break
            if command not in TARGET_COMMANDS and is_direct_target(command):
                path = command
        elif command in RUN_COMMANDS and not path:
            path = arg
            run_args = args[i + 1:]
            break
        elif command not in TARGET_COMMANDS and not path:
            # unrecognized command; its operands are left for the caller
            command_args.append(arg)
        elif not path:
            path = arg
        else:
            raise ConfigurationError(
                "too many targets, specify just one target: <target.v|target_directory>")
        i += 1

    cc = values.get("cc", ["cc"])[-1]
    target_os = values.get("os", [host_os()])[-1].lower()
    backend = parse_backend(values["backend"][-1]) if "backend" in values else Backend.C

    prefs = Preferences(
        backend=backend,
        os=OS_ALIASES.get(target_os, target_os),
        arch=values.get("arch", [host_arch()])[-1].lower(),
        ccompiler=cc,
        ccompiler_type=ccompiler_type(cc),
        is_prod="prod" in switches,
        is_verbose="verbose" in switches,
        is_help="help" in switches,
        use_cache="usecache" in switches,
        show_timings="show-timings" in switches,
        compile_defines_all=tuple(values.get("define", [])),
        cflags=tuple(values.get("cflags", [])),
        out_name=values.get("output", [""])[-1],
        path=path,
        run_args=tuple(run_args),
        command_args=tuple(command_args),
    )
    return prefs, command


def output_name(prefs: Preferences) -> str:
    """Return the executable name for a build: -o, else the target's stem."""
    if prefs.out_name:
        return prefs.out_name
    if not prefs.path or prefs.path == "-":
        return "v_stdin"
    target = Path(prefs.path)
    return target.stem if target.suffix == SOURCE_SUFFIX else target.resolve().name
