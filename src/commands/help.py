"""v help - print a help topic."""

import sys

from config import PROG


# ======================================================================
# Topics (embedded strings)
# ======================================================================

TOPICS = {
    "default": f"""\
{PROG} is a tool for managing V source code.

usage: {PROG} [options] [command] [arguments]

examples:
  {PROG} hello.v              compile hello.v and output it as `hello`
  {PROG} run hello.v          same, but also run the program
  {PROG} -prod run hello.v    same, but build an optimized executable
  {PROG} fmt -w hello.v       format hello.v in place

commands:
  run         Compile and run a V program
  crun        Like run, but keep the binary and reuse it when up to date
  build       Compile a V program (default for `{PROG} file.v`)
  build-module  Compile a module into an object file
  new, init   Set up a new project
  install     Install a module (also: list, outdated, remove, search,
              show, update, upgrade)
  vlib-docs   Generate documentation for the standard library
  interpret   Run a program with the bytecode interpreter
  translate   Translate C code to V
  version     Print the version of V
  help        Show help for a topic

Use `{PROG} help <topic>` for more information. Topics: {{topics}}
""",
    "build": f"""\
usage: {PROG} [build flags] [build] <file.v|directory>

Compile the target into an executable.

build flags:
  -b, -backend <name>   c (default), js, js_node, js_freestanding,
                        js_browser, native, interpret, go, wasm
  -o, -output <file>    Name of the output executable
  -os <os>              Target operating system
  -arch <arch>          Target architecture
  -cc <compiler>        C compiler to use (repeatable)
  -cflags <flags>       Extra flags for the C compiler (repeatable)
  -d, -define <flag>    Define a compile time flag (repeatable)
  -prod                 Optimized build, adds the `prod` fact
  -usecache             Reuse cached module objects (not on windows)
  -show-timings         Print how long each phase took
  -v                    Verbose output
""",
    "run": f"""\
usage: {PROG} [build flags] run <file.v|directory|-> [arguments...]

Compile the target and run it with the given arguments.
The executable is removed after it exits. `-` reads the program from stdin.
""",
    "crun": f"""\
usage: {PROG} [build flags] crun <file.v|directory> [arguments...]

Like `{PROG} run`, but keep the executable and only recompile it when a
source file is newer.
""",
    "build-module": f"""\
usage: {PROG} [build flags] build-module <directory>

Compile a module into an object file that later builds can reuse.
""",
    "new": f"""\
usage: {PROG} new [name] [description]
       {PROG} init

Set up a new V project, or turn the current directory into one.
""",
    "install": f"""\
usage: {PROG} install <module>...

Install modules from the package registry.
Related commands: list, outdated, remove, search, show, update, upgrade.
""",
    "version": f"""\
usage: {PROG} version

Print the version of V. With -v, include the full commit hash.
""",
    "other": f"""\
Other commands are standalone tools, run as `{PROG} <tool> [arguments]`,
for example `{PROG} fmt`, `{PROG} test`, `{PROG} doc`, `{PROG} up`.
""",
}

ALIASES = {
    "init": "new",
    "help": "default",
    "list": "install",
    "outdated": "install",
    "remove": "install",
    "search": "install",
    "show": "install",
    "update": "install",
    "upgrade": "install",
    "tools": "other",
}


def known_topic(name: str) -> bool:
    return name in TOPICS or name in ALIASES


def topic_text(name: str) -> str:
    text = TOPICS[ALIASES.get(name, name)]
    if name in ("default", "help"):
        names = ", ".join(sorted(t for t in TOPICS if t != "default"))
        text = text.replace("{topics}", names)
    return text


def run(args: list[str]) -> int:
    if len(args) > 1:
        print(f"`{PROG} help`: provide only one help topic.", file=sys.stderr)
        print(f"For usage information, use `{PROG} help`.", file=sys.stderr)
        return 1

    topic = args[0] if args else "default"
    if not known_topic(topic):
        print(f"error: unknown help topic '{topic}'", file=sys.stderr)
        print(f"run '{PROG} help' for the list of topics", file=sys.stderr)
        return 1

    print(topic_text(topic), end="")
    return 0
