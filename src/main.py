#!/usr/bin/env python3
"""v - front-end dispatcher for the V compiler toolchain.

Routes a command line to a build backend, a builtin action, or one of the
standalone tools shipped with the toolchain.
"""

import atexit
import sys
from pathlib import Path
from typing import Callable, Optional

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config import load_config, stdin_detector
from dispatch import Dispatcher
from errors import DeprecatedCommand, DispatchError, UnknownCommand
from facts import FactSet
from launcher import ToolLauncher
from timers import ExitReport, Timers, timings_enabled


def report(error: DispatchError) -> None:
    """Print a dispatch failure to stderr."""
    if isinstance(error, (UnknownCommand, DeprecatedCommand)):
        # these carry their complete user-facing text
        print(error, file=sys.stderr)
    else:
        print(f"error: {error}", file=sys.stderr)


def main(argv: Optional[list[str]] = None,
         register_exit: Callable[[Callable[[], None]], object] = atexit.register) -> int:
    args = sys.argv[1:] if argv is None else list(argv)

    # the config can still turn printing on below
    timers = Timers(should_print=timings_enabled(args, time_v=False))
    timers.start("v total")
    timers.start("TOTAL")
    # runs on every way out of the process, including errors raised past main()
    register_exit(ExitReport(timers, "TOTAL"))

    timers.start("v start")
    try:
        cfg = load_config()
    except DispatchError as e:
        report(e)
        return e.exit_code
    timers.should_print = timings_enabled(args, cfg.time_v)
    timers.show("v start")

    facts = FactSet()
    launcher = ToolLauncher(cfg.resolved_tools_dir, facts=facts)
    dispatcher = Dispatcher(cfg, timers, launcher, facts, stdin_detector(cfg))

    try:
        return dispatcher.run(args)
    except DispatchError as e:
        report(e)
        return e.exit_code
    finally:
        timers.show("v total")


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
