"""Backend selection: route a build request to its code generation path."""

from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, assert_never

from cbuilder import CodeGenerator, compile_c
from facts import FactSet, build_facts
from launcher import ToolLauncher
from prefs import Backend, Preferences


@dataclass
class BuildContext:
    """Everything a backend handler needs for one build request."""
    prefs: Preferences
    command: str
    raw_args: list[str]
    launcher: ToolLauncher
    facts: FactSet
    environ: Optional[Mapping[str, str]] = None
    codegen: Optional[CodeGenerator] = field(default=None, repr=False)


Handler = Callable[[BuildContext], int]


def build_native_c(ctx: BuildContext) -> int:
    """The C backend runs in-process."""
    return compile_c(ctx.prefs, ctx.command, ctx.facts, ctx.codegen)


class DelegatedBuilder:
    """Handler that hands the raw arguments to a standalone builder executable."""

    def __init__(self, tool: str):
        self.tool = tool

    def __call__(self, ctx: BuildContext) -> int:
        return ctx.launcher.launch(self.tool, ctx.raw_args)

    def __eq__(self, other) -> bool:
        return isinstance(other, DelegatedBuilder) and other.tool == self.tool

    def __hash__(self) -> int:
        return hash(self.tool)

    def __repr__(self) -> str:
        return f"DelegatedBuilder({self.tool!r})"


def select_backend(backend: Backend) -> Handler:
    """Return the handler for a backend. Every variant must have a case."""
    match backend:
        case Backend.C:
            return build_native_c
        case Backend.JS_NODE | Backend.JS_FREESTANDING | Backend.JS_BROWSER:
            return DelegatedBuilder("builders/js_builder")
        case Backend.NATIVE:
            return DelegatedBuilder("builders/native_builder")
        case Backend.INTERPRET:
            return DelegatedBuilder("builders/interpret_builder")
        case Backend.GOLANG:
            return DelegatedBuilder("builders/golang_builder")
        case Backend.WASM:
            return DelegatedBuilder("builders/wasm_builder")
        case _:
            assert_never(backend)


# Built at import so a backend without a case fails immediately.
BACKEND_HANDLERS: dict[Backend, Handler] = {b: select_backend(b) for b in Backend}


def rebuild(ctx: BuildContext) -> int:
    """Register this build's facts, then run the selected backend."""
    ctx.facts.register(build_facts(ctx.prefs, ctx.environ))
    handler = BACKEND_HANDLERS[ctx.prefs.backend]
    return handler(ctx)
