import pytest

from errors import ConfigurationError
from prefs import Backend, Preferences, ccompiler_type, output_name, parse_args, parse_backend


TOOLS = ["fmt", "test"]
DUPES = ["cc", "d", "define", "cf", "cflags"]
STOPS = ["help", "install"]


def _parse(args):
    return parse_args(TOOLS, args, duplicate_flags=DUPES, stop_commands=STOPS)


def test_defaults() -> None:
    prefs, command = _parse(["build", "x.v"])
    assert command == "build"
    assert prefs.path == "x.v"
    assert prefs.backend == Backend.C
    assert prefs.ccompiler == "cc"
    assert prefs.ccompiler_type == "gcc"
    assert not prefs.is_prod
    assert not prefs.is_help


def test_flags_before_and_after_command() -> None:
    prefs, command = _parse(["-prod", "build", "-o", "app", "x.v", "-v"])
    assert command == "build"
    assert prefs.is_prod
    assert prefs.is_verbose
    assert prefs.out_name == "app"
    assert prefs.path == "x.v"


def test_run_args_follow_the_target() -> None:
    prefs, command = _parse(["run", "x.v", "-prod", "arg"])
    assert command == "run"
    assert prefs.path == "x.v"
    assert prefs.run_args == ("-prod", "arg")
    assert not prefs.is_prod


def test_stdin_target() -> None:
    prefs, _ = _parse(["run", "-"])
    assert prefs.path == "-"


def test_parsing_stops_at_external_tool() -> None:
    prefs, command = _parse(["-v", "fmt", "-w", "--unknown"])
    assert command == "fmt"
    assert prefs.is_verbose
    assert prefs.command_args == ("-w", "--unknown")


def test_parsing_stops_at_stop_command() -> None:
    prefs, command = _parse(["help", "build", "run"])
    assert command == "help"
    assert prefs.command_args == ("build", "run")


def test_direct_target_sets_path() -> None:
    prefs, command = _parse(["hello.v", "-prod"])
    assert command == "hello.v"
    assert prefs.path == "hello.v"
    assert prefs.is_prod


def test_repeatable_flags_accumulate() -> None:
    prefs, _ = _parse(["-d", "trace", "-define", "debug_gc", "-cflags", "-Wall",
                       "-cf", "-fPIC", "-cc", "gcc", "-cc", "clang", "build", "x.v"])
    assert prefs.compile_defines_all == ("trace", "debug_gc")
    assert prefs.cflags == ("-Wall", "-fPIC")
    assert prefs.ccompiler == "clang"
    assert prefs.ccompiler_type == "clang"


def test_other_flags_cannot_repeat() -> None:
    with pytest.raises(ConfigurationError):
        _parse(["-os", "linux", "-os", "windows", "build", "x.v"])


def test_unknown_flag() -> None:
    with pytest.raises(ConfigurationError, match="unknown argument"):
        _parse(["-frobnicate", "build", "x.v"])


def test_missing_flag_value() -> None:
    with pytest.raises(ConfigurationError):
        _parse(["build", "x.v", "-o"])


def test_too_many_targets() -> None:
    with pytest.raises(ConfigurationError, match="too many targets"):
        _parse(["build", "a.v", "b.v"])


def test_too_many_direct_targets() -> None:
    with pytest.raises(ConfigurationError, match="too many targets"):
        _parse(["a.v", "b.v"])


def test_unrecognized_command_keeps_its_operands() -> None:
    prefs, command = _parse(["buld", "hello.v", "-h", "extra"])
    assert command == "buld"
    assert prefs.path == ""
    assert prefs.command_args == ("hello.v", "extra")
    assert prefs.is_help


def test_target_os_and_arch() -> None:
    prefs, _ = _parse(["-os", "Darwin", "-arch", "ARM64", "build", "x.v"])
    assert prefs.os == "macos"
    assert prefs.arch == "arm64"


@pytest.mark.parametrize(
    "name, backend",
    [
        ("c", Backend.C),
        ("js", Backend.JS_NODE),
        ("js_browser", Backend.JS_BROWSER),
        ("js_freestanding", Backend.JS_FREESTANDING),
        ("native", Backend.NATIVE),
        ("interpret", Backend.INTERPRET),
        ("go", Backend.GOLANG),
        ("wasm", Backend.WASM),
    ],
)
def test_parse_backend(name, backend) -> None:
    assert parse_backend(name) == backend


def test_unknown_backend() -> None:
    with pytest.raises(ConfigurationError, match="unknown backend"):
        _parse(["-b", "cobol", "build", "x.v"])


@pytest.mark.parametrize(
    "cc, kind",
    [
        ("gcc", "gcc"),
        ("cc", "gcc"),
        ("/usr/bin/clang-15", "clang"),
        ("tcc", "tinyc"),
        ("g++", "cplusplus"),
        ("x86_64-w64-mingw32-gcc", "mingw"),
        ("msvc", "msvc"),
        ("emcc", "emcc"),
    ],
)
def test_ccompiler_type(cc, kind) -> None:
    assert ccompiler_type(cc) == kind


def test_output_name() -> None:
    assert output_name(Preferences(out_name="app")) == "app"
    assert output_name(Preferences(path="hello.v")) == "hello"
    assert output_name(Preferences(path="-")) == "v_stdin"
