import io

from timers import ExitReport, Timers, format_timing, timings_enabled


def test_measure_unknown_label_is_zero() -> None:
    assert Timers().measure("never started") == 0.0


def test_show_prints_when_enabled() -> None:
    out = io.StringIO()
    t = Timers(should_print=True, out=out)
    t.start("v parsing CLI args")
    ms = t.show("v parsing CLI args")
    assert ms >= 0.0
    line = out.getvalue().strip()
    assert line.endswith("ms v parsing CLI args")


def test_show_is_silent_when_disabled(capsys) -> None:
    t = Timers(should_print=False)
    t.start("x")
    t.show("x")
    assert capsys.readouterr().out == ""


def test_format_timing() -> None:
    assert format_timing(1.5, "TOTAL") == "   1.500 ms TOTAL"


def test_timings_enabled() -> None:
    assert timings_enabled(["-show-timings", "build"], time_v=False)
    assert timings_enabled(["build"], time_v=True)
    assert not timings_enabled(["build"], time_v=False)


def test_exit_report_runs_once() -> None:
    out = io.StringIO()
    t = Timers(should_print=True, out=out)
    t.start("TOTAL")
    report = ExitReport(t, "TOTAL")
    report()
    report()
    assert out.getvalue().count("TOTAL") == 1
