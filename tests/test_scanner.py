import pytest

from codescout.config import create_default_config
from codescout.exceptions import ResourceLimitError, ScanError, UnsupportedPhaseError
from codescout.models import PhaseStatus, ProgressEvent, ScanPhase
from codescout.scanner import PhaseRunner, ScanContext, Scanner
from codescout.settings import Settings


def make_config(**limits):
    return create_default_config(performance_limits=limits, settings=Settings())


class RecordingRunner(PhaseRunner):
    def __init__(self, phase, calls):
        self.phase = phase
        self.calls = calls
        self.context = None

    def run(self, context):
        self.calls.append(self.phase)
        self.context = context
        context.report_progress(1, 2, f"{self.phase.value} half way")


class FailingRunner(PhaseRunner):
    phase = ScanPhase.MODULE

    def run(self, context):
        raise KeyError("missing")


def test_phases_run_in_order_and_complete(tmp_path):
    calls = []
    runners = {p: RecordingRunner(p, calls) for p in ScanPhase}
    events = []
    result = Scanner(config=make_config(), runners=runners).scan(tmp_path, progress=events.append)

    assert calls == [ScanPhase.QUICK, ScanPhase.MODULE, ScanPhase.DEEP]
    assert [r.status for r in result.phases] == [PhaseStatus.COMPLETED] * 3
    assert all(r.end_time is not None and r.duration >= 0 for r in result.phases)
    assert result.statistics.duration == pytest.approx(sum(r.duration for r in result.phases))
    assert all(isinstance(e, ProgressEvent) for e in events)
    assert events[0].percentage == 50


def test_context_is_closed_after_phase(tmp_path):
    calls = []
    runner = RecordingRunner(ScanPhase.QUICK, calls)
    Scanner(config=make_config(), runners={ScanPhase.QUICK: runner}).scan(
        tmp_path, phases=[ScanPhase.QUICK]
    )
    assert isinstance(runner.context, ScanContext)
    assert runner.context.closed
    with pytest.raises(RuntimeError):
        runner.context.result


def test_unsupported_phase_fails_fast(tmp_path):
    calls = []
    runners = {ScanPhase.QUICK: RecordingRunner(ScanPhase.QUICK, calls)}
    scanner = Scanner(config=make_config(), runners=runners)
    with pytest.raises(UnsupportedPhaseError) as excinfo:
        scanner.scan(tmp_path)

    error = excinfo.value
    assert error.code == "UNSUPPORTED_PHASE"
    assert error.phase is ScanPhase.MODULE
    assert error.phase_record.status is PhaseStatus.FAILED
    assert error.phase_record.error
    assert calls == [ScanPhase.QUICK]


def test_unexpected_errors_are_wrapped(tmp_path):
    calls = []
    runners = {
        ScanPhase.QUICK: RecordingRunner(ScanPhase.QUICK, calls),
        ScanPhase.MODULE: FailingRunner(),
        ScanPhase.DEEP: RecordingRunner(ScanPhase.DEEP, calls),
    }
    with pytest.raises(ScanError) as excinfo:
        Scanner(config=make_config(), runners=runners).scan(tmp_path)

    assert excinfo.value.code == "SCAN_ERROR"
    assert excinfo.value.phase is ScanPhase.MODULE
    assert isinstance(excinfo.value.__cause__, KeyError)
    assert ScanPhase.DEEP not in calls


def test_file_limit_stops_the_pipeline(make_tree):
    root = make_tree({f"src/file_{i:02d}.py": "x = 1\n" for i in range(11)})
    scanner = Scanner(config=make_config(max_files=10))
    with pytest.raises(ResourceLimitError) as excinfo:
        scanner.scan(root)

    error = excinfo.value
    assert error.code == "FILE_LIMIT_EXCEEDED"
    assert error.phase is ScanPhase.QUICK
    record = error.phase_record
    assert record.phase is ScanPhase.QUICK
    assert record.status is PhaseStatus.FAILED
    assert record.error


def test_memory_limit(make_tree):
    root = make_tree({"big.txt": "x" * 2048})
    with pytest.raises(ResourceLimitError) as excinfo:
        Scanner(config=make_config(memory_limit=1024)).scan(root)
    assert excinfo.value.code == "MEMORY_LIMIT_EXCEEDED"


def test_each_scan_starts_fresh(make_tree):
    root = make_tree({"go.mod": "module m\n\ngo 1.22\n", "main.go": "package main\n"})
    scanner = Scanner(config=make_config())
    first = scanner.scan(root, phases=[ScanPhase.QUICK])
    second = scanner.scan(root, phases=[ScanPhase.QUICK])
    assert first is not second
    assert len(second.phases) == 1
    assert second.statistics.total_files == first.statistics.total_files


def test_final_recommendations_replace_phase_ones(make_tree):
    root = make_tree({"go.mod": "module m\n", "main.go": "package main\n"})
    result = Scanner(config=make_config()).scan(root)
    titles = [r.title for r in result.recommendations]
    # the module pass ran, so it is no longer suggested
    assert "Analyze modules in depth" not in titles
    assert "Add documentation to modules" in titles


def test_config_detectors_are_registered(make_tree):
    from codescout.detectors import GoDetector

    class VendoredGo(GoDetector):
        name = "Go (custom)"

    config = make_config()
    config.detectors.append(VendoredGo())
    scanner = Scanner(config=config)
    assert scanner.registry.get(VendoredGo.type).name == "Go (custom)"
