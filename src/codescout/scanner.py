"""Scan orchestration: runs phases in order and records their telemetry."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping

from codescout.config import ScanConfig, create_default_config
from codescout.detectors.registry import DetectorRegistry
from codescout.exceptions import ResourceLimitError, ScanError, UnsupportedPhaseError
from codescout.filters import FileFilterEngine
from codescout.models import (
    DEFAULT_PHASES,
    ProgressEvent,
    ProjectScanResult,
    ScanPhase,
    ScanPhaseRecord,
)
from codescout.recommendations import final_recommendations

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class ScanContext:
    """Everything a phase may touch while it runs.

    A context is bound to one phase execution and closed when the phase
    ends; any use after that raises ``RuntimeError``.
    """

    def __init__(
        self,
        root: str,
        config: ScanConfig,
        result: ProjectScanResult,
        filter_engine: FileFilterEngine,
        registry: DetectorRegistry,
        record: ScanPhaseRecord,
        progress: ProgressCallback | None = None,
    ):
        self._root = root
        self._config = config
        self._result = result
        self._filter_engine = filter_engine
        self._registry = registry
        self._record = record
        self._progress = progress
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Scan context for phase {self._record.phase.value} is closed")

    @property
    def root(self) -> str:
        self._check_open()
        return self._root

    @property
    def config(self) -> ScanConfig:
        self._check_open()
        return self._config

    @property
    def result(self) -> ProjectScanResult:
        self._check_open()
        return self._result

    @property
    def filter_engine(self) -> FileFilterEngine:
        self._check_open()
        return self._filter_engine

    @property
    def registry(self) -> DetectorRegistry:
        self._check_open()
        return self._registry

    @property
    def record(self) -> ScanPhaseRecord:
        self._check_open()
        return self._record

    @property
    def phase(self) -> ScanPhase:
        return self._record.phase

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def report_progress(self, current: int, total: int, message: str) -> None:
        self._check_open()
        if self._progress is None:
            return
        self._progress(
            ProgressEvent(phase=self._record.phase, current=current, total=total, message=message)
        )

    def check_limits(self) -> None:
        """Abort the phase when a hard resource limit has been reached.

        Raises:
            ResourceLimitError: ``FILE_LIMIT_EXCEEDED`` or ``MEMORY_LIMIT_EXCEEDED``
        """
        self._check_open()
        limits = self._config.performance_limits
        stats = self._result.statistics
        if stats.total_files >= limits.max_files:
            raise ResourceLimitError(
                f"Maximum file limit reached: {limits.max_files}",
                "FILE_LIMIT_EXCEEDED",
                self._root,
                self._record.phase,
            )
        if stats.total_size >= limits.memory_limit:
            raise ResourceLimitError(
                f"Memory limit reached: {limits.memory_limit} bytes",
                "MEMORY_LIMIT_EXCEEDED",
                self._root,
                self._record.phase,
            )


class PhaseRunner(ABC):
    """Body of one scan phase."""

    phase: ScanPhase

    @abstractmethod
    def run(self, context: ScanContext) -> None:
        """Populate ``context.result``; raise a :class:`ScanError` on failure."""


def default_runners() -> dict[ScanPhase, PhaseRunner]:
    from codescout.phases import DeepScanPhase, ModuleScanPhase, QuickScanPhase

    return {
        ScanPhase.QUICK: QuickScanPhase(),
        ScanPhase.MODULE: ModuleScanPhase(),
        ScanPhase.DEEP: DeepScanPhase(),
    }


class Scanner:
    """Runs the requested phases over a repository and returns the result.

    Each :meth:`scan` call works on a fresh result and a fresh filter engine,
    so one scanner can be reused across repositories.
    """

    def __init__(
        self,
        config: ScanConfig | None = None,
        registry: DetectorRegistry | None = None,
        runners: Mapping[ScanPhase, PhaseRunner] | None = None,
    ):
        self.config = config or create_default_config()
        self.registry = registry or DetectorRegistry()
        for detector in self.config.detectors:
            self.registry.register(detector)
        self.runners: dict[ScanPhase, PhaseRunner] = dict(
            default_runners() if runners is None else runners
        )

    def scan(
        self,
        path: str | os.PathLike[str],
        phases: Iterable[ScanPhase] | None = None,
        progress: ProgressCallback | None = None,
    ) -> ProjectScanResult:
        """Scan *path* through *phases* (quick, module, deep by default).

        Phases run strictly in the given order and the first failure stops
        the pipeline.

        Args:
            path: Repository root
            phases: Phases to run, in order
            progress: Receives :class:`ProgressEvent` updates

        Returns:
            The finalized scan result

        Raises:
            ScanError: the failing phase's error, with ``phase_record`` set
        """
        root = os.path.abspath(os.fspath(path))
        phases = list(DEFAULT_PHASES if phases is None else phases)
        result = ProjectScanResult(root_path=root)
        filter_engine = FileFilterEngine.from_config(self.config)

        logger.info("Scanning %s (phases: %s)", root, ", ".join(p.value for p in phases))
        for phase in phases:
            self._run_phase(phase, root, result, filter_engine, progress)

        self._finalize(result)
        logger.info(
            "Scan of %s finished: %d modules, %d/%d files scanned in %.2fs",
            root,
            result.statistics.modules_found,
            result.statistics.scanned_files,
            result.statistics.total_files,
            result.statistics.duration,
        )
        return result

    def _run_phase(
        self,
        phase: ScanPhase,
        root: str,
        result: ProjectScanResult,
        filter_engine: FileFilterEngine,
        progress: ProgressCallback | None,
    ) -> None:
        record = ScanPhaseRecord.start(phase)
        result.phases.append(record)
        context = ScanContext(root, self.config, result, filter_engine, self.registry, record, progress)
        logger.info("Phase %s started", phase.value)

        try:
            runner = self.runners.get(phase)
            if runner is None:
                raise UnsupportedPhaseError(
                    f"No implementation available for phase {phase.value}",
                    "UNSUPPORTED_PHASE",
                    root,
                    phase,
                )
            runner.run(context)
        except Exception as e:
            error = e if isinstance(e, ScanError) else ScanError(
                f"Scan failed: {e}", "SCAN_ERROR", root, phase
            )
            record.fail(error.message)
            error.phase_record = record
            logger.error("Phase %s failed: %s", phase.value, error)
            if error is e:
                raise
            raise error from e
        finally:
            context.close()

        record.complete()
        logger.info(
            "Phase %s completed in %.2fs (%d files processed)",
            phase.value,
            record.duration,
            record.files_processed,
        )

    @staticmethod
    def _finalize(result: ProjectScanResult) -> None:
        stats = result.statistics
        stats.duration = sum(record.duration for record in result.phases)
        stats.update_coverage()
        result.recommendations = final_recommendations(result, result.completed_phases())


def scan_project(
    path: str | os.PathLike[str],
    phases: Iterable[ScanPhase] | None = None,
    config: ScanConfig | None = None,
    progress: ProgressCallback | None = None,
) -> ProjectScanResult:
    """Convenience wrapper: scan *path* with a one-off :class:`Scanner`."""
    return Scanner(config=config).scan(path, phases=phases, progress=progress)
