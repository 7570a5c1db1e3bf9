"""Data models for codescout."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ProjectType(str, Enum):
    """Ecosystem classification of a directory."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    JAVA = "java"
    CSHARP = "csharp"
    PHP = "php"
    RUBY = "ruby"
    UNKNOWN = "unknown"


class ScanPhase(str, Enum):
    """Stages of the scan pipeline, in their default execution order."""

    QUICK = "quick"
    MODULE = "module"
    DEEP = "deep"


DEFAULT_PHASES: tuple[ScanPhase, ...] = (ScanPhase.QUICK, ScanPhase.MODULE, ScanPhase.DEEP)


class PhaseStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class DependencyKind(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"
    PEER = "peer"
    OPTIONAL = "optional"


class RecommendationType(str, Enum):
    SCAN_DEEPER = "scan_deeper"
    ADD_CONFIG = "add_config"
    FIX_STRUCTURE = "fix_structure"
    ADD_DOCS = "add_docs"
    OPTIMIZE = "optimize"


class RecommendationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class FileInfo:
    """Snapshot of a single filesystem entry taken at enumeration time.

    Attributes:
        path: Absolute path to the entry
        name: Base name
        extension: Suffix without the leading dot ("" when there is none)
        size: Size in bytes
        is_directory: Whether the entry is a directory
        modified: Last modification timestamp (local time, no timezone)
        relative_path: Path relative to the scan root, ``/``-separated
    """

    path: str
    name: str
    extension: str
    size: int
    is_directory: bool
    modified: datetime
    relative_path: str


@dataclass(frozen=True)
class Dependency:
    """A declared dependency of a module.

    ``resolved`` holds a replacement target when the manifest redirects the
    dependency (Go ``replace`` directives).
    """

    name: str
    version: str
    kind: DependencyKind = DependencyKind.PRODUCTION
    resolved: str | None = None


@dataclass
class ModuleMetadata:
    description: str | None = None
    version: str | None = None
    author: str | None = None
    license: str | None = None
    repository: str | None = None
    keywords: list[str] = field(default_factory=list)
    scripts: dict[str, str] = field(default_factory=dict)
    engines: dict[str, str] = field(default_factory=dict)


@dataclass
class ModuleInfo:
    """One discovered module.

    ``path`` is always a directory some detector accepted, so ``type`` can
    never be :attr:`ProjectType.UNKNOWN`.
    """

    path: str
    name: str
    type: ProjectType
    entry_points: list[str] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    dev_dependencies: list[Dependency] = field(default_factory=list)
    key_files: list[str] = field(default_factory=list)
    test_files: list[str] = field(default_factory=list)
    config_files: list[str] = field(default_factory=list)
    docs: list[str] = field(default_factory=list)
    metadata: ModuleMetadata = field(default_factory=ModuleMetadata)

    def __post_init__(self) -> None:
        if self.type is ProjectType.UNKNOWN:
            raise ValueError(f"ModuleInfo for {self.path} cannot have an unknown type")


@dataclass
class ScanStatistics:
    total_files: int = 0
    scanned_files: int = 0
    ignored_files: int = 0
    modules_found: int = 0
    duration: float = 0.0  # seconds
    total_size: int = 0  # bytes
    lines_of_code: int = 0
    coverage: float = 0.0  # 0-100

    def update_coverage(self) -> float:
        if self.total_files > 0:
            self.coverage = self.scanned_files / self.total_files * 100
        else:
            self.coverage = 0.0
        return self.coverage


@dataclass
class ScanPhaseRecord:
    """Telemetry for one phase execution.

    Created running, then transitioned exactly once to completed or failed.
    """

    phase: ScanPhase
    start_time: datetime
    end_time: datetime | None = None
    duration: float = 0.0  # seconds
    files_processed: int = 0
    status: PhaseStatus = PhaseStatus.PENDING
    error: str | None = None

    @classmethod
    def start(cls, phase: ScanPhase) -> ScanPhaseRecord:
        return cls(phase=phase, start_time=datetime.now(), status=PhaseStatus.RUNNING)

    def complete(self) -> None:
        self._finish(PhaseStatus.COMPLETED)

    def fail(self, message: str) -> None:
        self.error = message or "unknown error"
        self._finish(PhaseStatus.FAILED)

    def _finish(self, status: PhaseStatus) -> None:
        if self.status is not PhaseStatus.RUNNING:
            raise RuntimeError(f"Phase record for {self.phase.value} is already {self.status.value}")
        self.end_time = datetime.now()
        self.duration = (self.end_time - self.start_time).total_seconds()
        self.status = status


@dataclass
class Recommendation:
    type: RecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    target_path: str | None = None
    action: str | None = None


@dataclass(frozen=True)
class ProgressEvent:
    """Progress notification pushed by a running phase."""

    phase: ScanPhase
    current: int
    total: int
    message: str

    @property
    def percentage(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.current / self.total * 100)


@dataclass
class ProjectScanResult:
    """Root aggregate produced by one scan invocation."""

    root_path: str
    project_type: ProjectType = ProjectType.UNKNOWN
    modules: list[ModuleInfo] = field(default_factory=list)
    phases: list[ScanPhaseRecord] = field(default_factory=list)
    statistics: ScanStatistics = field(default_factory=ScanStatistics)
    recommendations: list[Recommendation] = field(default_factory=list)
    scanned_files: list[FileInfo] = field(default_factory=list)
    ignored_files: list[FileInfo] = field(default_factory=list)

    def completed_phases(self) -> list[ScanPhase]:
        return [r.phase for r in self.phases if r.status is PhaseStatus.COMPLETED]
