"""Exception hierarchy.

Every scan failure carries a machine-readable ``code``, the offending
``path`` and, when known, the active :class:`~codescout.models.ScanPhase`.
The orchestrator attaches the failed phase record before re-raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codescout.models import ScanPhase, ScanPhaseRecord


class CodeScoutError(Exception):
    """Base exception for the entire package."""


class ScanError(CodeScoutError):
    """A scan could not produce a trustworthy result."""

    def __init__(
        self,
        message: str,
        code: str = "SCAN_ERROR",
        path: str | None = None,
        phase: ScanPhase | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.path = path
        self.phase = phase
        self.phase_record: ScanPhaseRecord | None = None

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ── Classification ──────────────────────────────────────────────────────────


class ClassificationError(ScanError):
    """A path could not be classified, or no detector handles its type."""


class ModuleAnalysisError(ScanError):
    """A detector's deep analysis of a module failed."""


# ── Orchestration ───────────────────────────────────────────────────────────


class UnsupportedPhaseError(ScanError):
    """No phase implementation is available for the requested phase."""


class ResourceLimitError(ScanError):
    """A configured file-count or memory limit was reached."""


# ── Configuration ───────────────────────────────────────────────────────────


class ConfigurationError(CodeScoutError):
    """A scan configuration failed shape validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid scan configuration: " + "; ".join(self.errors))
