"""Detector registry: classification, analysis and module discovery."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping

from codescout.detectors.base import ProjectDetector
from codescout.detectors.go import GoDetector
from codescout.detectors.java import JavaDetector
from codescout.detectors.javascript import JavaScriptDetector, TypeScriptDetector
from codescout.detectors.python import PythonDetector
from codescout.detectors.rust import RustDetector
from codescout.exceptions import ClassificationError, ModuleAnalysisError
from codescout.models import ModuleInfo, ProjectType

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 50
PATTERN_SCORE = 10
MAX_PATTERN_SCORE = 30
MAX_CONFIDENCE = 100


def default_detectors() -> list[ProjectDetector]:
    """Built-in detectors in registration (tie-break) order."""
    return [
        JavaScriptDetector(),
        TypeScriptDetector(),
        PythonDetector(),
        GoDetector(),
        RustDetector(),
        JavaDetector(),
    ]


class DetectorRegistry:
    """Maps each :class:`ProjectType` to the detector responsible for it.

    Iteration order is registration order; when two detectors score the same
    confidence for a path, the one registered first wins.
    """

    def __init__(self, detectors: Iterable[ProjectDetector] | None = None):
        self._detectors: dict[ProjectType, ProjectDetector] = {}
        for detector in default_detectors() if detectors is None else detectors:
            self.register(detector)

    def register(self, detector: ProjectDetector) -> None:
        """Register *detector*, replacing any detector for the same type in place.

        A replacement keeps the original registration slot, and with it the
        tie-break position.

        Args:
            detector: Detector to add

        Raises:
            ValueError: if the detector claims :attr:`ProjectType.UNKNOWN`
        """
        if detector.type is ProjectType.UNKNOWN:
            raise ValueError(f"Detector {detector!r} does not declare a project type")
        if detector.type in self._detectors:
            logger.debug("Replacing detector for %s", detector.type.value)
        self._detectors[detector.type] = detector

    def unregister(self, project_type: ProjectType) -> ProjectDetector | None:
        """Remove and return the detector for *project_type*, if any."""
        return self._detectors.pop(project_type, None)

    def get(self, project_type: ProjectType) -> ProjectDetector | None:
        """Return the detector registered for *project_type*, or None."""
        return self._detectors.get(project_type)

    def supported(self) -> list[dict[str, object]]:
        """Describe the registered detectors.

        Returns:
            One ``{"type", "name", "patterns"}`` mapping per detector, in
            registration order
        """
        return [
            {"type": project_type, "name": detector.name, "patterns": list(detector.patterns)}
            for project_type, detector in self._detectors.items()
        ]

    def __len__(self) -> int:
        return len(self._detectors)

    def __contains__(self, project_type: object) -> bool:
        return project_type in self._detectors

    # ── Classification ─────────────────────────────────────────────────

    def confidence(self, path: str, detector: ProjectDetector) -> int:
        """Score how strongly *detector* claims *path* (50-100)."""
        score = BASE_CONFIDENCE
        score += min(MAX_PATTERN_SCORE, PATTERN_SCORE * detector.count_present_patterns(path))
        score += detector.confidence_bonus(path)
        return min(score, MAX_CONFIDENCE)

    def detect_project_type(self, path: str) -> ProjectType:
        """Classify *path* by the highest-confidence detector that claims it.

        A detector that raises is logged and treated as not matching.

        Args:
            path: Directory to classify

        Returns:
            The winning project type, or :attr:`ProjectType.UNKNOWN`
        """
        best_type = ProjectType.UNKNOWN
        best_score = -1
        for project_type, detector in self._detectors.items():
            try:
                if not detector.detect(path):
                    continue
                score = self.confidence(path, detector)
            except Exception as e:
                logger.warning("Detector %s failed on %s: %s", detector.name, path, e)
                continue
            # strict comparison keeps the earlier registration on ties
            if score > best_score:
                best_type, best_score = project_type, score
        return best_type

    def detect_project_types(self, paths: Iterable[str]) -> dict[str, ProjectType]:
        """Classify each of *paths*; see :meth:`detect_project_type`."""
        return {path: self.detect_project_type(path) for path in paths}

    def is_module_root(self, path: str) -> bool:
        """Whether any registered detector claims *path*."""
        return self.detect_project_type(path) is not ProjectType.UNKNOWN

    # ── Analysis ───────────────────────────────────────────────────────

    def analyze_module(self, path: str, project_type: ProjectType | None = None) -> ModuleInfo:
        """Run the full analysis of the detector owning *path*.

        Args:
            path: Module root directory
            project_type: Skip detection and use this type's detector

        Raises:
            ClassificationError: the type is unknown or has no detector
            ModuleAnalysisError: the detector failed while analyzing
        """
        project_type = project_type or self.detect_project_type(path)
        if project_type is ProjectType.UNKNOWN:
            raise ClassificationError(
                f"Unable to determine project type of {path}", "UNKNOWN_PROJECT_TYPE", path
            )

        detector = self._detectors.get(project_type)
        if detector is None:
            raise ClassificationError(
                f"No detector registered for project type {project_type.value}",
                "DETECTOR_NOT_FOUND",
                path,
            )

        try:
            return detector.analyze(path)
        except ModuleAnalysisError:
            raise
        except Exception as e:
            raise ModuleAnalysisError(
                f"Module analysis failed: {e}", "MODULE_ANALYSIS_FAILED", path
            ) from e

    def analyze_modules(
        self,
        paths: Iterable[str],
        project_types: Mapping[str, ProjectType] | None = None,
    ) -> dict[str, ModuleInfo]:
        """Analyze each path, logging and omitting the ones that fail."""
        results: dict[str, ModuleInfo] = {}
        for path in paths:
            try:
                results[path] = self.analyze_module(
                    path, project_types.get(path) if project_types else None
                )
            except (ClassificationError, ModuleAnalysisError) as e:
                logger.warning("Skipping module %s: %s", path, e)
        return results

    # ── Discovery ──────────────────────────────────────────────────────

    def find_modules(self, root: str, max_depth: int = 3) -> list[str]:
        """Find module roots below *root*, outermost first.

        Subdirectories are visited depth-first in name order. Hidden
        directories are skipped, and a directory recognised as a module root
        is recorded without descending into it, so nested modules are never
        reported.

        Args:
            root: Directory to search (not itself a candidate)
            max_depth: Deepest directory level visited below *root*

        Returns:
            Module root paths in discovery order
        """
        modules: list[str] = []
        self._find_modules(root, 0, max_depth, modules)
        return modules

    def _find_modules(self, current: str, depth: int, max_depth: int, modules: list[str]) -> None:
        if depth > max_depth:
            return
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning("Cannot read directory %s: %s", current, e)
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir():
                    continue
            except OSError as e:
                logger.warning("Skipping unreadable entry %s: %s", entry.path, e)
                continue
            if self.is_module_root(entry.path):
                modules.append(entry.path)
            else:
                self._find_modules(entry.path, depth + 1, max_depth, modules)
