"""Base class and shared helpers for project detectors."""

from __future__ import annotations

import json
import logging
import os
import pathlib
import re
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

import pathspec

from codescout.constants import SKIP_DIRS
from codescout.models import Dependency, DependencyKind, ModuleInfo, ModuleMetadata, ProjectType

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")

_REQUIREMENT = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)\s*(?:\[[^\]]*\])?\s*(.*)$")


def module_name_from_path(path: str) -> str:
    return os.path.basename(os.path.normpath(path)) or "unknown"


def parse_requirement(
    requirement: str, kind: DependencyKind = DependencyKind.PRODUCTION
) -> Dependency | None:
    """Split a PEP 508-ish requirement string into name and version spec.

    Examples:
        >>> parse_requirement("requests[socks]>=2.31; python_version > '3.8'")
        Dependency(name='requests', version='>=2.31', kind=<DependencyKind.PRODUCTION: 'production'>, resolved=None)
    """
    spec = requirement.split(";", 1)[0].strip()
    match = _REQUIREMENT.match(spec)
    if not match:
        return None
    version = match.group(2).strip().strip("()").strip()
    return Dependency(name=match.group(1), version=version or "*", kind=kind)


class ProjectDetector(ABC):
    """Classifier for one ecosystem.

    Detection succeeds when one of ``manifests`` exists in the directory or,
    failing that, when the directory directly holds a file ending with one of
    ``source_suffixes``. ``patterns`` are the files whose presence raises the
    detection confidence.
    """

    name: str = ""
    type: ProjectType = ProjectType.UNKNOWN
    patterns: tuple[str, ...] = ()
    manifests: tuple[str, ...] = ()
    source_suffixes: tuple[str, ...] = ()

    def detect(self, path: str) -> bool:
        for manifest in self.manifests:
            if self.file_exists(os.path.join(path, manifest)):
                return True
        return self.has_files_with_suffix(path, self.source_suffixes)

    @abstractmethod
    def analyze(self, path: str) -> ModuleInfo:
        """Extract full module information for *path*."""

    def confidence_bonus(self, path: str) -> int:
        """Ecosystem-specific score added on top of the pattern score."""
        return 0

    def count_present_patterns(self, path: str) -> int:
        return sum(1 for pattern in self.patterns if self.pattern_present(path, pattern))

    # ── Filesystem helpers ─────────────────────────────────────────────

    @staticmethod
    def file_exists(file_path: str) -> bool:
        return os.path.isfile(file_path)

    @staticmethod
    def pattern_present(path: str, pattern: str) -> bool:
        if not any(c in pattern for c in _GLOB_CHARS):
            return os.path.exists(os.path.join(path, pattern))
        try:
            return next(pathlib.Path(path).glob(pattern), None) is not None
        except (OSError, ValueError):
            return False

    @staticmethod
    def has_files_with_suffix(path: str, suffixes: Iterable[str]) -> bool:
        suffixes = tuple(suffixes)
        if not suffixes:
            return False
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    if entry.name.endswith(suffixes) and entry.is_file():
                        return True
        except OSError:
            pass
        return False

    @staticmethod
    def read_text(file_path: str) -> str | None:
        try:
            with open(file_path, encoding="utf-8", errors="ignore") as f:
                return f.read()
        except OSError:
            return None

    def read_json(self, file_path: str) -> Any | None:
        content = self.read_text(file_path)
        if content is None:
            return None
        try:
            return json.loads(content)
        except ValueError:
            logger.debug("Malformed JSON in %s", file_path)
            return None

    def read_toml(self, file_path: str) -> dict[str, Any] | None:
        content = self.read_text(file_path)
        if content is None:
            return None
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError:
            logger.debug("Malformed TOML in %s", file_path)
            return None

    def find_existing(self, path: str, names: Iterable[str]) -> list[str]:
        """Return ``path/name`` for every *name* that exists, in order."""
        found: list[str] = []
        for name in names:
            full_path = os.path.join(path, name)
            if os.path.exists(full_path) and full_path not in found:
                found.append(full_path)
        return found

    def find_matching(
        self, path: str, patterns: Iterable[str], limit: int = 50, max_depth: int = 6
    ) -> list[str]:
        """Collect files under *path* matching any glob in *patterns*.

        Hidden and dependency/build directories are not descended into.

        Returns:
            Sorted absolute paths, at most *limit* of them
        """
        spec = pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, patterns)
        matches: list[str] = []
        base_depth = os.path.normpath(path).count(os.sep)
        for root, dirs, files in os.walk(path, topdown=True):
            dirs[:] = sorted(
                d for d in dirs if not d.startswith(".") and d not in SKIP_DIRS
            )
            if os.path.normpath(root).count(os.sep) - base_depth >= max_depth:
                dirs[:] = []
            for filename in sorted(files):
                file_path = os.path.join(root, filename)
                relative = os.path.relpath(file_path, path).replace(os.sep, "/")
                if spec.match_file(relative):
                    matches.append(file_path)
                    if len(matches) >= limit:
                        return sorted(matches)
        return sorted(matches)

    # ── Module construction ────────────────────────────────────────────

    def create_module_info(
        self, path: str, name: str, metadata: ModuleMetadata | None = None
    ) -> ModuleInfo:
        return ModuleInfo(
            path=path,
            name=name,
            type=self.type,
            metadata=metadata or ModuleMetadata(),
        )

    @staticmethod
    def parse_dependencies(
        deps: Any, kind: DependencyKind = DependencyKind.PRODUCTION
    ) -> list[Dependency]:
        """Turn a ``{name: version}`` mapping into dependencies."""
        if not isinstance(deps, dict):
            return []
        return [
            Dependency(name=name, version=version if isinstance(version, str) else "*", kind=kind)
            for name, version in deps.items()
        ]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type.value}>"
