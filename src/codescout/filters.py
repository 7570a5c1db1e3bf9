"""Ignore rules and include/exclude filters.

A path is judged on its root-relative, ``/``-separated form:

1. any matching ignore rule excludes it;
2. otherwise the first matching exclude filter excludes it;
3. otherwise the first matching include filter includes it;
4. otherwise it is included.

The built-in rule set is a blocklist, so unmatched paths count as scanned.
Glob patterns are matched against the whole relative path, so a pattern
without a slash only names entries in the root.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Mapping
from typing import Any

import pathspec

from codescout.config import FileFilter, FilterAction, IgnoreRule, ScanConfig
from codescout.constants import (
    DEFAULT_EXCLUDE_FILTERS,
    DEFAULT_IGNORE_FILE,
    DEFAULT_IGNORE_RULES,
    DEFAULT_INCLUDE_FILTERS,
    GITIGNORE_RULE_PRIORITY,
)
from codescout.models import FileInfo

logger = logging.getLogger(__name__)

_BRACE_GROUP = re.compile(r"\{([^{}]*,[^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand shell-style brace groups into plain glob patterns.

    Examples:
        >>> expand_braces("**/*.{js,ts}")
        ['**/*.js', '**/*.ts']
    """
    match = _BRACE_GROUP.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return list(dict.fromkeys(expanded))


def anchor_pattern(pattern: str) -> str:
    """Pin a slash-free glob to the repository root.

    Rule and filter patterns are matched against the whole root-relative
    path, so ``*.log`` matches ``debug.log`` but not ``logs/debug.log``.
    Patterns that already carry a slash, or a leading ``!``, are returned
    unchanged.

    Examples:
        >>> anchor_pattern("package-lock.json")
        '/package-lock.json'
        >>> anchor_pattern("dist/**")
        'dist/**'
    """
    if pattern.startswith(("/", "!")) or "/" in pattern.rstrip("/"):
        return pattern
    return "/" + pattern


def to_relative_path(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Return *path* relative to *root* with ``/`` separators."""
    path_str = os.fspath(path)
    root_str = os.fspath(root)
    if not os.path.isabs(path_str):
        path_str = os.path.join(root_str, path_str)
    relative = os.path.relpath(path_str, root_str)
    return relative.replace(os.sep, "/")


def _default_ignore_rules() -> list[IgnoreRule]:
    return [
        IgnoreRule(pattern=pattern, description=description, priority=priority)
        for pattern, description, priority in DEFAULT_IGNORE_RULES
    ]


def _default_filters() -> list[FileFilter]:
    filters = [
        FileFilter(name=name, pattern=pattern, action=FilterAction.INCLUDE, priority=priority)
        for name, pattern, priority in DEFAULT_INCLUDE_FILTERS
    ]
    filters.extend(
        FileFilter(name=name, pattern=pattern, action=FilterAction.EXCLUDE, priority=priority)
        for name, pattern, priority in DEFAULT_EXCLUDE_FILTERS
    )
    return filters


class FileFilterEngine:
    """Decides, path by path, whether a file counts toward scanned coverage."""

    def __init__(
        self,
        filters: Iterable[FileFilter] = (),
        ignore_rules: Iterable[IgnoreRule] = (),
    ):
        self._include_filters: list[FileFilter] = []
        self._exclude_filters: list[FileFilter] = []
        self._ignore_rules: list[IgnoreRule] = []
        self._cache: dict[str, bool] = {}
        self._compiled: dict[str, pathspec.PathSpec | None] = {}
        self._load_defaults()
        self.add_filters(filters)
        self.add_ignore_rules(ignore_rules)

    @classmethod
    def from_config(cls, config: ScanConfig) -> FileFilterEngine:
        """Build an engine holding the built-ins plus the rules of *config*."""
        return cls(filters=config.file_filters, ignore_rules=config.ignore_rules)

    def _load_defaults(self) -> None:
        self.add_filters(_default_filters())
        self.add_ignore_rules(_default_ignore_rules())

    # ── Rule management ────────────────────────────────────────────────

    def add_filters(self, filters: Iterable[FileFilter]) -> None:
        """Add include/exclude filters and re-sort each list by priority.

        Args:
            filters: Filters to add; each goes to the list matching its action
        """
        filters = list(filters)
        if not filters:
            return
        for file_filter in filters:
            if file_filter.action is FilterAction.INCLUDE:
                self._include_filters.append(file_filter)
            else:
                self._exclude_filters.append(file_filter)
        # list.sort is stable: equal priorities keep insertion order
        self._include_filters.sort(key=lambda f: f.priority, reverse=True)
        self._exclude_filters.sort(key=lambda f: f.priority, reverse=True)
        self.clear_cache()

    def add_ignore_rules(self, rules: Iterable[IgnoreRule]) -> None:
        """Add ignore rules, keeping the list ordered by descending priority.

        Args:
            rules: Rules to add
        """
        rules = list(rules)
        if not rules:
            return
        self._ignore_rules.extend(rules)
        self._ignore_rules.sort(key=lambda r: r.priority, reverse=True)
        self.clear_cache()

    def load_ignore_file(
        self, root: str | os.PathLike[str], filename: str = DEFAULT_IGNORE_FILE
    ) -> int:
        """Load line-oriented ignore patterns from ``root/filename``.

        Args:
            root: Repository root
            filename: Name of the ignore file inside *root*

        Returns:
            Number of rules added (0 when the file is missing or unreadable)
        """
        ignore_path = os.path.join(os.fspath(root), filename)
        if not os.path.isfile(ignore_path):
            logger.debug("No ignore file at %s", ignore_path)
            return 0
        try:
            with open(ignore_path, encoding="utf-8", errors="ignore") as f:
                lines = f.readlines()
        except OSError as e:
            logger.warning("Could not read %s: %s", ignore_path, e)
            return 0

        rules = []
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            rules.append(
                IgnoreRule(
                    pattern=stripped,
                    description=f"From {filename}: {stripped}",
                    priority=GITIGNORE_RULE_PRIORITY,
                )
            )
        self.add_ignore_rules(rules)
        logger.debug("Loaded %d ignore rules from %s", len(rules), ignore_path)
        return len(rules)

    def clear_cache(self) -> None:
        """Forget every memoized decision."""
        self._cache.clear()

    def reset(self) -> None:
        """Drop every custom rule and go back to the built-in set."""
        self._include_filters = []
        self._exclude_filters = []
        self._ignore_rules = []
        self._load_defaults()
        self.clear_cache()

    def export_config(self) -> dict[str, list[Any]]:
        """Snapshot the active rules.

        Returns:
            Mapping with ``filters`` (includes, then excludes) and
            ``ignore_rules``, in evaluation order
        """
        return {
            "filters": [*self._include_filters, *self._exclude_filters],
            "ignore_rules": list(self._ignore_rules),
        }

    def import_config(self, config: Mapping[str, Iterable[Any]]) -> None:
        """Replace the current rules with built-ins plus *config*.

        Items may be model instances or plain mappings.
        """
        filters = [
            f if isinstance(f, FileFilter) else FileFilter.model_validate(f)
            for f in config.get("filters", ())
        ]
        rules = [
            r if isinstance(r, IgnoreRule) else IgnoreRule.model_validate(r)
            for r in config.get("ignore_rules", ())
        ]
        self.reset()
        self.add_filters(filters)
        self.add_ignore_rules(rules)

    @property
    def filters(self) -> dict[str, list[FileFilter]]:
        return {"include": list(self._include_filters), "exclude": list(self._exclude_filters)}

    @property
    def ignore_rules(self) -> list[IgnoreRule]:
        return list(self._ignore_rules)

    def statistics(self) -> dict[str, int]:
        """Count the active filters, ignore rules and cached decisions.

        Returns:
            Mapping of counter name to value
        """
        return {
            "include_filters": len(self._include_filters),
            "exclude_filters": len(self._exclude_filters),
            "ignore_rules": len(self._ignore_rules),
            "cache_size": len(self._cache),
        }

    # ── Decisions ──────────────────────────────────────────────────────

    def should_include(self, path: str | os.PathLike[str], root: str | os.PathLike[str]) -> bool:
        """Decide whether *path* counts as a scanned file.

        Args:
            path: Absolute path, or a path relative to *root*
            root: Repository root the rules are anchored at

        Returns:
            True if the path survives the ignore rules and filters
        """
        relative =to_relative_path(path, root)
        cached = self._cache.get(relative)
        if cached is not None:
            return cached

        if self.is_ignored(relative):
            included = False
        else:
            included = self._apply_filters(relative)
        self._cache[relative] = included
        return included

    def is_ignored(self, relative_path: str) -> bool:
        """Whether any ignore rule matches *relative_path*."""
        return any(self._matches(relative_path, rule.pattern) for rule in self._ignore_rules)

    def filter_files(
        self, paths: Iterable[str | os.PathLike[str]], root: str | os.PathLike[str]
    ) -> list[str]:
        """Keep the paths :meth:`should_include` accepts, in input order.

        Args:
            paths: Absolute or root-relative paths
            root: Repository root

        Returns:
            Accepted paths as strings
        """
        return [os.fspath(p) for p in paths if self.should_include(p, root)]

    def filter_file_infos(
        self, infos: Iterable[FileInfo], root: str | os.PathLike[str]
    ) -> list[FileInfo]:
        """Like :meth:`filter_files`, judging each record by its ``path``."""
        return [info for info in infos if self.should_include(info.path, root)]

    def _apply_filters(self, relative_path: str) -> bool:
        for file_filter in self._exclude_filters:
            if self._matches(relative_path, file_filter.pattern):
                return False
        for file_filter in self._include_filters:
            if self._matches(relative_path, file_filter.pattern):
                return True
        return True

    def _matches(self, relative_path: str, pattern: str | re.Pattern[str]) -> bool:
        if isinstance(pattern, re.Pattern):
            return pattern.search(relative_path) is not None
        spec = self._compile(pattern)
        return spec is not None and spec.match_file(relative_path)

    def _compile(self, pattern: str) -> pathspec.PathSpec | None:
        if pattern in self._compiled:
            return self._compiled[pattern]
        try:
            spec = pathspec.PathSpec.from_lines(
                pathspec.patterns.GitWildMatchPattern,
                [anchor_pattern(p) for p in expand_braces(pattern)],
            )
        except ValueError as e:
            logger.warning("Invalid pattern %r: %s", pattern, e)
            spec = None
        self._compiled[pattern] = spec
        return spec
