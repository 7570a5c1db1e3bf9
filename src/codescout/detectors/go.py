"""Go project detector."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from codescout.detectors.base import ProjectDetector, module_name_from_path
from codescout.models import Dependency, ModuleInfo, ProjectType

ENTRY_PATTERNS = (
    "main.go",
    "cmd/main.go",
    "app/main.go",
    "server/main.go",
    "cli/main.go",
)

KEY_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")

CONFIG_FILES = (
    "go.mod",
    "go.sum",
    "Makefile",
    "makefile",
    "Taskfile.yml",
    "Taskfile.yaml",
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    ".golangci.yml",
    ".golangci.yaml",
    ".golangci-lint.yml",
    "go.work",
    "go.work.sum",
    ".air.toml",
    "buf.yaml",
    "buf.gen.yaml",
    "buf.work.yaml",
)

DOC_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")

_BLOCK_DIRECTIVES = ("require", "replace", "exclude", "retract")


@dataclass
class GoModFile:
    module: str | None = None
    go: str | None = None
    requires: list[tuple[str, str]] = field(default_factory=list)
    replaces: dict[str, str] = field(default_factory=dict)


def _add_require(go_mod: GoModFile, spec: str) -> None:
    parts = spec.split()
    if len(parts) >= 2:
        go_mod.requires.append((parts[0], parts[1]))


def _add_replace(go_mod: GoModFile, spec: str) -> None:
    old, arrow, new = spec.partition("=>")
    if not arrow or not old.split() or not new.split():
        return
    go_mod.replaces[old.split()[0]] = " ".join(new.split())


def parse_go_mod(content: str) -> GoModFile:
    """Parse the directives of a ``go.mod`` file line by line.

    Recognises ``module``, ``go`` and both the single-line and parenthesised
    forms of ``require`` and ``replace``; other directives are skipped.
    """
    go_mod = GoModFile()
    block: str | None = None

    for raw_line in content.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line:
            continue

        if block is not None:
            if line == ")":
                block = None
            elif block == "require":
                _add_require(go_mod, line)
            elif block == "replace":
                _add_replace(go_mod, line)
            continue

        keyword, _, rest = line.replace("\t", " ").partition(" ")
        rest = rest.strip()
        if keyword in _BLOCK_DIRECTIVES and rest == "(":
            block = keyword
        elif keyword == "module":
            go_mod.module = rest.strip('"') or None
        elif keyword == "go":
            go_mod.go = rest or None
        elif keyword == "require":
            _add_require(go_mod, rest)
        elif keyword == "replace":
            _add_replace(go_mod, rest)

    return go_mod


class GoDetector(ProjectDetector):
    name = "Go"
    type = ProjectType.GO
    patterns = (
        "go.mod",
        "go.sum",
        "main.go",
        "cmd/**/*.go",
        "pkg/**/*.go",
        "internal/**/*.go",
        "api/**/*.go",
        "vendor/**/*",
    )
    manifests = ("go.mod", "main.go", "cmd/main.go")
    source_suffixes = (".go",)

    def confidence_bonus(self, path: str) -> int:
        return 25 if self.file_exists(os.path.join(path, "go.mod")) else 0

    def read_go_mod(self, path: str) -> GoModFile | None:
        content = self.read_text(os.path.join(path, "go.mod"))
        if content is None:
            return None
        return parse_go_mod(content)

    def analyze(self, path: str) -> ModuleInfo:
        go_mod = self.read_go_mod(path) or GoModFile()
        module = self.create_module_info(path, go_mod.module or module_name_from_path(path))

        if go_mod.module:
            module.metadata.description = f"Go module: {go_mod.module}"
        if go_mod.go:
            module.metadata.engines = {"go": go_mod.go}

        module.dependencies = [
            Dependency(name=name, version=version, resolved=go_mod.replaces.get(name))
            for name, version in go_mod.requires
        ]

        module.entry_points = self.find_existing(path, ENTRY_PATTERNS)
        for entry in self.find_matching(path, ["cmd/*/main.go"]):
            if entry not in module.entry_points:
                module.entry_points.append(entry)
        module.key_files = self.find_existing(path, KEY_FILES)
        module.test_files = self.find_matching(path, ["**/*_test.go"])
        module.config_files = self.find_existing(path, CONFIG_FILES)
        module.docs = self.find_existing(path, DOC_FILES)
        return module
