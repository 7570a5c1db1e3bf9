"""Rust (Cargo) project detector."""

from __future__ import annotations

import os
from typing import Any

from codescout.detectors.base import ProjectDetector, module_name_from_path
from codescout.models import Dependency, DependencyKind, ModuleInfo, ModuleMetadata, ProjectType

ENTRY_PATTERNS = ("src/main.rs", "src/lib.rs", "main.rs", "lib.rs")
KEY_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")
CONFIG_FILES = (
    "Cargo.toml",
    "Cargo.lock",
    "rust-toolchain",
    "rust-toolchain.toml",
    "rustfmt.toml",
    ".rustfmt.toml",
    "clippy.toml",
    "build.rs",
)
DOC_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")


def _cargo_dependencies(table: Any, kind: DependencyKind) -> list[Dependency]:
    if not isinstance(table, dict):
        return []
    dependencies = []
    for name, spec in table.items():
        if isinstance(spec, str):
            version = spec
        elif isinstance(spec, dict):
            version = spec.get("version") or spec.get("git") or spec.get("path") or "*"
        else:
            version = "*"
        dependencies.append(Dependency(name=name, version=version, kind=kind))
    return dependencies


class RustDetector(ProjectDetector):
    name = "Rust"
    type = ProjectType.RUST
    patterns = ("Cargo.toml", "Cargo.lock", "src/main.rs", "src/lib.rs", "build.rs")
    manifests = ("Cargo.toml",)
    source_suffixes = (".rs",)

    def analyze(self, path: str) -> ModuleInfo:
        cargo = self.read_toml(os.path.join(path, "Cargo.toml")) or {}
        package = cargo.get("package") or {}

        authors = package.get("authors") or []
        engines = {}
        if isinstance(package.get("rust-version"), str):
            engines["rust"] = package["rust-version"]
        if isinstance(package.get("edition"), str):
            engines["edition"] = package["edition"]

        metadata = ModuleMetadata(
            description=package.get("description") if isinstance(package.get("description"), str) else None,
            version=package.get("version") if isinstance(package.get("version"), str) else None,
            author=authors[0] if authors and isinstance(authors[0], str) else None,
            license=package.get("license") if isinstance(package.get("license"), str) else None,
            repository=package.get("repository") if isinstance(package.get("repository"), str) else None,
            keywords=list(package.get("keywords") or []),
            engines=engines,
        )
        module = self.create_module_info(
            path, package.get("name") or module_name_from_path(path), metadata
        )
        module.dependencies = _cargo_dependencies(cargo.get("dependencies"), DependencyKind.PRODUCTION)
        module.dev_dependencies = [
            *_cargo_dependencies(cargo.get("dev-dependencies"), DependencyKind.DEVELOPMENT),
            *_cargo_dependencies(cargo.get("build-dependencies"), DependencyKind.DEVELOPMENT),
        ]

        module.entry_points = self.find_existing(path, ENTRY_PATTERNS)
        module.key_files = self.find_existing(path, KEY_FILES)
        module.test_files = self.find_matching(path, ["tests/**/*.rs", "benches/**/*.rs"])
        module.config_files = self.find_existing(path, CONFIG_FILES)
        module.docs = self.find_existing(path, DOC_FILES)
        return module
