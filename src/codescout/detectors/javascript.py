"""JavaScript / TypeScript project detectors."""

from __future__ import annotations

import os
from typing import Any

from codescout.detectors.base import ProjectDetector, module_name_from_path
from codescout.exceptions import ModuleAnalysisError
from codescout.models import DependencyKind, ModuleInfo, ModuleMetadata, ProjectType

TS_CONFIG_FILES = (
    "tsconfig.json",
    "tsconfig.base.json",
    "tsconfig.build.json",
    "tsconfig.eslint.json",
)

TS_ENTRY_PATTERNS = (
    "src/index.ts",
    "src/main.ts",
    "src/app.ts",
    "index.ts",
    "main.ts",
    "app.ts",
    "lib/index.ts",
    "src/index.tsx",
    "src/main.tsx",
    "index.tsx",
    "main.tsx",
)

JS_ENTRY_PATTERNS = tuple(p.replace(".ts", ".js") for p in TS_ENTRY_PATTERNS)

KEY_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")

CONFIG_FILES = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    ".eslintrc.js",
    ".eslintrc.json",
    ".eslintrc.yml",
    ".eslintrc.yaml",
    ".prettierrc",
    ".prettierrc.js",
    ".prettierrc.json",
    "tsconfig.json",
    "tsconfig.base.json",
    "tsconfig.build.json",
    "webpack.config.js",
    "webpack.config.ts",
    "rollup.config.js",
    "rollup.config.ts",
    "vite.config.js",
    "vite.config.ts",
    "jest.config.js",
    "jest.config.ts",
    "babel.config.js",
    "babel.config.json",
    ".babelrc",
    ".babelrc.js",
    "nuxt.config.js",
    "nuxt.config.ts",
    "next.config.js",
    "angular.json",
    "vue.config.js",
    "svelte.config.js",
    "solid.config.js",
)

DOC_FILES = (
    "README.md",
    "README",
    "CHANGELOG.md",
    "CHANGELOG",
    "LICENSE",
    "LICENSE.md",
    "CONTRIBUTING.md",
    "CONTRIBUTING",
)


def _person_name(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("name")
    return None


def _repository_url(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("url")
    return None


class JavaScriptDetector(ProjectDetector):
    """Detects npm-style packages (a ``package.json`` is required)."""

    name = "JavaScript"
    type = ProjectType.JAVASCRIPT
    patterns = (
        "package.json",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "tsconfig.json",
        "jsconfig.json",
        "tsconfig.base.json",
    )
    manifests = ("package.json",)

    def is_typescript(self, path: str) -> bool:
        if self.find_existing(path, TS_CONFIG_FILES):
            return True
        return self.has_files_with_suffix(path, (".ts", ".tsx"))

    def analyze(self, path: str) -> ModuleInfo:
        package_json_path = os.path.join(path, "package.json")
        # tsconfig-only directories have no manifest to read
        package = self.read_json(package_json_path) if self.file_exists(package_json_path) else {}
        if not isinstance(package, dict):
            raise ModuleAnalysisError(
                f"Invalid package.json found at {package_json_path}",
                "MODULE_ANALYSIS_FAILED",
                path,
            )

        typescript = self.is_typescript(path)
        metadata = ModuleMetadata(
            description=package.get("description"),
            version=package.get("version"),
            author=_person_name(package.get("author")),
            license=package.get("license") if isinstance(package.get("license"), str) else None,
            repository=_repository_url(package.get("repository")),
            keywords=list(package.get("keywords") or []),
            scripts=dict(package.get("scripts") or {}),
            engines=dict(package.get("engines") or {}),
        )
        module = self.create_module_info(
            path, package.get("name") or module_name_from_path(path), metadata
        )
        module.type = ProjectType.TYPESCRIPT if typescript else ProjectType.JAVASCRIPT

        module.dependencies = self.parse_dependencies(package.get("dependencies"))
        module.dev_dependencies = [
            *self.parse_dependencies(package.get("devDependencies"), DependencyKind.DEVELOPMENT),
            *self.parse_dependencies(package.get("peerDependencies"), DependencyKind.PEER),
            *self.parse_dependencies(package.get("optionalDependencies"), DependencyKind.OPTIONAL),
        ]

        module.entry_points = self._find_entry_points(path, package, typescript)
        module.key_files = self.find_existing(path, KEY_FILES)
        module.test_files = self._find_test_files(path, typescript)
        module.config_files = self.find_existing(path, CONFIG_FILES)
        module.docs = self.find_existing(path, DOC_FILES)
        return module

    def _find_entry_points(self, path: str, package: dict[str, Any], typescript: bool) -> list[str]:
        entry_points: list[str] = []
        declared = ["main", "module"]
        if typescript:
            declared.append("types")
        for field_name in declared:
            value = package.get(field_name)
            if isinstance(value, str):
                entry_points.append(os.path.normpath(os.path.join(path, value)))

        patterns = TS_ENTRY_PATTERNS if typescript else JS_ENTRY_PATTERNS
        for full_path in self.find_existing(path, patterns):
            if full_path not in entry_points:
                entry_points.append(full_path)
        return entry_points

    def _find_test_files(self, path: str, typescript: bool) -> list[str]:
        ext = "ts" if typescript else "js"
        return self.find_matching(
            path,
            [
                f"tests/**/*.{ext}",
                f"test/**/*.{ext}",
                f"**/*.test.{ext}",
                f"**/*.spec.{ext}",
                f"__tests__/**/*.{ext}",
            ],
        )


class TypeScriptDetector(JavaScriptDetector):
    """The TypeScript flavour of :class:`JavaScriptDetector`.

    Matches the same directories plus any holding a ``tsconfig.json``; scores
    higher only when a TypeScript project config is actually present.
    """

    name = "TypeScript"
    type = ProjectType.TYPESCRIPT
    manifests = ("package.json", "tsconfig.json")

    def confidence_bonus(self, path: str) -> int:
        return 20 if self.find_existing(path, TS_CONFIG_FILES) else 0
