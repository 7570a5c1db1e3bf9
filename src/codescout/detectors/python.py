"""Python project detector."""

from __future__ import annotations

import logging
import os
import re
from typing import Any

from codescout.detectors.base import ProjectDetector, module_name_from_path, parse_requirement
from codescout.models import Dependency, DependencyKind, ModuleInfo, ModuleMetadata, ProjectType

logger = logging.getLogger(__name__)

ENTRY_PATTERNS = (
    "src/__init__.py",
    "src/main.py",
    "src/app.py",
    "__init__.py",
    "main.py",
    "app.py",
    "run.py",
    "cli.py",
    "wsgi.py",
    "asgi.py",
)

KEY_FILES = ("README.md", "README.rst", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")

CONFIG_FILES = (
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "requirements.txt",
    "requirements-dev.txt",
    "Pipfile",
    "poetry.lock",
    "tox.ini",
    "pytest.ini",
    "mypy.ini",
    ".flake8",
    ".pylintrc",
    "black.toml",
    ".python-version",
)

DOC_FILES = ("README.md", "README.rst", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")

TEST_PATTERNS = ("tests/**/*.py", "test/**/*.py", "**/test_*.py", "**/*_test.py", "conftest.py")

# (file name, dependency kind); requirements.txt and requirements.in are alternatives
REQUIREMENTS_FILES = (
    ("requirements.txt", DependencyKind.PRODUCTION),
    ("requirements.in", DependencyKind.PRODUCTION),
    ("requirements-dev.txt", DependencyKind.DEVELOPMENT),
)

_SETUP_FIELD = r"""\b{field}\s*=\s*['"]([^'"]+)['"]"""
_SETUP_FIELDS = ("name", "version", "description", "author", "license", "python_requires")
_SETUP_INSTALL_REQUIRES = re.compile(r"\binstall_requires\s*=\s*\[(.*?)\]", re.DOTALL)
_QUOTED = re.compile(r"""['"]([^'"]+)['"]""")
_EMAIL_SUFFIX = re.compile(r"\s*<[^>]*>\s*$")
_URL_PREFIXES = ("git+", "hg+", "svn+", "bzr+", "http://", "https://", "file:")


def _first(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def parse_requirements_text(
    content: str, kind: DependencyKind = DependencyKind.PRODUCTION
) -> list[Dependency]:
    """Parse a plain requirements list.

    Comments, blank lines, option lines (``-r``, ``-e``, ``--index-url``) and
    VCS/URL references are dropped.
    """
    dependencies: list[Dependency] = []
    for line in content.splitlines():
        line = line.split(" #", 1)[0].strip()
        if not line or line.startswith(("#", "-")) or line.startswith(_URL_PREFIXES):
            continue
        if "://" in line or " @ " in line:
            continue
        dependency = parse_requirement(line, kind)
        if dependency is not None:
            dependencies.append(dependency)
    return dependencies


def parse_setup_py(content: str) -> dict[str, Any]:
    """Pull literal keyword arguments out of a ``setup()`` call with regexes."""
    info: dict[str, Any] = {}
    for field_name in _SETUP_FIELDS:
        match = re.search(_SETUP_FIELD.format(field=field_name), content)
        if match:
            info[field_name] = match.group(1)
    requires = _SETUP_INSTALL_REQUIRES.search(content)
    if requires:
        info["install_requires"] = _QUOTED.findall(requires.group(1))
    return info


class PythonDetector(ProjectDetector):
    name = "Python"
    type = ProjectType.PYTHON
    patterns = (
        "pyproject.toml",
        "setup.py",
        "requirements.txt",
        "requirements-dev.txt",
        "requirements.in",
        "Pipfile",
        "Pipfile.lock",
        "poetry.lock",
        "setup.cfg",
        "tox.ini",
        "pytest.ini",
        ".python-version",
    )
    manifests = ("pyproject.toml", "setup.py", "requirements.txt", "Pipfile", "setup.cfg")
    source_suffixes = (".py",)

    def confidence_bonus(self, path: str) -> int:
        return 15 if self.file_exists(os.path.join(path, "pyproject.toml")) else 0

    def analyze(self, path: str) -> ModuleInfo:
        pyproject = self.read_toml(os.path.join(path, "pyproject.toml")) or {}
        project = pyproject.get("project") or {}
        poetry = (pyproject.get("tool") or {}).get("poetry") or {}
        setup_py = self._read_setup_py(path)

        name = _first(project.get("name"), poetry.get("name"), setup_py.get("name"))
        module = self.create_module_info(path, name or module_name_from_path(path))
        module.metadata = self._extract_metadata(project, poetry, setup_py)

        self._extract_dependencies(module, project, poetry, setup_py)
        for dependency in self._read_requirements(path):
            target = (
                module.dependencies
                if dependency.kind is DependencyKind.PRODUCTION
                else module.dev_dependencies
            )
            if all(d.name != dependency.name for d in target):
                target.append(dependency)

        module.entry_points = self.find_existing(path, ENTRY_PATTERNS)
        module.key_files = self.find_existing(path, KEY_FILES)
        module.test_files = self.find_matching(path, TEST_PATTERNS)
        module.config_files = self.find_existing(path, CONFIG_FILES)
        module.docs = self.find_existing(path, DOC_FILES)
        return module

    def _read_setup_py(self, path: str) -> dict[str, Any]:
        content = self.read_text(os.path.join(path, "setup.py"))
        if content is None:
            return {}
        return parse_setup_py(content)

    def _read_requirements(self, path: str) -> list[Dependency]:
        dependencies: list[Dependency] = []
        seen_production = False
        for filename, kind in REQUIREMENTS_FILES:
            if kind is DependencyKind.PRODUCTION and seen_production:
                continue
            content = self.read_text(os.path.join(path, filename))
            if content is None:
                continue
            if kind is DependencyKind.PRODUCTION:
                seen_production = True
            dependencies.extend(parse_requirements_text(content, kind))
        return dependencies

    @staticmethod
    def _extract_metadata(
        project: dict[str, Any], poetry: dict[str, Any], setup_py: dict[str, Any]
    ) -> ModuleMetadata:
        authors = project.get("authors") or []
        project_author = authors[0].get("name") if authors and isinstance(authors[0], dict) else None
        poetry_authors = poetry.get("authors") or []
        poetry_author = (
            _EMAIL_SUFFIX.sub("", poetry_authors[0])
            if poetry_authors and isinstance(poetry_authors[0], str)
            else None
        )

        license_value = project.get("license")
        if isinstance(license_value, dict):
            license_value = license_value.get("text")

        urls = project.get("urls") or {}
        repository = _first(
            urls.get("Repository"),
            urls.get("Source"),
            urls.get("Homepage"),
            poetry.get("repository"),
        )

        engines: dict[str, str] = {}
        python_constraint = _first(
            project.get("requires-python"),
            (poetry.get("dependencies") or {}).get("python"),
            setup_py.get("python_requires"),
        )
        if isinstance(python_constraint, str):
            engines["python"] = python_constraint

        return ModuleMetadata(
            description=_first(
                project.get("description"), poetry.get("description"), setup_py.get("description")
            ),
            version=_first(project.get("version"), poetry.get("version"), setup_py.get("version")),
            author=_first(project_author, poetry_author, setup_py.get("author")),
            license=_first(
                license_value if isinstance(license_value, str) else None,
                poetry.get("license"),
                setup_py.get("license"),
            ),
            repository=repository,
            keywords=list(_first(project.get("keywords"), poetry.get("keywords")) or []),
            scripts=dict(_first(project.get("scripts"), poetry.get("scripts")) or {}),
            engines=engines,
        )

    def _extract_dependencies(
        self,
        module: ModuleInfo,
        project: dict[str, Any],
        poetry: dict[str, Any],
        setup_py: dict[str, Any],
    ) -> None:
        requirements = list(project.get("dependencies") or [])
        requirements.extend(setup_py.get("install_requires") or [])
        for requirement in requirements:
            dependency = parse_requirement(requirement)
            if dependency is not None:
                module.dependencies.append(dependency)

        for group in (project.get("optional-dependencies") or {}).values():
            for requirement in group:
                dependency = parse_requirement(requirement, DependencyKind.OPTIONAL)
                if dependency is not None:
                    module.dev_dependencies.append(dependency)

        poetry_deps = dict(poetry.get("dependencies") or {})
        poetry_deps.pop("python", None)
        module.dependencies.extend(self.parse_dependencies(poetry_deps))

        dev_tables = [poetry.get("dev-dependencies") or {}]
        for group in (poetry.get("group") or {}).values():
            if isinstance(group, dict):
                dev_tables.append(group.get("dependencies") or {})
        for table in dev_tables:
            module.dev_dependencies.extend(
                self.parse_dependencies(table, DependencyKind.DEVELOPMENT)
            )
