"""Java (Maven / Gradle) project detector."""

from __future__ import annotations

import logging
import os
import re
import xml.etree.ElementTree as ET

from codescout.detectors.base import ProjectDetector, module_name_from_path
from codescout.models import Dependency, DependencyKind, ModuleInfo, ModuleMetadata, ProjectType

logger = logging.getLogger(__name__)

BUILD_FILES = ("pom.xml", "build.gradle", "build.gradle.kts")
KEY_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")
CONFIG_FILES = (
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "settings.gradle",
    "settings.gradle.kts",
    "gradle.properties",
    "gradlew",
    "mvnw",
    "src/main/resources/application.properties",
    "src/main/resources/application.yml",
)
DOC_FILES = ("README.md", "README", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")

_TEST_SCOPES = {"test", "provided"}

# implementation 'group:artifact:version'  /  testImplementation("group:artifact:version")
_GRADLE_DEPENDENCY = re.compile(
    r"""^\s*(\w+)\s*\(?\s*['"]([^'":\s]+):([^'":\s]+)(?::([^'"\s]+))?['"]""",
    re.MULTILINE,
)
_GRADLE_DEV_CONFIGURATIONS = ("test", "androidTest", "kapt", "annotationProcessor")


def _strip_namespace(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element:
        if _strip_namespace(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _strip_namespace(child.tag) == name:
            return child
    return None


class JavaDetector(ProjectDetector):
    name = "Java"
    type = ProjectType.JAVA
    patterns = (
        "pom.xml",
        "build.gradle",
        "build.gradle.kts",
        "settings.gradle",
        "gradlew",
        "src/main/java/**/*.java",
    )
    manifests = BUILD_FILES
    source_suffixes = (".java",)

    def read_pom(self, path: str) -> ET.Element | None:
        content = self.read_text(os.path.join(path, "pom.xml"))
        if content is None:
            return None
        try:
            return ET.fromstring(content)
        except ET.ParseError:
            logger.debug("Malformed pom.xml in %s", path)
            return None

    def analyze(self, path: str) -> ModuleInfo:
        module = self.create_module_info(path, module_name_from_path(path))
        pom = self.read_pom(path)
        if pom is not None:
            self._apply_pom(module, pom)
        else:
            for build_file in ("build.gradle", "build.gradle.kts"):
                content = self.read_text(os.path.join(path, build_file))
                if content is not None:
                    self._apply_gradle(module, content)
                    break

        module.entry_points = self.find_matching(
            path, ["src/main/java/**/Main.java", "src/main/java/**/*Application.java"], limit=10
        )
        module.key_files = self.find_existing(path, KEY_FILES)
        module.test_files = self.find_matching(path, ["src/test/**/*.java"])
        module.config_files = self.find_existing(path, CONFIG_FILES)
        module.docs = self.find_existing(path, DOC_FILES)
        return module

    @staticmethod
    def _apply_pom(module: ModuleInfo, pom: ET.Element) -> None:
        artifact = _child_text(pom, "artifactId")
        group = _child_text(pom, "groupId")
        if artifact:
            module.name = f"{group}:{artifact}" if group else artifact
        module.metadata = ModuleMetadata(
            description=_child_text(pom, "description"),
            version=_child_text(pom, "version"),
        )
        scm = _child(pom, "scm")
        if scm is not None:
            module.metadata.repository = _child_text(scm, "url")
        licenses = _child(pom, "licenses")
        if licenses is not None and len(licenses):
            module.metadata.license = _child_text(licenses[0], "name")

        dependencies = _child(pom, "dependencies")
        if dependencies is None:
            return
        for dep in dependencies:
            dep_artifact = _child_text(dep, "artifactId")
            if not dep_artifact:
                continue
            dep_group = _child_text(dep, "groupId")
            dependency = Dependency(
                name=f"{dep_group}:{dep_artifact}" if dep_group else dep_artifact,
                version=_child_text(dep, "version") or "*",
                kind=(
                    DependencyKind.DEVELOPMENT
                    if _child_text(dep, "scope") in _TEST_SCOPES
                    else DependencyKind.PRODUCTION
                ),
            )
            if dependency.kind is DependencyKind.PRODUCTION:
                module.dependencies.append(dependency)
            else:
                module.dev_dependencies.append(dependency)

    @staticmethod
    def _apply_gradle(module: ModuleInfo, content: str) -> None:
        for match in _GRADLE_DEPENDENCY.finditer(content):
            configuration, group, artifact, version = match.groups()
            development = configuration.startswith(_GRADLE_DEV_CONFIGURATIONS)
            dependency = Dependency(
                name=f"{group}:{artifact}",
                version=version or "*",
                kind=DependencyKind.DEVELOPMENT if development else DependencyKind.PRODUCTION,
            )
            if development:
                module.dev_dependencies.append(dependency)
            else:
                module.dependencies.append(dependency)
