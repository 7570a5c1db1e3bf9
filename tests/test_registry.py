import pytest

from codescout.detectors import DetectorRegistry, GoDetector, JavaScriptDetector, ProjectDetector
from codescout.exceptions import ClassificationError, ModuleAnalysisError
from codescout.filters import FileFilterEngine
from codescout.models import ModuleInfo, ProjectType


class ExplodingDetector(ProjectDetector):
    name = "Exploding"
    type = ProjectType.RUBY

    def detect(self, path):
        raise RuntimeError("boom")

    def analyze(self, path):
        raise RuntimeError("boom")


class BrokenAnalyzer(GoDetector):
    def analyze(self, path):
        raise KeyError("module")


def test_go_scenario(make_tree):
    root = make_tree(
        {"go.mod": "module example.com/foo\n\ngo 1.21\n", "main.go": "package main\n"},
        base="project",
    )
    registry = DetectorRegistry()
    assert registry.detect_project_type(str(root)) is ProjectType.GO

    module = registry.analyze_module(str(root))
    assert module.name == "example.com/foo"
    assert module.metadata.engines == {"go": "1.21"}


def test_detection_is_idempotent(make_tree):
    root = make_tree({"package.json": "{}", "tsconfig.json": "{}"})
    registry = DetectorRegistry()
    first = registry.detect_project_type(str(root))
    assert registry.detect_project_type(str(root)) is first is ProjectType.TYPESCRIPT


def test_tie_resolves_to_first_registered(make_tree):
    root = make_tree({"package.json": "{}"})
    registry = DetectorRegistry()
    js = registry.get(ProjectType.JAVASCRIPT)
    ts = registry.get(ProjectType.TYPESCRIPT)
    assert registry.confidence(str(root), js) == registry.confidence(str(root), ts)
    assert registry.detect_project_type(str(root)) is ProjectType.JAVASCRIPT

    reordered = DetectorRegistry([ts, js])
    assert reordered.detect_project_type(str(root)) is ProjectType.TYPESCRIPT


def test_confidence_scoring(make_tree):
    root = make_tree({"go.mod": "module m\n", "go.sum": "", "main.go": "package main\n"})
    registry = DetectorRegistry()
    # 50 + 3 patterns * 10 + 25 go.mod bonus, capped
    assert registry.confidence(str(root), registry.get(ProjectType.GO)) == 100


def test_confidence_pattern_contribution_is_capped(make_tree):
    root = make_tree(
        {
            "package.json": "{}",
            "package-lock.json": "{}",
            "yarn.lock": "",
            "pnpm-lock.yaml": "",
            "jsconfig.json": "{}",
        }
    )
    registry = DetectorRegistry()
    assert registry.confidence(str(root), registry.get(ProjectType.JAVASCRIPT)) == 80


def test_unknown_directory(make_tree):
    root = make_tree({"notes.txt": "hello"})
    registry = DetectorRegistry()
    assert registry.detect_project_type(str(root)) is ProjectType.UNKNOWN
    assert not registry.is_module_root(str(root))
    with pytest.raises(ClassificationError) as excinfo:
        registry.analyze_module(str(root))
    assert excinfo.value.code == "UNKNOWN_PROJECT_TYPE"


def test_missing_detector(make_tree):
    root = make_tree({"go.mod": "module m\n"})
    registry = DetectorRegistry([JavaScriptDetector()])
    with pytest.raises(ClassificationError) as excinfo:
        registry.analyze_module(str(root), ProjectType.GO)
    assert excinfo.value.code == "DETECTOR_NOT_FOUND"


def test_failing_detector_is_skipped(make_tree, caplog):
    root = make_tree({"go.mod": "module m\n"})
    registry = DetectorRegistry([ExplodingDetector(), GoDetector()])
    assert registry.detect_project_type(str(root)) is ProjectType.GO
    assert "Exploding" in caplog.text


def test_analysis_failure_is_wrapped(make_tree):
    root = make_tree({"go.mod": "module m\n"})
    registry = DetectorRegistry([BrokenAnalyzer()])
    with pytest.raises(ModuleAnalysisError) as excinfo:
        registry.analyze_module(str(root))
    assert excinfo.value.code == "MODULE_ANALYSIS_FAILED"
    assert excinfo.value.path == str(root)


def test_analyze_modules_omits_failures(make_tree):
    root = make_tree({"a/go.mod": "module a\n", "b/notes.txt": ""})
    registry = DetectorRegistry()
    results = registry.analyze_modules([str(root / "a"), str(root / "b")])
    assert list(results) == [str(root / "a")]
    assert isinstance(results[str(root / "a")], ModuleInfo)


def test_register_replaces_and_unregister():
    registry = DetectorRegistry()
    count = len(registry)
    replacement = GoDetector()
    registry.register(replacement)
    assert len(registry) == count
    assert registry.get(ProjectType.GO) is replacement
    assert registry.unregister(ProjectType.GO) is replacement
    assert ProjectType.GO not in registry
    assert [d["type"] for d in registry.supported()][:2] == [
        ProjectType.JAVASCRIPT,
        ProjectType.TYPESCRIPT,
    ]


def test_find_modules_prunes_module_roots(make_tree):
    root = make_tree(
        {
            "services/api/go.mod": "module api\n",
            "services/api/plugins/auth/go.mod": "module auth\n",
            "web/package.json": "{}",
            "web/packages/ui/package.json": "{}",
            "docs/readme.txt": "",
            ".hidden/pkg/go.mod": "module hidden\n",
        }
    )
    modules = DetectorRegistry().find_modules(str(root))
    assert modules == [str(root / "services" / "api"), str(root / "web")]


def test_find_modules_respects_max_depth(make_tree):
    root = make_tree({"a/b/c/go.mod": "module deep\n"})
    registry = DetectorRegistry()
    assert registry.find_modules(str(root), max_depth=1) == []
    assert registry.find_modules(str(root), max_depth=2) == [str(root / "a" / "b" / "c")]


@pytest.mark.parametrize("cls", [DetectorRegistry, FileFilterEngine])
def test_public_methods_are_documented(cls):
    undocumented = [
        name
        for name, member in vars(cls).items()
        if not name.startswith("_") and callable(member) and not member.__doc__
    ]
    assert undocumented == []
