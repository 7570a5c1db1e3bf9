from codescout.config import create_default_config
from codescout.models import PhaseStatus, ProjectType, ScanPhase
from codescout.scanner import Scanner
from codescout.settings import Settings

MONOREPO = {
    "packages/web/package.json": (
        '{"name": "@acme/web", "version": "1.0.0", "dependencies": {"react": "^18.2.0"}}'
    ),
    "packages/web/README.md": "# web\n",
    "packages/web/src/index.js": "export default 1;\n",
    "packages/broken/package.json": "{oops",
    "packages/broken/index.js": "",
    "tools/lint/check.py": "import sys\nprint(sys.argv)\n",
}


def full_scan(root, **limits):
    config = create_default_config(performance_limits=limits, settings=Settings())
    return Scanner(config=config).scan(root)


def test_module_phase_replaces_minimal_records(make_tree):
    root = make_tree(MONOREPO)
    result = full_scan(root)

    assert [r.status for r in result.phases] == [PhaseStatus.COMPLETED] * 3
    web = next(m for m in result.modules if m.path == str(root / "packages" / "web"))
    assert web.name == "@acme/web"
    assert web.metadata.version == "1.0.0"
    assert [d.name for d in web.dependencies] == ["react"]
    assert web.docs == [str(root / "packages" / "web" / "README.md")]


def test_module_analysis_failure_keeps_minimal_record(make_tree):
    root = make_tree(MONOREPO)
    result = full_scan(root)

    broken = next(m for m in result.modules if m.path == str(root / "packages" / "broken"))
    assert broken.name == "broken"
    assert broken.type is ProjectType.JAVASCRIPT
    assert broken.dependencies == []


def test_deep_phase_finds_modules_outside_known_roots(make_tree):
    root = make_tree(MONOREPO)
    quick_only = Scanner(config=create_default_config(settings=Settings())).scan(
        root, phases=[ScanPhase.QUICK]
    )
    assert str(root / "tools" / "lint") not in [m.path for m in quick_only.modules]

    result = full_scan(root)
    lint = next(m for m in result.modules if m.path == str(root / "tools" / "lint"))
    assert lint.type is ProjectType.PYTHON
    assert lint.name == "lint"
    assert result.statistics.modules_found == len(result.modules) == 3


def test_deep_phase_does_not_report_nested_modules(make_tree):
    root = make_tree(
        {
            "go.mod": "module example.com/root\n",
            "main.go": "package main\n",
            "scripts/gen.py": "print('generate')\n",
        }
    )
    result = full_scan(root)
    assert [m.path for m in result.modules] == [str(root)]
    assert result.modules[0].name == "example.com/root"


def test_deep_phase_counts_lines(make_tree):
    root = make_tree({"app.py": "a = 1\nb = 2\nc = 3\n", "lib/util.py": "x = 1\n"})
    result = full_scan(root)
    assert result.statistics.lines_of_code == 4


def test_deep_phase_skips_files_over_size_limit(make_tree):
    root = make_tree({"small.py": "a = 1\n", "big.py": "b = 2\n" * 100})
    result = full_scan(root, max_file_size=100)
    assert result.statistics.lines_of_code == 1
