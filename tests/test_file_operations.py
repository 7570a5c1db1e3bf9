import os

from codescout import file_operations
from codescout.config import create_default_config
from codescout.detectors import DetectorRegistry
from codescout.file_operations import walk_files
from codescout.models import PhaseStatus, ScanPhase
from codescout.scanner import Scanner
from codescout.settings import Settings


def deny_scandir(monkeypatch, blocked):
    """Make ``os.scandir`` raise PermissionError for the directory *blocked*."""
    real_scandir = os.scandir

    def scandir(path="."):
        if os.fspath(path) == str(blocked):
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)


def test_walk_files_skips_unreadable_directory(make_tree, monkeypatch, caplog):
    root = make_tree({"locked/secret.py": "", "src/main.py": "", "top.py": ""})
    deny_scandir(monkeypatch, root / "locked")

    with caplog.at_level("WARNING"):
        paths = [info.relative_path for info in walk_files(str(root), max_depth=10)]
    assert paths == ["src/main.py", "top.py"]
    assert "Cannot access directory" in caplog.text


def test_walk_files_skips_vanished_file(make_tree, monkeypatch, caplog):
    root = make_tree({"a.py": "", "b.py": ""})
    real_build = file_operations.build_file_info

    def build_file_info(file_path, root, stat=None):
        if file_path.endswith("a.py"):
            raise FileNotFoundError(2, "No such file or directory", file_path)
        return real_build(file_path, root, stat)

    monkeypatch.setattr(file_operations, "build_file_info", build_file_info)
    with caplog.at_level("WARNING"):
        paths = [info.relative_path for info in walk_files(str(root), max_depth=10)]
    assert paths == ["b.py"]
    assert "Skipping unreadable entry" in caplog.text


def test_quick_scan_completes_past_unreadable_directory(make_tree, monkeypatch):
    root = make_tree(
        {
            "go.mod": "module example.com/foo\n",
            "main.go": "package main\n",
            "private/keys.txt": "x",
        }
    )
    deny_scandir(monkeypatch, root / "private")

    config = create_default_config(settings=Settings())
    result = Scanner(config=config).scan(root, phases=[ScanPhase.QUICK])

    assert result.phases[0].status is PhaseStatus.COMPLETED
    assert result.statistics.total_files == 2
    assert {f.relative_path for f in result.scanned_files} == {"go.mod", "main.go"}


def test_find_modules_skips_unreadable_directory(make_tree, monkeypatch, caplog):
    root = make_tree(
        {
            "locked/inner/go.mod": "module hidden\n",
            "svc/go.mod": "module svc\n",
        }
    )
    deny_scandir(monkeypatch, root / "locked")

    with caplog.at_level("WARNING"):
        modules = DetectorRegistry().find_modules(str(root))
    assert modules == [str(root / "svc")]
    assert "Cannot read directory" in caplog.text
