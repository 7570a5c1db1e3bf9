import json

from codescout.config import create_default_config
from codescout.models import ScanPhase
from codescout.reporting import format_size, generate_summary, result_to_dict
from codescout.scanner import Scanner
from codescout.settings import Settings


def scan(root, phases=None):
    return Scanner(config=create_default_config(settings=Settings())).scan(root, phases=phases)


def test_format_size():
    assert format_size(512) == "512.0 B"
    assert format_size(1536) == "1.5 KB"
    assert format_size(5 * 1024 * 1024) == "5.0 MB"


def test_result_to_dict_is_json_ready(make_tree):
    root = make_tree({"go.mod": "module example.com/foo\n\ngo 1.21\n", "main.go": "package main\n"})
    data = result_to_dict(scan(root))

    json.dumps(data)
    assert data["project_type"] == "go"
    assert data["modules"][0]["name"] == "example.com/foo"
    assert data["modules"][0]["metadata"]["engines"] == {"go": "1.21"}
    assert [p["phase"] for p in data["phases"]] == ["quick", "module", "deep"]
    assert isinstance(data["phases"][0]["start_time"], str)
    assert "scanned_files" not in data


def test_result_to_dict_with_files(make_tree):
    root = make_tree({"a.py": "", "b.log": ""})
    data = result_to_dict(scan(root, [ScanPhase.QUICK]), include_files=True)
    assert [f["relative_path"] for f in data["scanned_files"]] == ["a.py"]
    assert [f["relative_path"] for f in data["ignored_files"]] == ["b.log"]


def test_generate_summary(make_tree):
    root = make_tree(
        {
            "services/api/go.mod": "module api\n",
            "services/web/package.json": '{"name": "web"}',
        }
    )
    text = generate_summary(scan(root))
    assert "## 📁 Modules (2)" in text
    assert "api [go]" in text
    assert "web [javascript]" in text
    assert "### By Type" in text
    assert "quick: completed" in text
    assert "## 💡 Recommendations" in text
