import json

import pytest

from codescout import cli


def test_text_report(make_tree, capsys):
    root = make_tree({"go.mod": "module example.com/foo\n", "main.go": "package main\n"})
    cli.main([str(root)])

    out, err = capsys.readouterr()
    assert "🔍 Type: go" in out
    assert "example.com/foo [go]" in out
    assert "✅ Success!" in err


def test_json_report_to_file(make_tree, tmp_path, capsys):
    root = make_tree({"pyproject.toml": '[project]\nname = "svc"\n', "svc.py": ""})
    output = tmp_path / "out" / "scan.json"
    cli.main([str(root), "--phases", "quick", "module", "--json", "-o", str(output)])

    data = json.loads(output.read_text())
    assert data["project_type"] == "python"
    assert [p["phase"] for p in data["phases"]] == ["quick", "module"]
    assert data["modules"][0]["name"] == "svc"
    out, _ = capsys.readouterr()
    assert out == ""


def test_missing_directory_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "nope")])
    assert excinfo.value.code == 1
    assert "Directory not found" in capsys.readouterr().err


def test_resource_limit_exits_with_error(make_tree, capsys):
    root = make_tree({f"f{i}.py": "" for i in range(5)})
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(root), "--max-files", "3"])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "FILE_LIMIT_EXCEEDED" in err
    assert "Failed phase: quick" in err


def test_invalid_limit_exits_with_error(make_tree, capsys):
    root = make_tree({"a.py": ""})
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(root), "--max-depth", "0"])
    assert excinfo.value.code == 1
    assert "max_depth" in capsys.readouterr().err
