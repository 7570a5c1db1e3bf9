import pathlib

import pytest


def write_tree(root: pathlib.Path, files: dict[str, str]) -> pathlib.Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Build a file tree under tmp_path from a ``{relative path: content}`` dict."""

    def _make(files: dict[str, str], base: str = "repo") -> pathlib.Path:
        root = tmp_path / base
        root.mkdir(parents=True, exist_ok=True)
        return write_tree(root, files)

    return _make
