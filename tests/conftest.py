"""
pytest configuration and shared fixtures for yogini tests.

Fixtures defined here are automatically available to all test modules.

Fixtures
--------
make_tree : Callable
    Writes a {relative path: content} mapping under a directory.

template_dir : Path
    An empty template directory.

output_dir : Path
    A not-yet-existing output directory.

tool_root : Path
    A fake yogini checkout, suitable for Create Mode runs.
"""

import json
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create ``files`` under ``root`` and return ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree() -> Callable[[Path, dict[str, str | bytes]], Path]:
    """Provide :func:`write_tree` to tests."""
    return write_tree


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Create an empty template directory."""
    path = tmp_path / "templates"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Path for materialized output. Not created up front."""
    return tmp_path / "out"


@pytest.fixture
def tool_root(tmp_path: Path) -> Path:
    """
    Build a fake yogini checkout.

    It contains the real ``create/`` fragment from this repository plus
    version control metadata and caches that Create Mode must skip.
    """
    root = tmp_path / "tool"
    write_tree(root, {
        "pyproject.toml": '[project]\nname = "yogini"\nversion = "0.1.0"\n',
        "README.md": "# yogini\n",
        "src/yogini/__init__.py": '__version__ = "0.1.0"\n',
        "src/yogini/templates/{}README.md": "# {{ name }}\n",
        "src/yogini/__pycache__/cli.cpython-312.pyc": b"\x00\x01",
        "tests/test_smoke.py": "def test_ok():\n    assert True\n",
        ".git/HEAD": "ref: refs/heads/main\n",
        ".venv/pyvenv.cfg": "home = /usr/bin\n",
    })
    shutil.copytree(REPO_ROOT / "create", root / "create")
    return root


@pytest.fixture
def write_config() -> Callable[[Path, object], Path]:
    """Write a yogini.json (dict is JSON-encoded, str written as-is)."""
    def write(directory: Path, data: object) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "yogini.json"
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return write
