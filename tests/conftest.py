"""Shared test fixtures for module-atlas tests."""

from pathlib import Path
from typing import Callable

import pytest

from module_atlas.graph.walker import DeclarationWalker, WalkResult
from module_atlas.scanning.treesitter_parser import TreeSitterParser


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def make_project(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Write {relative path: source} into a temporary project root."""

    def _make(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture(scope="session")
def ts_parser() -> TreeSitterParser:
    return TreeSitterParser()


@pytest.fixture
def walk(ts_parser) -> Callable[..., WalkResult]:
    """Parse a snippet and walk it as module ./mod.js (or the given id)."""

    def _walk(code: str, language: str = "javascript", module_id: str = "./mod.js", resolve=None):
        tree = ts_parser.parse(code.encode("utf-8"), language)
        assert not tree.root_node.has_error, f"fixture source does not parse: {code!r}"
        return DeclarationWalker(resolve=resolve).walk(tree, module_id)

    return _walk


@pytest.fixture
def parse(ts_parser):
    """Parse a snippet and return the tree."""

    def _parse(code: str, language: str = "javascript"):
        return ts_parser.parse(code.encode("utf-8"), language)

    return _parse
