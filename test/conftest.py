#!/usr/bin/env python3
"""Pytest configuration and shared fixtures for include-check tests.

Fixtures:
- temp_dir: isolated temporary directory (pathlib.Path)
- make_tree: writes a {relative path: content} mapping below temp_dir
- edge_sets: small hand-written edge sets shared by graph tests
"""

import sys
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="includecheck_test_")
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[Dict[str, str]], str]:
    """Return a helper that writes source files and returns the source root.

    Scope: function
    Dependencies: temp_dir
    Use for: Graph builder and CLI tests that read real files
    """

    def _make_tree(files: Dict[str, str]) -> str:
        for rel_path, content in files.items():
            path = temp_dir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return str(temp_dir)

    return _make_tree


@pytest.fixture(scope="module")
def edge_sets() -> Dict[str, Dict[str, List[str]]]:
    """Named edge sets covering the common graph shapes.

    Scope: module (treat as read-only)
    """
    return {
        "two_cycle": {"a.h": ["b.h"], "b.h": ["a.h"]},
        "tree": {"a.h": ["b.h", "c.h"]},
        "self_loop": {"a.h": ["a.h"]},
        "diamond": {"a.h": ["b.h", "c.h"], "b.h": ["d.h"], "c.h": ["d.h"]},
        "triangle": {"a.h": ["b.h"], "b.h": ["c.h"], "c.h": ["a.h"]},
        "figure_eight": {"a.h": ["b.h", "c.h"], "b.h": ["a.h"], "c.h": ["a.h"]},
    }
