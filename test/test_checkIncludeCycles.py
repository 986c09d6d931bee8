#!/usr/bin/env python3
"""End-to-end tests for checkIncludeCycles.py"""

import json
from pathlib import Path
from typing import Callable, Dict
from unittest.mock import patch

import pytest

import checkIncludeCycles
from checkIncludeCycles import main

TreeFactory = Callable[[Dict[str, str]], str]

CYCLIC_TREE = {
    "hphp/a.h": '#include "hphp/b.h"\n',
    "hphp/b.h": '#include "hphp/a.h"\n',
}

ACYCLIC_TREE = {
    "hphp/a.h": '#include "hphp/b.h"\n#include "hphp/c.h"\n',
    "hphp/b.h": "",
    "hphp/c.h": "",
}


class TestCycleMode:
    """Default mode: report cycles, exit 1 when any are found."""

    def test_two_file_cycle(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree(CYCLIC_TREE)
        assert main(["--root", root, "hphp/a.h"]) == 1
        assert capsys.readouterr().out == "1 cycles starting at hphp/a.h:\nhphp/a.h\nhphp/b.h\nhphp/a.h\n\n"

    def test_no_cycles(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree(ACYCLIC_TREE)
        assert main(["--root", root, "hphp/a.h"]) == 0
        assert capsys.readouterr().out == ""

    def test_system_include_is_not_followed(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        """The system header does not exist on disk; it must never be opened."""
        root = make_tree({"hphp/a.h": "#include <system/thing.h>\n"})
        assert main(["--root", root, "--dot", "hphp/a.h"]) == 0
        assert "thing" not in capsys.readouterr().out

    def test_multiple_roots(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree(dict(ACYCLIC_TREE, **{"hphp/x.h": '#include "hphp/x.h"\n'}))
        assert main(["--root", root, "hphp/a.h", "hphp/x.h"]) == 1
        assert capsys.readouterr().out == "1 cycles starting at hphp/x.h:\nhphp/x.h\nhphp/x.h\n\n"

    def test_summary(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree(CYCLIC_TREE)
        assert main(["--root", root, "--summary", "--no-color", "hphp/a.h"]) == 1
        out = capsys.readouterr().out
        assert "Cycle summary:" in out
        assert "Group 1 (2 files): a.h, b.h" in out

    def test_exclude_breaks_cycle(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree(CYCLIC_TREE)
        assert main(["--root", root, "--exclude", "hphp/b.h", "hphp/a.h"]) == 0

    def test_config_file(self, make_tree: TreeFactory, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree({"src/a.h": '#include "src/b.h"\n', "src/b.h": '#include "src/a.h"\n'})
        config_path = temp_dir / "config.json"
        config_path.write_text(json.dumps({"project_prefix": "src/"}))
        assert main(["--root", root, "--config", str(config_path), "src/a.h"]) == 1
        assert "1 cycles starting at src/a.h:" in capsys.readouterr().out


class TestDotMode:
    def test_duplicate_includes(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree({"hphp/a.h": '#include "hphp/b.h"\n#include "hphp/b.h"\n', "hphp/b.h": ""})
        assert main(["--root", root, "--dot", "hphp/a.h"]) == 0
        assert capsys.readouterr().out == 'digraph includes {\n  "a.h" -> "b.h";\n  "a.h" -> "b.h";\n}\n'

    def test_prefix_stripped(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree({"hphp/runtime/a.h": '#include "hphp/runtime/b.h"\n', "hphp/runtime/b.h": ""})
        assert main(["--root", root, "--dot", "hphp/runtime/a.h"]) == 0
        assert '"runtime/a.h" -> "runtime/b.h";' in capsys.readouterr().out

    def test_cycles_do_not_change_exit_status(self, make_tree: TreeFactory) -> None:
        root = make_tree(CYCLIC_TREE)
        assert main(["--root", root, "--dot", "hphp/a.h"]) == 0

    def test_output_file(self, make_tree: TreeFactory, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree(CYCLIC_TREE)
        output = temp_dir / "out.graphml"
        assert main(["--root", root, "--dot", "--output", str(output), "hphp/a.h"]) == 0
        assert output.exists()
        assert capsys.readouterr().out == ""

    def test_unsupported_output_format(self, make_tree: TreeFactory, temp_dir: Path) -> None:
        root = make_tree(CYCLIC_TREE)
        assert main(["--root", root, "--dot", "--output", str(temp_dir / "out.svg"), "hphp/a.h"]) == 2


class TestErrors:
    """Usage problems and unreadable files exit with status 1."""

    def test_missing_file(self, make_tree: TreeFactory, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree({"hphp/a.h": '#include "hphp/missing.h"\n'})
        assert main(["--root", root, "hphp/a.h"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Cannot read file: hphp/missing.h" in captured.err

    def test_no_arguments(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().err

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--help"]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_unknown_option(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--bogus", "hphp/a.h"]) == 1
        assert "unrecognized arguments" in capsys.readouterr().err

    def test_output_without_dot(self) -> None:
        assert main(["--output", "graph.dot", "hphp/a.h"]) == 1

    def test_missing_source_root(self, temp_dir: Path) -> None:
        assert main(["--root", str(temp_dir / "nope"), "hphp/a.h"]) == 1

    def test_bad_config(self, make_tree: TreeFactory, temp_dir: Path) -> None:
        root = make_tree(CYCLIC_TREE)
        config_path = temp_dir / "config.json"
        config_path.write_text("[1, 2")
        assert main(["--root", root, "--config", str(config_path), "hphp/a.h"]) == 1

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out


class TestRun:
    def test_exit_code_is_propagated(self) -> None:
        with patch.object(checkIncludeCycles, "main", return_value=1):
            with pytest.raises(SystemExit) as exc_info:
                checkIncludeCycles.run()
        assert exc_info.value.code == 1

    def test_keyboard_interrupt(self) -> None:
        with patch.object(checkIncludeCycles, "main", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                checkIncludeCycles.run()
        assert exc_info.value.code == 130

    def test_unexpected_error(self) -> None:
        with patch.object(checkIncludeCycles, "main", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                checkIncludeCycles.run()
        assert exc_info.value.code == 2
