#!/usr/bin/env python3
"""Tests for includecheck/config.py"""

import json
import os
from pathlib import Path

import pytest

from includecheck.config import AnalysisConfig, config_from_dict, load_config
from includecheck.constants import DEFAULT_PROJECT_PREFIX, FAKE_SYSTEM_HEADERS, ConfigError


class TestAnalysisConfig:
    def test_defaults(self) -> None:
        config = AnalysisConfig()
        assert config.project_prefix == DEFAULT_PROJECT_PREFIX
        assert config.fake_system_headers == FAKE_SYSTEM_HEADERS
        assert config.exclude_patterns == ()
        assert config.source_root == "."

    def test_resolve(self) -> None:
        assert AnalysisConfig(source_root="/src").resolve("hphp/a.h") == os.path.join("/src", "hphp/a.h")

    def test_overrides(self) -> None:
        config = AnalysisConfig(exclude_patterns=("a/*",)).with_overrides(source_root="/src", project_prefix="src/", exclude_patterns=["b/*"])
        assert config.source_root == "/src"
        assert config.project_prefix == "src/"
        assert config.exclude_patterns == ("a/*", "b/*")

    def test_no_overrides_keeps_values(self) -> None:
        config = AnalysisConfig(project_prefix="src/")
        assert config.with_overrides() == config


class TestConfigFromDict:
    def test_extends_default_allow_list(self) -> None:
        config = config_from_dict({"fake_system_headers": ["hphp/gen.h"]})
        assert "hphp/gen.h" in config.fake_system_headers
        assert FAKE_SYSTEM_HEADERS <= config.fake_system_headers

    def test_replaces_default_allow_list(self) -> None:
        config = config_from_dict({"fake_system_headers": ["hphp/gen.h"], "replace_fake_system_headers": True})
        assert config.fake_system_headers == frozenset({"hphp/gen.h"})

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"project_prefix": ""},
            {"project_prefix": 3},
            {"fake_system_headers": "hphp/gen.h"},
            {"exclude_patterns": [1, 2]},
            {"replace_fake_system_headers": "yes"},
        ],
    )
    def test_invalid_values(self, data: object) -> None:
        with pytest.raises(ConfigError):
            config_from_dict(data)  # type: ignore[arg-type]

    def test_unknown_keys_are_ignored(self) -> None:
        assert config_from_dict({"colour": "blue"}) == AnalysisConfig()


class TestLoadConfig:
    def test_load(self, temp_dir: Path) -> None:
        path = temp_dir / "includecheck.json"
        path.write_text(json.dumps({"project_prefix": "src/", "exclude_patterns": ["src/vendor/*"]}))
        config = load_config(str(path))
        assert config.project_prefix == "src/"
        assert config.exclude_patterns == ("src/vendor/*",)

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(str(temp_dir / "nope.json"))

    def test_invalid_json(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(path))
        assert exc_info.value.exit_code == 1
