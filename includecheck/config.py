#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Analysis configuration: project prefix, source root and the system allow-list.

The built-in allow-list of generated headers lives in constants.py. A JSON file
can extend or replace it so that project-specific generated files do not have to
be baked into the tool:

    {
        "project_prefix": "hphp/",
        "fake_system_headers": ["hphp/runtime/foo-generated.h", "<sha1 hex digest>"],
        "replace_fake_system_headers": false,
        "exclude_patterns": ["hphp/third-party/*"]
    }
"""

import os
import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from .constants import DEFAULT_PROJECT_PREFIX, DEFAULT_SOURCE_ROOT, FAKE_SYSTEM_HEADERS, ConfigError

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset({"project_prefix", "fake_system_headers", "replace_fake_system_headers", "exclude_patterns"})


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings shared by the header extractor and the graph builder.

    Attributes:
        source_root: Directory that include paths and root files are resolved against
        project_prefix: Includes starting with this prefix belong to the project
        fake_system_headers: Paths (or SHA-1 digests of paths) treated as system headers
        exclude_patterns: fnmatch globs; matching includes are treated as system headers
    """

    source_root: str = DEFAULT_SOURCE_ROOT
    project_prefix: str = DEFAULT_PROJECT_PREFIX
    fake_system_headers: FrozenSet[str] = field(default_factory=lambda: FAKE_SYSTEM_HEADERS)
    exclude_patterns: Tuple[str, ...] = ()

    def resolve(self, identifier: str) -> str:
        """Return the filesystem path of a file identifier."""
        return os.path.join(self.source_root, identifier)

    def with_overrides(
        self,
        source_root: Optional[str] = None,
        project_prefix: Optional[str] = None,
        exclude_patterns: Optional[Iterable[str]] = None,
    ) -> "AnalysisConfig":
        """Return a copy with command-line overrides applied.

        Exclude patterns are appended to the configured ones rather than replacing them.
        """
        changes: Dict[str, Any] = {}
        if source_root is not None:
            changes["source_root"] = source_root
        if project_prefix is not None:
            changes["project_prefix"] = project_prefix
        if exclude_patterns:
            changes["exclude_patterns"] = self.exclude_patterns + tuple(exclude_patterns)
        return replace(self, **changes)


def _require_string_list(data: Dict[str, Any], key: str, config_path: str) -> Tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{config_path}: '{key}' must be a list of strings")
    return tuple(value)


def config_from_dict(data: Dict[str, Any], config_path: str = "<config>") -> AnalysisConfig:
    """Build an AnalysisConfig from already-parsed JSON data.

    Args:
        data: Parsed JSON object
        config_path: Name used in error messages

    Returns:
        AnalysisConfig with defaults for every key not present

    Raises:
        ConfigError: If the data is not an object or a value has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: top level must be a JSON object")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", config_path, ", ".join(unknown))

    prefix = data.get("project_prefix", DEFAULT_PROJECT_PREFIX)
    if not isinstance(prefix, str) or not prefix:
        raise ConfigError(f"{config_path}: 'project_prefix' must be a non-empty string")

    replace_defaults = data.get("replace_fake_system_headers", False)
    if not isinstance(replace_defaults, bool):
        raise ConfigError(f"{config_path}: 'replace_fake_system_headers' must be true or false")

    extra_headers = _require_string_list(data, "fake_system_headers", config_path)
    fake_system_headers = frozenset(extra_headers) if replace_defaults else FAKE_SYSTEM_HEADERS | frozenset(extra_headers)

    return AnalysisConfig(
        project_prefix=prefix,
        fake_system_headers=fake_system_headers,
        exclude_patterns=_require_string_list(data, "exclude_patterns", config_path),
    )


def load_config(config_path: str) -> AnalysisConfig:
    """Load an AnalysisConfig from a JSON file.

    Raises:
        ConfigError: If the file cannot be read or does not hold a valid configuration
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}") from e

    config = config_from_dict(data, config_path)
    logger.debug("Loaded config from %s (%d fake system headers)", config_path, len(config.fake_system_headers))
    return config
