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
"""Text-based #include extraction.

The scanner is deliberately syntactic: it does not evaluate preprocessor
conditionals and only recognizes the canonical single-space form

    #include <path>
    #include "path"

on a line of its own. Anything else (trailing comments, macro includes,
``# include``) is ignored.
"""

import re
import fnmatch
import hashlib
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import AnalysisConfig
from .constants import SourceFileNotFoundError

logger = logging.getLogger(__name__)

INCLUDE_PATTERN = re.compile(r'\s*#include (?:<([^>]*)>|"([^"]*)")')


@dataclass(frozen=True)
class IncludeRecord:
    """A single include directive.

    Attributes:
        path: Included path exactly as written between the delimiters
        is_system: True if the include is outside the project and gets no graph edge
    """

    path: str
    is_system: bool


def path_digest(path: str) -> str:
    """Return the SHA-1 hex digest used to allow-list a path without naming it."""
    return hashlib.sha1(path.encode("utf-8")).hexdigest()


def is_fake_system_header(path: str, config: AnalysisConfig) -> bool:
    """Check whether a project path is an allow-listed generated file."""
    if path in config.fake_system_headers:
        return True
    return path_digest(path) in config.fake_system_headers


def is_excluded(path: str, config: AnalysisConfig) -> bool:
    """Check whether a path matches one of the configured exclude patterns."""
    return any(fnmatch.fnmatch(path, pattern) for pattern in config.exclude_patterns)


def classify_include(path: str, config: AnalysisConfig) -> bool:
    """Return True if the included path must be treated as a system include."""
    if not path.startswith(config.project_prefix):
        return True
    if is_fake_system_header(path, config):
        logger.debug("Treating generated header %s as system", path)
        return True
    return is_excluded(path, config)


def parse_include_lines(lines: Iterable[str]) -> List[str]:
    """Extract included paths from lines of text, in order and without deduplication.

    Example:
        >>> parse_include_lines(['#include "hphp/a.h"', "int x;", "#include <vector>"])
        ['hphp/a.h', 'vector']
    """
    paths = []
    for line in lines:
        match = INCLUDE_PATTERN.fullmatch(line.strip())
        if match:
            angled, quoted = match.groups()
            paths.append(angled if angled is not None else quoted)
    return paths


def extract_headers(file_path: str, config: Optional[AnalysisConfig] = None, display_path: Optional[str] = None) -> List[IncludeRecord]:
    """Read a file and return its include directives, classified.

    Args:
        file_path: Filesystem path to read
        config: Classification settings (default: AnalysisConfig())
        display_path: Name used in error messages (default: file_path)

    Returns:
        IncludeRecord list in the order the directives appear

    Raises:
        SourceFileNotFoundError: If the file does not exist or cannot be read
    """
    if config is None:
        config = AnalysisConfig()

    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            paths = parse_include_lines(f)
    except OSError as e:
        logger.debug("Failed to read %s: %s", file_path, e)
        raise SourceFileNotFoundError(display_path or file_path) from e

    records = [IncludeRecord(path, classify_include(path, config)) for path in paths]
    logger.debug("%s: %d includes (%d system)", display_path or file_path, len(records), sum(r.is_system for r in records))
    return records
