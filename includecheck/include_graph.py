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
"""Transitive include graph construction.

Starting from one or more root files, every in-project include is followed
depth-first. Each file is scanned at most once; the resulting edge set keeps
includes in the order they were found, duplicates included.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .config import AnalysisConfig
from .header_extractor import IncludeRecord, extract_headers

logger = logging.getLogger(__name__)

# source file -> included files, in include order
EdgeSet = Dict[str, List[str]]

HeaderExtractor = Callable[[str], List[IncludeRecord]]


class IncludeGraphBuilder:
    """Owns the visited set and edge set for one graph-construction pass.

    The extractor is called with a file identifier and returns its include
    records. By default it reads the file below config.source_root.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, extractor: Optional[HeaderExtractor] = None):
        self.config = config if config is not None else AnalysisConfig()
        self._extractor = extractor if extractor is not None else self._read_headers
        self.visited: Set[str] = set()
        self.edges: EdgeSet = {}

    def _read_headers(self, identifier: str) -> List[IncludeRecord]:
        return extract_headers(self.config.resolve(identifier), self.config, display_path=identifier)

    def _project_includes(self, identifier: str) -> Iterator[str]:
        records = self._extractor(identifier)
        return iter([record.path for record in records if not record.is_system])

    def _claim(self, identifier: str) -> bool:
        """Mark a file visited; False if it already was."""
        if identifier in self.visited:
            return False
        self.visited.add(identifier)
        return True

    def visit(self, root: str) -> None:
        """Depth-first traversal from one root.

        Equivalent to recursing into every included file right after its edge
        is recorded, but uses an explicit stack so deep include chains do not
        hit the interpreter recursion limit.
        """
        if not self._claim(root):
            return

        stack: List[Tuple[str, Iterator[str]]] = [(root, self._project_includes(root))]
        while stack:
            current, pending = stack[-1]
            header = next(pending, None)
            if header is None:
                stack.pop()
                continue

            self.edges.setdefault(current, []).append(header)
            if self._claim(header):
                stack.append((header, self._project_includes(header)))

    def build(self, root_files: Iterable[str]) -> EdgeSet:
        """Visit every root, sharing state between them, and return the edge set."""
        for root in root_files:
            logger.debug("Scanning includes from root %s", root)
            self.visit(root)

        logger.info("Scanned %d files, found %d include edges", len(self.visited), sum(len(dsts) for dsts in self.edges.values()))
        return self.edges


def build_include_graph(
    root_files: Iterable[str], config: Optional[AnalysisConfig] = None, extractor: Optional[HeaderExtractor] = None
) -> EdgeSet:
    """Build the include edge set reachable from the given root files.

    Args:
        root_files: File identifiers to start from, relative to config.source_root
        config: Classification and path settings (default: AnalysisConfig())
        extractor: Replacement for the default text scanner

    Returns:
        Mapping of file -> included files (only files with at least one project include are keys)

    Raises:
        SourceFileNotFoundError: If a root or an included project file cannot be read
    """
    return IncludeGraphBuilder(config, extractor).build(root_files)
