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
"""Cycle enumeration over an include edge set.

A depth-first search with an explicit path stack is started from every file
that has outgoing edges, in edge-set order. One visited set is shared by all
searches, so a file fully explored from one root is not explored again from a
later one; it can still close a cycle while it is on the active path.

Every cycle is reported under the root whose search found it. Identical cycle
sequences are recorded once per root; rotations of the same loop are distinct.
"""

import logging
from typing import Dict, Iterator, List, Set, Tuple

from .include_graph import EdgeSet

logger = logging.getLogger(__name__)

Cycle = List[str]

# search root -> cycles found from it, in discovery order
CycleReport = Dict[str, List[Cycle]]


class CycleFinder:
    """Owns the visited set, path stack and report for one cycle search."""

    def __init__(self, edges: EdgeSet):
        self.edges = edges
        self.visited: Set[str] = set()
        self.report: CycleReport = {}
        self._path: List[str] = []
        self._path_index: Dict[str, int] = {}

    def _record(self, root: str, cycle: Cycle) -> None:
        cycles = self.report.setdefault(root, [])
        if cycle not in cycles:
            logger.debug("Cycle from %s: %s", root, " -> ".join(cycle))
            cycles.append(cycle)

    def _enter(self, node: str, root: str) -> bool:
        """Handle arrival at a node; True if its edges must be searched."""
        position = self._path_index.get(node)
        if position is not None:
            self._record(root, self._path[position:] + [node])
            return False
        if node in self.visited:
            return False

        self.visited.add(node)
        self._path_index[node] = len(self._path)
        self._path.append(node)
        return True

    def _leave(self) -> None:
        node = self._path.pop()
        del self._path_index[node]

    def search(self, root: str) -> None:
        """Run the path-stack DFS from one root."""
        if not self._enter(root, root):
            return

        pending: List[Iterator[str]] = [iter(self.edges.get(root, ()))]
        while pending:
            child = next(pending[-1], None)
            if child is None:
                pending.pop()
                self._leave()
            elif self._enter(child, root):
                pending.append(iter(self.edges.get(child, ())))

    def run(self) -> CycleReport:
        for root in self.edges:
            self.search(root)
        return self.report


def find_cycles(edges: EdgeSet) -> CycleReport:
    """Find all cycles reachable in the edge set.

    Args:
        edges: Include edge set from build_include_graph()

    Returns:
        Mapping of search root -> distinct cycles, each starting and ending at the same file.
        Roots without cycles are absent; an acyclic graph yields an empty dict.
    """
    report = CycleFinder(edges).run()
    logger.info("Found %d cycles from %d roots", count_cycles(report), len(report))
    return report


def count_cycles(report: CycleReport) -> int:
    """Total number of cycles in a report."""
    return sum(len(cycles) for cycles in report.values())


def iter_cycle_edges(cycle: Cycle) -> Iterator[Tuple[str, str]]:
    """Yield consecutive (includer, included) pairs along a cycle."""
    return zip(cycle, cycle[1:])


def format_cycle_report(report: CycleReport) -> str:
    """Render a cycle report as text.

    One block per root: a count line, each cycle with one file per line, then
    a blank line.
    """
    lines: List[str] = []
    for root, cycles in report.items():
        lines.append(f"{len(cycles)} cycles starting at {root}:")
        for cycle in cycles:
            lines.extend(cycle)
            lines.append("")
    return "\n".join(lines) + "\n" if lines else ""
