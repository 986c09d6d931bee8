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
"""Graph utilities for include edge sets using NetworkX."""

import logging
from dataclasses import dataclass
from typing import Any, List, Set, Tuple

import networkx as nx

from .include_graph import EdgeSet

logger = logging.getLogger(__name__)


@dataclass
class GraphStatistics:
    """Size of an include graph.

    Attributes:
        nodes: Number of distinct files appearing in any edge
        edges: Number of include edges, duplicates counted
        unique_edges: Number of distinct (includer, included) pairs
    """

    nodes: int
    edges: int
    unique_edges: int


@dataclass
class CycleSummary:
    """Strongly connected structure of an include graph.

    Attributes:
        cyclic_groups: Multi-file strongly connected components, largest first
        self_loops: Files that include themselves
        headers_in_cycles: Every file in a cyclic group or a self-loop
    """

    cyclic_groups: List[Set[str]]
    self_loops: List[str]
    headers_in_cycles: Set[str]

    @property
    def has_cycles(self) -> bool:
        return bool(self.cyclic_groups or self.self_loops)


def to_multidigraph(edges: EdgeSet) -> "nx.MultiDiGraph[Any]":
    """Build a NetworkX multigraph that keeps duplicate include edges.

    Each edge carries an ``order`` attribute with its position in the edge set.
    """
    G: nx.MultiDiGraph[str] = nx.MultiDiGraph()
    order = 0
    for source, destinations in edges.items():
        for destination in destinations:
            G.add_edge(source, destination, order=order)
            order += 1

    logger.debug("Built multigraph with %s nodes and %s edges", G.number_of_nodes(), G.number_of_edges())
    return G


def to_digraph(edges: EdgeSet) -> "nx.DiGraph[Any]":
    """Build a NetworkX directed graph with duplicate edges collapsed."""
    G: nx.DiGraph[str] = nx.DiGraph()
    G.add_edges_from((source, destination) for source, destinations in edges.items() for destination in destinations)
    return G


def find_strongly_connected_components(graph: "nx.DiGraph[Any]") -> Tuple[List[Set[str]], List[str]]:
    """Find multi-file strongly connected components and self-loops.

    Args:
        graph: NetworkX DiGraph

    Returns:
        Tuple of (cyclic_groups, self_loops), both in a stable order
    """
    cyclic_groups = []
    self_loops = []
    for scc in nx.strongly_connected_components(graph):
        if len(scc) > 1:
            cyclic_groups.append(scc)
        else:
            node = next(iter(scc))
            if graph.has_edge(node, node):
                self_loops.append(node)

    cyclic_groups.sort(key=lambda group: (-len(group), min(group)))
    self_loops.sort()
    return cyclic_groups, self_loops


def summarize_cycles(edges: EdgeSet) -> CycleSummary:
    """Group the files taking part in cycles by strongly connected component."""
    cyclic_groups, self_loops = find_strongly_connected_components(to_digraph(edges))

    headers_in_cycles: Set[str] = set(self_loops)
    for group in cyclic_groups:
        headers_in_cycles.update(group)

    return CycleSummary(cyclic_groups=cyclic_groups, self_loops=self_loops, headers_in_cycles=headers_in_cycles)


def graph_statistics(edges: EdgeSet) -> GraphStatistics:
    """Count files and include edges."""
    G = to_multidigraph(edges)
    return GraphStatistics(nodes=G.number_of_nodes(), edges=G.number_of_edges(), unique_edges=nx.DiGraph(G).number_of_edges())
