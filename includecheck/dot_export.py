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
"""Export include graphs as Graphviz DOT text or NetworkX graph files."""

import os
import json
import logging
from typing import List

import networkx as nx
from networkx.readwrite import json_graph

from .constants import DEFAULT_PROJECT_PREFIX, DOT_EDGE_INDENT, DOT_FOOTER, DOT_HEADER, SUPPORTED_GRAPH_FORMATS, ExportError
from .graph_utils import to_multidigraph
from .include_graph import EdgeSet

logger = logging.getLogger(__name__)


def strip_project_prefix(path: str, project_prefix: str = DEFAULT_PROJECT_PREFIX) -> str:
    """Remove the project prefix from a path for display."""
    if path.startswith(project_prefix):
        return path[len(project_prefix) :]
    return path


def export_dot(edges: EdgeSet, project_prefix: str = DEFAULT_PROJECT_PREFIX) -> str:
    """Serialize an edge set as a Graphviz digraph.

    Edges are written in edge-set order, duplicates included, with the
    project prefix stripped from both ends:

        digraph includes {
          "runtime/a.h" -> "runtime/b.h";
        }
    """
    lines: List[str] = [DOT_HEADER]
    for source, destinations in edges.items():
        src = strip_project_prefix(source, project_prefix)
        for destination in destinations:
            dst = strip_project_prefix(destination, project_prefix)
            lines.append(f'{DOT_EDGE_INDENT}"{src}" -> "{dst}";')
    lines.append(DOT_FOOTER)
    return "\n".join(lines) + "\n"


def export_graph_file(filename: str, edges: EdgeSet, project_prefix: str = DEFAULT_PROJECT_PREFIX) -> None:
    """Write the include graph to a file, format chosen by extension.

    Supports: DOT (.dot), GraphML (.graphml), GEXF (.gexf), node-link JSON (.json).
    Nodes carry a ``label`` attribute with the project prefix stripped.

    Raises:
        ExportError: If the extension is unsupported or the file cannot be written
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_GRAPH_FORMATS:
        raise ExportError(f"Unsupported graph format '{ext}' for {filename}. Supported: {', '.join(SUPPORTED_GRAPH_FORMATS)}")

    try:
        if ext == ".dot":
            with open(filename, "w", encoding="utf-8") as f:
                f.write(export_dot(edges, project_prefix))
        else:
            G = to_multidigraph(edges)
            for node in G.nodes():
                G.nodes[node]["label"] = strip_project_prefix(node, project_prefix)

            if ext == ".graphml":
                nx.write_graphml(G, filename)
            elif ext == ".gexf":
                nx.write_gexf(G, filename)
            else:
                data = json_graph.node_link_data(G)
                with open(filename, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
    except OSError as e:
        raise ExportError(f"Failed to write {filename}: {e}") from e

    logger.info("Exported include graph to %s", filename)
