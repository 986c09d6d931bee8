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
"""Detect circular #include dependencies, or export the include graph.

Version: 1.0.0

PURPOSE:
    Finds circular header dependencies in a project tree. Starting from one or
    more root files, every in-project #include is followed transitively and the
    resulting "file includes file" graph is either searched for cycles or
    written out for visualization.

WHAT IT DOES:
    - Scans files line by line for '#include <path>' / '#include "path"'
    - Follows only includes that start with the project prefix (default: hphp/)
    - Treats allow-listed generated headers and --exclude matches as system headers
    - Reports every cycle, grouped by the file whose search found it
    - Or emits a Graphviz DOT graph (project prefix stripped) for rendering

METHOD:
    Purely textual. Preprocessor conditionals are not evaluated, so includes in
    disabled #if branches still produce edges. Include paths are used verbatim
    as node names; no include search path resolution is done.

OUTPUT:
    Cycle mode (default):
        <N> cycles starting at <root>:
        hphp/a.h
        hphp/b.h
        hphp/a.h

    DOT mode (--dot):
        digraph includes {
          "a.h" -> "b.h";
        }

EXIT STATUS:
    0  No cycles found (cycle mode) or graph exported (DOT mode)
    1  Cycles found, missing arguments, --help, or an unreadable file
    2  Unexpected error or failed graph file export

EXAMPLES:
    # Check a header for circular includes (run from the source root)
    ./checkIncludeCycles.py hphp/runtime/base/types.h

    # Several roots sharing one graph
    ./checkIncludeCycles.py hphp/runtime/vm/bytecode.h hphp/runtime/vm/func.h

    # Render the include graph
    ./checkIncludeCycles.py --dot hphp/runtime/base/types.h | dot -Tsvg > includes.svg

    # Write GraphML for Gephi/yEd
    ./checkIncludeCycles.py --dot --output includes.graphml hphp/runtime/base/types.h
"""
import sys
import argparse
import logging
import os
from typing import List, Optional

from includecheck import __version__
from includecheck.color_utils import Colors, configure_color, print_error, print_success
from includecheck.config import AnalysisConfig, load_config
from includecheck.constants import (
    EXIT_CYCLES_FOUND,
    EXIT_INVALID_ARGS,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    MAX_SUMMARY_GROUPS,
    IncludeCheckError,
    UsageError,
)
from includecheck.cycle_finder import count_cycles, find_cycles, format_cycle_report
from includecheck.dot_export import export_dot, export_graph_file, strip_project_prefix
from includecheck.graph_utils import CycleSummary, graph_statistics, summarize_cycles
from includecheck.include_graph import build_include_graph
from includecheck.package_verification import verify_requirements

logger = logging.getLogger(__name__)


class IncludeCheckArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def create_parser() -> IncludeCheckArgumentParser:
    """Create the command-line parser."""
    parser = IncludeCheckArgumentParser(
        prog="checkIncludeCycles.py",
        description="Detect circular #include dependencies, or export the include graph as DOT.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        "  %(prog)s hphp/runtime/base/types.h\n"
        "  %(prog)s --dot hphp/runtime/base/types.h | dot -Tsvg > includes.svg\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )

    parser.add_argument("files", nargs="*", metavar="FILE", help="Root files to analyze, relative to --root")

    parser.add_argument("-h", "--help", action="store_true", help="Show this help message and exit")

    parser.add_argument("--dot", action="store_true", help="Print the include graph in Graphviz DOT format instead of reporting cycles")

    parser.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="With --dot: write the graph to FILE instead of stdout. Format by extension: .dot, .graphml, .gexf, .json",
    )

    parser.add_argument("--root", metavar="DIR", help="Source root that root files and include paths are resolved against (default: current directory)")

    parser.add_argument("--prefix", metavar="PREFIX", help="Include prefix that marks project files (default: hphp/)")

    parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Treat includes matching this glob as system headers (can be used multiple times). " 'Example: "hphp/third-party/*"',
    )

    parser.add_argument("--config", metavar="FILE", help="JSON file with project_prefix, fake_system_headers and exclude_patterns")

    parser.add_argument("--summary", action="store_true", help="After the cycle report, list the groups of files that form cycles")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], default="WARNING", help="Set logging level (default: WARNING)"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def parse_arguments(parser: argparse.ArgumentParser, argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse and validate arguments. Validation is skipped when --help is given.

    Raises:
        UsageError: On missing root files or an invalid combination
    """
    args = parser.parse_args(argv)

    if args.help:
        return args
    if not args.files:
        raise UsageError("at least one FILE is required")
    if args.output and not args.dot:
        raise UsageError("--output requires --dot")

    return args


def setup_logging(log_level_str: str, verbose: bool = False) -> None:
    """Configure logging to stderr so stdout only carries the report or graph."""
    log_level = logging.DEBUG if verbose else getattr(logging, log_level_str)
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def resolve_config(args: argparse.Namespace) -> AnalysisConfig:
    """Combine the optional config file with command-line overrides."""
    config = load_config(args.config) if args.config else AnalysisConfig()
    config = config.with_overrides(source_root=args.root, project_prefix=args.prefix, exclude_patterns=args.exclude)

    if not os.path.isdir(config.source_root):
        raise UsageError(f"source root is not a directory: {config.source_root}")

    logger.debug("Source root: %s, project prefix: %s", config.source_root, config.project_prefix)
    return config


def print_cycle_summary(summary: CycleSummary, project_prefix: str) -> None:
    """Print the strongly connected groups behind the reported cycles."""
    print(f"{Colors.BRIGHT}Cycle summary:{Colors.RESET}")
    if not summary.has_cycles:
        print_success("  No circular includes")
        return

    print(f"  {Colors.CYAN}{len(summary.headers_in_cycles)}{Colors.RESET} files in {len(summary.cyclic_groups)} cyclic groups")
    for index, group in enumerate(summary.cyclic_groups[:MAX_SUMMARY_GROUPS], 1):
        members = ", ".join(strip_project_prefix(header, project_prefix) for header in sorted(group))
        print(f"  {Colors.RED}Group {index}{Colors.RESET} ({len(group)} files): {members}")
    if len(summary.cyclic_groups) > MAX_SUMMARY_GROUPS:
        print(f"  {Colors.DIM}... and {len(summary.cyclic_groups) - MAX_SUMMARY_GROUPS} more{Colors.RESET}")

    for header in summary.self_loops:
        print(f"  {Colors.YELLOW}Self-include:{Colors.RESET} {strip_project_prefix(header, project_prefix)}")


def run_analysis(args: argparse.Namespace, config: AnalysisConfig) -> int:
    """Build the graph, then report cycles or export it.

    Returns:
        Exit code
    """
    edges = build_include_graph(args.files, config)

    if logger.isEnabledFor(logging.INFO):
        stats = graph_statistics(edges)
        logger.info("Include graph: %d files, %d edges (%d unique)", stats.nodes, stats.edges, stats.unique_edges)

    if args.dot:
        if args.output:
            export_graph_file(args.output, edges, config.project_prefix)
            print_success(f"Exported include graph to {args.output}", file=sys.stderr)
        else:
            sys.stdout.write(export_dot(edges, config.project_prefix))
        return EXIT_SUCCESS

    report = find_cycles(edges)
    sys.stdout.write(format_cycle_report(report))

    if args.summary:
        print_cycle_summary(summarize_cycles(edges), config.project_prefix)

    if report:
        logger.info("%d include cycles found", count_cycles(report))
        return EXIT_CYCLES_FOUND
    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for cycles or failure)
    """
    parser = create_parser()
    try:
        args = parse_arguments(parser, argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print_error(str(e))
        return e.exit_code

    if args.help:
        parser.print_help()
        return EXIT_INVALID_ARGS

    setup_logging(args.log_level, args.verbose)
    configure_color(args.no_color)

    try:
        verify_requirements()
        config = resolve_config(args)
        return run_analysis(args, config)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print_error(str(e))
        return e.exit_code
    except IncludeCheckError as e:
        logger.debug("Analysis aborted", exc_info=True)
        print_error(str(e))
        return e.exit_code


def run() -> None:
    """Console entry point: main() plus interrupt and crash handling."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print(f"\n{Colors.YELLOW}Interrupted by user{Colors.RESET}", file=sys.stderr)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except Exception as e:  # pylint: disable=broad-except
        logging.critical("Unexpected error: %s", e, exc_info=True)
        print(f"\n{Colors.RED}Fatal error: {e}{Colors.RESET}", file=sys.stderr)
        print(f"{Colors.YELLOW}Run with --verbose for more details{Colors.RESET}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)


if __name__ == "__main__":
    run()
