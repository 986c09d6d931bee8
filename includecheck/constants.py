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
"""Shared constants and exception classes for the include-check tools.

Centralizes exit codes, the project prefix that marks in-tree includes, the
built-in list of generated files that must be treated as system headers, and
the exception hierarchy used by the command-line entry point.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_CYCLES_FOUND = 1
EXIT_INVALID_ARGS = 1
EXIT_FILE_NOT_FOUND = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Include Classification Constants
# =============================================================================

# Includes starting with this prefix belong to the project tree
DEFAULT_PROJECT_PREFIX = "hphp/"

# Default directory the root files and include paths are resolved against
DEFAULT_SOURCE_ROOT = "."

# Generated build artifacts that live under the project prefix but never exist
# in the source tree. Entries are either literal include paths or the SHA-1 hex
# digest of the path (for paths that must not appear literally in source).
FAKE_SYSTEM_HEADERS = frozenset(
    {
        "hphp/util/build-info.h",
        "hphp/runtime/vm/jit/vasm-instr-generated.h",
        "hphp/runtime/ir-opcode-generated.h",
        "c8960f30266ccc12b60f5933c7697a02ab86f4e6",
        "3b0681a7169cd171b90a6e93ea796071ac3ef534",
    }
)

# =============================================================================
# Graph Export Constants
# =============================================================================

DOT_HEADER = "digraph includes {"
DOT_FOOTER = "}"
DOT_EDGE_INDENT = "  "

SUPPORTED_GRAPH_FORMATS = [".dot", ".graphml", ".gexf", ".json"]

# =============================================================================
# Display Limits
# =============================================================================

MAX_SUMMARY_GROUPS = 20  # Maximum cyclic groups listed by --summary

# =============================================================================
# Exception Classes
# =============================================================================


class IncludeCheckError(Exception):
    """Base exception for all include-check errors.

    Every exception carries an exit_code attribute that tells the entry point
    which status to exit with when the error reaches it.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class UsageError(IncludeCheckError):
    """Raised when required arguments are missing or help was requested."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class SourceFileNotFoundError(IncludeCheckError, FileNotFoundError):
    """Raised when a root file or an included project file cannot be read."""

    def __init__(self, path: str):
        super().__init__(f"Cannot read file: {path}", EXIT_FILE_NOT_FOUND)
        self.path = path


class ConfigError(IncludeCheckError):
    """Raised when a configuration file is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ExportError(IncludeCheckError):
    """Raised when the include graph cannot be written to a file."""
