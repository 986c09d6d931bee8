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
"""Minimum-version checks for include-check runtime dependencies.

Minimum versions follow Ubuntu 24.04 LTS or actual code requirements,
whichever is higher.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Dict, List, Optional, Tuple

from packaging.version import parse

from .constants import EXIT_RUNTIME_ERROR, IncludeCheckError

logger = logging.getLogger(__name__)

PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "networkx": "2.8.8",
    "packaging": "24.0",
    "colorama": "0.4.6",
}


def check_package_version(package_name: str, min_version: Optional[str] = None) -> Tuple[bool, bool, Optional[str]]:
    """Check if a package is installed and meets its minimum version.

    Args:
        package_name: Distribution name (e.g., 'networkx')
        min_version: Minimum version; defaults to PACKAGE_REQUIREMENTS

    Returns:
        Tuple of (is_installed, meets_version, installed_version)

    Raises:
        ValueError: If no minimum version is known for the package

    Example:
        >>> check_package_version('networkx', '2.8.8')
        (True, True, '3.2.1')
    """
    if min_version is None:
        min_version = PACKAGE_REQUIREMENTS.get(package_name)
        if min_version is None:
            raise ValueError(f"No version requirement specified for {package_name}")

    try:
        installed_version = version(package_name)
    except PackageNotFoundError:
        return False, False, None

    return True, parse(installed_version) >= parse(min_version), installed_version


def find_requirement_problems() -> List[str]:
    """Return one message per missing or outdated runtime package."""
    problems = []
    for package_name, min_version in PACKAGE_REQUIREMENTS.items():
        is_installed, meets_version, installed_version = check_package_version(package_name, min_version)
        if not is_installed:
            problems.append(f"{package_name} is not installed. Install with: pip install '{package_name}>={min_version}'")
        elif not meets_version:
            problems.append(f"{package_name} {installed_version} is too old. Upgrade with: pip install --upgrade '{package_name}>={min_version}'")
    return problems


def verify_requirements() -> None:
    """Fail fast when a runtime dependency is missing or too old.

    Raises:
        IncludeCheckError: With EXIT_RUNTIME_ERROR listing every problem found
    """
    problems = find_requirement_problems()
    for problem in problems:
        logger.error(problem)
    if problems:
        raise IncludeCheckError("Missing or outdated packages: " + "; ".join(problems), EXIT_RUNTIME_ERROR)
