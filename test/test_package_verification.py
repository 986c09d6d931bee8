#!/usr/bin/env python3
"""Tests for includecheck/package_verification.py"""

from importlib.metadata import PackageNotFoundError
from unittest.mock import patch

import pytest

from includecheck.constants import EXIT_RUNTIME_ERROR, IncludeCheckError
from includecheck.package_verification import PACKAGE_REQUIREMENTS, check_package_version, find_requirement_problems, verify_requirements


class TestCheckPackageVersion:
    def test_installed_package(self) -> None:
        is_installed, meets_version, installed_version = check_package_version("networkx")
        assert is_installed
        assert meets_version
        assert installed_version

    def test_missing_package(self) -> None:
        assert check_package_version("nonexistent_package_xyz123", "1.0") == (False, False, None)

    def test_unknown_requirement(self) -> None:
        with pytest.raises(ValueError):
            check_package_version("unknown_package_not_in_registry")

    def test_too_old(self) -> None:
        with patch("includecheck.package_verification.version", return_value="1.0"):
            assert check_package_version("networkx") == (True, False, "1.0")


class TestVerifyRequirements:
    def test_all_present(self) -> None:
        assert find_requirement_problems() == []
        verify_requirements()

    def test_missing_package_raises(self) -> None:
        with patch("includecheck.package_verification.version", side_effect=PackageNotFoundError("networkx")):
            with pytest.raises(IncludeCheckError) as exc_info:
                verify_requirements()
        assert exc_info.value.exit_code == EXIT_RUNTIME_ERROR
        for package_name in PACKAGE_REQUIREMENTS:
            assert package_name in str(exc_info.value)
