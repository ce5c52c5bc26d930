"""Normalisation of package versions into browser-accepted extension versions."""

from __future__ import annotations

import re

from .config import FatalConfigError

# One to four components of 0 or 1-9 followed by up to eight digits. A component
# must not be followed by another digit, so "01" never matches as "0".
_VERSION_PATTERN = re.compile(
    r"^((?:0|[1-9][0-9]{0,8})(?![0-9])(?:\.(?:0|[1-9][0-9]{0,8})(?![0-9])){0,3})"
)


class VersionFormatError(FatalConfigError):
    """Raised when a version string has no valid extension version prefix."""


def simplify_version(version_name: str) -> str:
    """Strip suffixes like ``-alpha1`` so ``X.Y.Z-alpha1`` becomes ``X.Y.Z``."""
    match = _VERSION_PATTERN.match(version_name)
    if match is None:
        raise VersionFormatError(
            f'Cannot simplify package.json version "{version_name}" to a valid extension version, "X.Y.Z"'
        )
    return match.group(1)


__all__ = ["VersionFormatError", "simplify_version"]
