"""Icon discovery from public asset file names."""

from __future__ import annotations

import re
from typing import Dict, Optional

from .models import BuildOutput

ICON_PATTERNS = (
    re.compile(r"^icon-([0-9]+)\.png$"),  # icon-16.png
    re.compile(r"^icon-([0-9]+)x[0-9]+\.png$"),  # icon-16x16.png
    re.compile(r"^icon@([0-9]+)w\.png$"),  # icon@16w.png
    re.compile(r"^icon@([0-9]+)h\.png$"),  # icon@16h.png
    re.compile(r"^icon@([0-9]+)\.png$"),  # icon@16.png
    re.compile(r"^icons?[/\\]([0-9]+)\.png$"),  # icon/16.png | icons/16.png
    re.compile(r"^icons?[/\\]([0-9]+)x[0-9]+\.png$"),  # icon/16x16.png | icons/16x16.png
)


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def discover_icons(build_output: BuildOutput) -> Optional[Dict[str, str]]:
    """Return a size -> path map of icons in the public assets, or None if there are none."""
    icons: Dict[str, str] = {}
    for asset in build_output.public_assets:
        size = _match_icon_size(asset.file_name)
        if size is None:
            continue
        icons[size] = normalize_path(asset.file_name)

    if not icons:
        return None
    # manifest.json readers order integer-like keys numerically
    return {size: icons[size] for size in sorted(icons, key=int)}


def _match_icon_size(file_name: str) -> Optional[str]:
    for pattern in ICON_PATTERNS:
        match = pattern.match(file_name)
        if match is not None:
            return match.group(1)
    return None


__all__ = ["ICON_PATTERNS", "discover_icons", "normalize_path"]
