"""package.json metadata lookup."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .logging import get_logger
from .models import PackageInfo

logger = get_logger("package")


def load_package_info(root: Path) -> Optional[PackageInfo]:
    """Return name/description/version/shortName from ``<root>/package.json``, or None."""
    package_json = root / "package.json"
    if not package_json.exists():
        return None
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", package_json, exc)
        return None
    if not isinstance(data, dict):
        return None
    return PackageInfo(
        name=_as_str(data.get("name")),
        description=_as_str(data.get("description")),
        version=_as_str(data.get("version")),
        short_name=_as_str(data.get("shortName")),
    )


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


__all__ = ["load_package_info"]
