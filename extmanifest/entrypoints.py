"""Helpers shared by code that turns entrypoints into manifest fields."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Mapping

from .models import Entrypoint


def resolve_per_browser_option(option: Any, browser: str) -> Any:
    """Return ``option[browser]`` for per-browser mappings, else the option itself."""
    if isinstance(option, Mapping):
        return option.get(browser)
    return option


def get_entrypoint_bundle_path(entrypoint: Entrypoint, out_dir: Path | str, ext: str) -> str:
    """Return the entrypoint's output file relative to ``out_dir``, using forward slashes."""
    output_file = Path(out_dir, entrypoint.output_dir, f"{entrypoint.name}{ext}")
    relative = os.path.relpath(output_file, Path(out_dir))
    return PurePosixPath(*Path(relative).parts).as_posix()


def group_entrypoints_by_type(entrypoints: Iterable[Entrypoint]) -> Dict[str, List[Entrypoint]]:
    grouped: Dict[str, List[Entrypoint]] = {}
    for entrypoint in entrypoints:
        grouped.setdefault(entrypoint.type, []).append(entrypoint)
    return grouped


__all__ = [
    "get_entrypoint_bundle_path",
    "group_entrypoints_by_type",
    "resolve_per_browser_option",
]
