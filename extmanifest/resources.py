"""Web-accessible resources required by content scripts at runtime."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Sequence

from .content_scripts import CssMap
from .entrypoints import get_entrypoint_bundle_path, resolve_per_browser_option
from .models import Entrypoint

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import InternalConfig

SHARED_CHUNKS_GLOB = "chunks/*"


def strip_path_from_match_pattern(pattern: str) -> str:
    """Widen a match pattern to its whole origin.

    - ``"<all_urls>"`` -> ``"<all_urls>"``
    - ``"*://play.google.com/books/*"`` -> ``"*://play.google.com/*"``
    """
    separator = pattern.find("://")
    if separator == -1:
        return pattern
    start_of_path = pattern.find("/", separator + 3)
    if start_of_path == -1:
        return pattern + "/*"
    return pattern[:start_of_path] + "/*"


def get_content_script_web_accessible_resources(
    config: "InternalConfig",
    scripts: Sequence[Entrypoint],
    css_map: CssMap,
) -> List[Any]:
    """Resources for shadow-root CSS (``cssInjectionMode: "ui"``) and ESM content scripts.

    ESM content scripts import their own bundle and shared chunks at runtime, so
    both must be fetchable from the page. All of ``chunks/*`` is exposed rather
    than only the chunks the script uses.
    """
    resources: List[Any] = []
    for script in scripts:
        if script.options.get("cssInjectionMode") == "ui":
            css_file = css_map.get(script.name)
            if css_file is not None:
                _push(resources, config, script, [css_file])
        if script.options.get("type") == "module":
            paths = [get_entrypoint_bundle_path(script, config.out_dir, ".js"), SHARED_CHUNKS_GLOB]
            _push(resources, config, script, paths)
    return resources


def _push(resources: List[Any], config: "InternalConfig", script: Entrypoint, paths: List[str]) -> None:
    if config.manifest_version == 2:
        resources.extend(paths)
    else:
        resources.append({"resources": paths, "matches": _web_accessible_matches(config, script)})


def _web_accessible_matches(config: "InternalConfig", script: Entrypoint) -> List[str]:
    matches = resolve_per_browser_option(script.options.get("matches"), config.browser) or []
    stripped: List[str] = []
    for pattern in matches:
        origin = strip_path_from_match_pattern(pattern)
        if origin not in stripped:
            stripped.append(origin)
    return stripped


__all__ = [
    "SHARED_CHUNKS_GLOB",
    "get_content_script_web_accessible_resources",
    "strip_path_from_match_pattern",
]
