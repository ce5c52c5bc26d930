"""Content-script grouping and manifest entry construction."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from .entrypoints import get_entrypoint_bundle_path, resolve_per_browser_option
from .models import BuildOutput, Entrypoint

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import InternalConfig

# manifest key -> entrypoint option key
_OPTION_FIELDS = (
    ("matches", "matches"),
    ("all_frames", "allFrames"),
    ("match_about_blank", "matchAboutBlank"),
    ("exclude_globs", "excludeGlobs"),
    ("exclude_matches", "excludeMatches"),
    ("include_globs", "includeGlobs"),
    ("run_at", "runAt"),
    ("match_origin_as_fallback", "matchOriginAsFallback"),
    ("world", "world"),
)

_HASH_DEFAULTS: Dict[str, Any] = {
    "exclude_globs": [],
    "exclude_matches": [],
    "include_globs": [],
    "match_about_blank": False,
    "run_at": "document_idle",
    "all_frames": False,
    "match_origin_as_fallback": False,
    "world": "ISOLATED",
}

CssMap = Mapping[str, str]


def map_options_to_content_script(options: Mapping[str, Any], browser: str) -> Dict[str, Any]:
    """Translate camelCase entrypoint options into manifest content-script fields."""
    mapped: Dict[str, Any] = {}
    for manifest_key, option_key in _OPTION_FIELDS:
        value = resolve_per_browser_option(options.get(option_key), browser)
        if value is not None:
            mapped[manifest_key] = value
    return mapped


def hash_content_script_options(options: Mapping[str, Any], browser: str) -> str:
    """Stable digest of the resolved options; equal options hash equally in any key order."""
    resolved = {**_HASH_DEFAULTS, **map_options_to_content_script(options, browser)}
    canonical = json.dumps(_canonicalize(resolved), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _canonicalize(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _canonicalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        items = [_canonicalize(item) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))
    return value


def group_content_scripts(scripts: Sequence[Entrypoint], browser: str) -> Dict[str, List[Entrypoint]]:
    """Bucket scripts by option hash, preserving first-seen group and member order."""
    groups: Dict[str, List[Entrypoint]] = {}
    for script in scripts:
        key = hash_content_script_options(script.options, browser)
        groups.setdefault(key, []).append(script)
    return groups


def get_content_scripts_css_map(build_output: BuildOutput, scripts: Sequence[Entrypoint]) -> Dict[str, str]:
    """Map each script name to ``content-scripts/<name>.css`` when the build emitted it."""
    file_names = {chunk.file_name for chunk in build_output.all_chunks()}
    css_map: Dict[str, str] = {}
    for script in scripts:
        css_file = f"content-scripts/{script.name}.css"
        if css_file in file_names:
            css_map[script.name] = css_file
    return css_map


def get_content_script_css_files(scripts: Sequence[Entrypoint], css_map: CssMap) -> Optional[List[str]]:
    """CSS injected by the manifest for a group, or None when there is none.

    Scripts in ``manual`` or ``ui`` injection mode load their styles themselves.
    """
    css: List[str] = []
    for script in scripts:
        if script.options.get("cssInjectionMode") in ("manual", "ui"):
            continue
        css_file = css_map.get(script.name)
        if css_file and css_file not in css:
            css.append(css_file)
    return css or None


def get_content_script_js(entrypoint: Entrypoint, build_output: BuildOutput, out_dir: Any) -> List[str]:
    """Bundle path followed by the chunks that bundle imports."""
    bundle = get_entrypoint_bundle_path(entrypoint, out_dir, ".js")
    js = [bundle]
    for chunk in build_output.all_chunks():
        if chunk.file_name != bundle:
            continue
        for imported in chunk.imports:
            if imported not in js:
                js.append(imported)
    return js


def build_content_script_entries(
    scripts: Sequence[Entrypoint],
    build_output: BuildOutput,
    config: "InternalConfig",
    css_map: CssMap,
) -> List[Dict[str, Any]]:
    """One manifest ``content_scripts`` entry per group of identically configured scripts."""
    entries: List[Dict[str, Any]] = []
    for members in group_content_scripts(scripts, config.browser).values():
        entry = map_options_to_content_script(members[0].options, config.browser)
        css = get_content_script_css_files(members, css_map)
        if css is not None:
            entry["css"] = css
        js: List[str] = []
        for member in members:
            for path in get_content_script_js(member, build_output, config.out_dir):
                if path not in js:
                    js.append(path)
        entry["js"] = js
        entries.append(entry)
    return entries


__all__ = [
    "build_content_script_entries",
    "get_content_script_css_files",
    "get_content_script_js",
    "get_content_scripts_css_map",
    "group_content_scripts",
    "hash_content_script_options",
    "map_options_to_content_script",
]
