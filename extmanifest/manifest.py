"""Manifest assembly: base fields, user overrides, entrypoints, dev mode, and output."""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import FatalConfigError, InternalConfig, TransformHook
from .csp import ContentSecurityPolicy
from .fs import write_file_if_different
from .icons import discover_icons
from .logging import get_logger
from .mapper import add_entrypoints
from .models import BuildOutput, Entrypoint, ManifestResult, PackageInfo, PublicAsset
from .permissions import add_host_permission, add_permission
from .version import simplify_version

logger = get_logger("manifest")

MANIFEST_FILENAME = "manifest.json"
RELOAD_COMMAND_NAME = "reload-extension"
MAX_COMMANDS = 4
DEFAULT_MV3_CSP = "script-src 'self' 'wasm-unsafe-eval'; object-src 'self';"
DEFAULT_MV2_CSP = "script-src 'self'; object-src 'self';"
DEFAULT_DEV_ORIGIN = "http://localhost:*"


class ManifestValidationError(FatalConfigError):
    """Raised when the assembled manifest lacks a required field."""


def generate_manifest(
    entrypoints: Sequence[Entrypoint],
    build_output: BuildOutput,
    config: InternalConfig,
    package: Optional[PackageInfo] = None,
) -> ManifestResult:
    """Build the manifest for ``entrypoints`` and collect non-fatal warnings."""
    warnings: List[Tuple[str, ...]] = []
    user_manifest = config.manifest

    version_name = _first_set(
        user_manifest.get("version_name"),
        user_manifest.get("version"),
        package.version if package else None,
    )
    if version_name is None:
        version_name = "0.0.0"
        message = (
            'Extension version not found, defaulting to "0.0.0". Add a version to your '
            "package.json or the manifest option of your config file."
        )
        logger.debug("Warning: %s", message)
        warnings.append((message,))
    version = _first_set(user_manifest.get("version"))
    if version is None:
        version = simplify_version(version_name)

    base: Dict[str, Any] = {
        "manifest_version": config.manifest_version,
        "name": package.name if package else None,
        "description": package.description if package else None,
        "version": version,
        "short_name": package.short_name if package else None,
        "icons": discover_icons(build_output),
    }
    base = {key: value for key, value in base.items() if value is not None}
    manifest = deep_merge(base, user_manifest)

    if config.command == "serve" and config.dev.reload_command:
        _add_reload_command(manifest, config.dev.reload_command, warnings)

    manifest["version"] = version
    # Firefox does not support version_name
    if config.browser == "firefox" or version_name == version:
        manifest.pop("version_name", None)
    else:
        manifest["version_name"] = version_name

    add_entrypoints(manifest, entrypoints, build_output, config, warnings)

    if config.command == "serve":
        add_dev_mode_csp(manifest, config)
        add_dev_mode_permissions(manifest, config)

    final = apply_transform(manifest, config.transform_manifest)
    validate_manifest(final)
    logger.debug("Generated manifest with %d fields and %d warnings", len(final), len(warnings))
    return ManifestResult(manifest=final, warnings=warnings)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` over ``base``; ``override`` wins on conflicts.

    Nested mappings merge key by key. ``None`` in ``override`` leaves the base
    value in place. Neither input is mutated.
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        if value is None:
            continue
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(existing, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_transform(manifest: Dict[str, Any], transform: Optional[TransformHook]) -> Dict[str, Any]:
    """Run the user's transform hook on a copy of ``manifest`` and return the result.

    The hook may mutate the draft in place or return a replacement. If it
    raises, the original manifest is untouched.
    """
    if transform is None:
        return manifest
    draft = copy.deepcopy(manifest)
    result = transform(draft)
    if result is not None:
        if not isinstance(result, dict):
            raise TypeError("transform_manifest must return a dict or None")
        return result
    return draft


def validate_manifest(manifest: Mapping[str, Any]) -> None:
    if manifest.get("name") is None:
        raise ManifestValidationError(
            "Manifest 'name' is missing. Either:\n"
            "1. Set the name in your <rootDir>/package.json\n"
            "2. Set a name via the manifest option in your .extmanifest.yml"
        )
    if manifest.get("version") is None:
        raise ManifestValidationError(
            "Manifest 'version' is missing. Either:\n"
            "1. Add a version in your <rootDir>/package.json\n"
            "2. Pass the version via the manifest option in your .extmanifest.yml"
        )


def _first_set(*values: Any) -> Optional[str]:
    # YAML reads `version: 1.0` as a float
    for value in values:
        if value is not None:
            return str(value)
    return None


def _add_reload_command(manifest: Dict[str, Any], key_combo: str, warnings: List[Tuple[str, ...]]) -> None:
    commands = manifest.get("commands") or {}
    if len(commands) >= MAX_COMMANDS:
        message = f"Extension already has {MAX_COMMANDS} registered commands, the reload command is disabled"
        logger.debug("Warning: %s", message)
        warnings.append((message,))
        return
    commands[RELOAD_COMMAND_NAME] = {
        "description": "Reload the extension during development",
        "suggested_key": {"default": key_combo},
    }
    manifest["commands"] = commands


def add_dev_mode_csp(manifest: Dict[str, Any], config: InternalConfig) -> None:
    """Allow the dev server to serve scripts to extension pages."""
    hostname = config.server.hostname if config.server else ""
    permission = f"http://{hostname}/*"
    allowed_origin = (config.server.origin if config.server else None) or DEFAULT_DEV_ORIGIN

    is_mv3 = manifest.get("manifest_version") == 3
    if is_mv3:
        add_host_permission(manifest, permission)
    else:
        add_permission(manifest, permission)

    current = manifest.get("content_security_policy")
    if is_mv3:
        existing = current.get("extension_pages") if isinstance(current, dict) else None
        csp = ContentSecurityPolicy(existing or DEFAULT_MV3_CSP)
    else:
        csp = ContentSecurityPolicy(current if isinstance(current, str) else DEFAULT_MV2_CSP)

    if config.server:
        csp.add("script-src", allowed_origin)

    if is_mv3:
        policies = current if isinstance(current, dict) else {}
        policies["extension_pages"] = str(csp)
        manifest["content_security_policy"] = policies
    else:
        manifest["content_security_policy"] = str(csp)


def add_dev_mode_permissions(manifest: Dict[str, Any], config: InternalConfig) -> None:
    # tabs reloads pages, scripting registers content scripts
    add_permission(manifest, "tabs")
    if config.manifest_version == 3:
        add_permission(manifest, "scripting")


def serialize_manifest(manifest: Mapping[str, Any], config: InternalConfig) -> str:
    if config.mode == "production":
        return json.dumps(manifest, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(manifest, indent=2, ensure_ascii=False)


def write_manifest(manifest: Mapping[str, Any], output: BuildOutput, config: InternalConfig) -> bool:
    """Write manifest.json into ``config.out_dir`` and record it as a public asset.

    Returns True when the file on disk changed.
    """
    text = serialize_manifest(manifest, config)
    config.out_dir.mkdir(parents=True, exist_ok=True)
    changed = write_file_if_different(config.out_dir / MANIFEST_FILENAME, text)
    output.public_assets.insert(0, PublicAsset(type="asset", file_name=MANIFEST_FILENAME))
    logger.debug("%s %s", "Wrote" if changed else "Unchanged", config.out_dir / MANIFEST_FILENAME)
    return changed


__all__ = [
    "ManifestValidationError",
    "add_dev_mode_csp",
    "add_dev_mode_permissions",
    "apply_transform",
    "deep_merge",
    "generate_manifest",
    "serialize_manifest",
    "validate_manifest",
    "write_manifest",
]
