"""Configuration loading for extmanifest (.extmanifest.yml)."""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

CONFIG_FILENAME = ".extmanifest.yml"

TransformHook = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]


class FatalConfigError(RuntimeError):
    """Raised when manifest generation cannot continue."""


class ConfigError(FatalConfigError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ServerConfig:
    """Dev server coordinates, present only for the `serve` command."""

    hostname: str = "localhost:3000"
    origin: Optional[str] = None


@dataclass
class DevConfig:
    """Development-only behaviour."""

    reload_command: Optional[str] = "Alt+R"


@dataclass
class InternalConfig:
    """Resolved configuration consumed by the manifest assembler."""

    root: Path
    out_dir: Path
    browser: str = "chrome"
    manifest_version: int = 3
    mode: str = "production"
    command: str = "build"
    manifest: Dict[str, Any] = field(default_factory=dict)
    transform_manifest: Optional[TransformHook] = None
    server: Optional[ServerConfig] = None
    dev: DevConfig = field(default_factory=DevConfig)


def load_config(
    config_path: Path,
    *,
    browser: Optional[str] = None,
    manifest_version: Optional[int] = None,
    mode: Optional[str] = None,
    command: str = "build",
) -> InternalConfig:
    """Load configuration from disk, letting explicit arguments win."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    if command not in {"build", "serve"}:
        raise ConfigError(f"Unknown command '{command}', expected 'build' or 'serve'")

    resolved_browser = browser or _as_str(data.get("browser")) or "chrome"
    resolved_mv = manifest_version or _as_int(data.get("manifest_version"))
    if resolved_mv is None:
        resolved_mv = 2 if resolved_browser == "firefox" else 3
    if resolved_mv not in (2, 3):
        raise ConfigError(f"manifest_version must be 2 or 3, got {resolved_mv}")

    resolved_mode = mode or _as_str(data.get("mode"))
    if resolved_mode is None:
        resolved_mode = "development" if command == "serve" else "production"

    out_dir_str = _as_str(data.get("out_dir"))
    if out_dir_str:
        out_dir = root / out_dir_str
    else:
        out_dir = root / ".output" / f"{resolved_browser}-mv{resolved_mv}"

    manifest = data.get("manifest") or {}
    if not isinstance(manifest, dict):
        raise ConfigError(f"{CONFIG_FILENAME} 'manifest' must be a mapping")

    transform = None
    transform_ref = _as_str(data.get("transform_manifest"))
    if transform_ref:
        transform = resolve_transform(transform_ref)

    dev_data = _as_dict(data.get("dev"))
    dev = DevConfig()
    if "reload_command" in dev_data:
        value = dev_data.get("reload_command")
        dev.reload_command = _as_str(value) if value not in (False, None) else None

    server = None
    if command == "serve":
        server_data = _as_dict(data.get("server"))
        server = ServerConfig(
            hostname=_as_str(server_data.get("hostname")) or ServerConfig.hostname,
            origin=_as_str(server_data.get("origin")),
        )

    return InternalConfig(
        root=root,
        out_dir=out_dir,
        browser=resolved_browser,
        manifest_version=resolved_mv,
        mode=resolved_mode,
        command=command,
        manifest=dict(manifest),
        transform_manifest=transform,
        server=server,
        dev=dev,
    )


def resolve_transform(reference: str) -> TransformHook:
    """Import a `module:function` reference to a manifest transform hook."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"transform_manifest must look like 'module:function', got '{reference}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import transform module '{module_name}': {exc}") from exc
    hook = getattr(module, attr, None)
    if not callable(hook):
        raise ConfigError(f"'{reference}' is not a callable transform hook")
    return hook


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None
