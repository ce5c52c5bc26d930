"""Idempotent permission edits on a manifest dict."""

from __future__ import annotations

from typing import Any, Dict


def add_permission(manifest: Dict[str, Any], permission: str) -> None:
    _add_unique(manifest, "permissions", permission)


def add_host_permission(manifest: Dict[str, Any], host_permission: str) -> None:
    _add_unique(manifest, "host_permissions", host_permission)


def _add_unique(manifest: Dict[str, Any], key: str, value: str) -> None:
    values = manifest.get(key)
    if values is None:
        values = manifest[key] = []
    if value in values:
        return
    values.append(value)


__all__ = ["add_host_permission", "add_permission"]
