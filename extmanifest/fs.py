"""Filesystem helpers."""

from __future__ import annotations

from pathlib import Path


def write_file_if_different(path: Path, text: str) -> bool:
    """Write ``text`` to ``path`` unless the file already holds it. Returns True on write."""
    try:
        existing = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        existing = None
    if existing == text:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return True


__all__ = ["write_file_if_different"]
