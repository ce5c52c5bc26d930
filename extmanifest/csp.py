"""Content-Security-Policy parsing and additive editing."""

from __future__ import annotations

from typing import Dict, List, Optional


class ContentSecurityPolicy:
    """Ordered directive -> sources view over a CSP string.

    Directives keep the order they were first seen in; sources within a
    directive are unique and keep insertion order. ``str()`` renders the
    policy back as ``"script-src 'self'; object-src 'self';"``.
    """

    def __init__(self, csp: Optional[str] = None) -> None:
        self.data: Dict[str, List[str]] = {}
        if not csp:
            return
        for section in csp.split(";"):
            tokens = section.split()
            if not tokens:
                continue
            directive, *sources = tokens
            self.add(directive, *sources)

    def add(self, directive: str, *sources: str) -> "ContentSecurityPolicy":
        values = self.data.setdefault(directive, [])
        for source in sources:
            if source not in values:
                values.append(source)
        return self

    def get(self, directive: str) -> List[str]:
        return list(self.data.get(directive, []))

    def __str__(self) -> str:
        return "; ".join(
            " ".join([directive, *sources]) for directive, sources in self.data.items()
        ) + ";"

    def __repr__(self) -> str:
        return f"ContentSecurityPolicy({str(self)!r})"


__all__ = ["ContentSecurityPolicy"]
