"""Tests for extmanifest.csp."""

from __future__ import annotations

from extmanifest.csp import ContentSecurityPolicy


def test_add_appends_source_to_existing_directive() -> None:
    csp = ContentSecurityPolicy("script-src 'self'; object-src 'self';")

    csp.add("script-src", "http://localhost:*")

    assert str(csp) == "script-src 'self' http://localhost:*; object-src 'self';"


def test_add_is_idempotent() -> None:
    csp = ContentSecurityPolicy("script-src 'self';")

    csp.add("script-src", "'self'").add("script-src", "http://localhost:3000")
    csp.add("script-src", "http://localhost:3000")

    assert csp.get("script-src") == ["'self'", "http://localhost:3000"]


def test_add_creates_new_directive_with_only_the_new_source() -> None:
    csp = ContentSecurityPolicy("script-src 'self' 'wasm-unsafe-eval'; object-src 'self';")

    csp.add("connect-src", "ws://localhost:3000")

    assert str(csp) == (
        "script-src 'self' 'wasm-unsafe-eval'; object-src 'self'; connect-src ws://localhost:3000;"
    )


def test_unmodified_policy_round_trips() -> None:
    text = "default-src 'none'; script-src 'self'; object-src 'self';"

    assert str(ContentSecurityPolicy(text)) == text


def test_parse_tolerates_missing_trailing_semicolon_and_extra_spaces() -> None:
    csp = ContentSecurityPolicy("  script-src   'self'  'self' ;object-src 'self'")

    assert csp.data == {"script-src": ["'self'"], "object-src": ["'self'"]}
