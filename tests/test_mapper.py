"""Tests for extmanifest.mapper."""

from __future__ import annotations

from extmanifest.mapper import add_entrypoints
from tests._fixtures.builders import build_output, content_script, entrypoint


def _map(config, entrypoints, manifest=None, output=None):
    manifest = manifest if manifest is not None else {"manifest_version": config.manifest_version}
    warnings: list = []
    add_entrypoints(manifest, entrypoints, output or build_output(), config, warnings)
    return manifest, warnings


def test_background_uses_service_worker_for_chromium_mv3(project) -> None:
    manifest, _ = _map(project.config(), [entrypoint("background", type="module")])

    assert manifest["background"] == {"type": "module", "service_worker": "background.js"}


def test_background_uses_scripts_for_firefox_mv3(project) -> None:
    manifest, _ = _map(project.config(browser="firefox"), [entrypoint("background")])

    assert manifest["background"] == {"scripts": ["background.js"]}


def test_background_mv2_keeps_persistent_flag(project) -> None:
    manifest, _ = _map(project.config(manifest_version=2), [entrypoint("background", persistent=False)])

    assert manifest["background"] == {"persistent": False, "scripts": ["background.js"]}


def test_first_entrypoint_of_singleton_type_wins(project) -> None:
    manifest, _ = _map(
        project.config(),
        [entrypoint("devtools", name="devtools"), entrypoint("devtools", name="other")],
    )

    assert manifest["devtools_page"] == "devtools.html"


def test_popup_merges_into_existing_action(project) -> None:
    manifest, _ = _map(
        project.config(),
        [entrypoint("popup", defaultTitle="Open", defaultIcon={"16": "icon-16.png"})],
        manifest={"manifest_version": 3, "action": {"default_title": "Old", "default_area": "navbar"}},
    )

    assert manifest["action"] == {
        "default_title": "Open",
        "default_area": "navbar",
        "default_icon": {"16": "icon-16.png"},
        "default_popup": "popup.html",
    }


def test_popup_mv2_honours_custom_key(project) -> None:
    manifest, _ = _map(project.config(manifest_version=2), [entrypoint("popup", mv2Key="page_action")])

    assert manifest["page_action"] == {"default_popup": "popup.html"}
    assert "browser_action" not in manifest


def test_url_overrides_for_chromium(project) -> None:
    manifest, warnings = _map(
        project.config(),
        [entrypoint("bookmarks"), entrypoint("history"), entrypoint("newtab")],
    )

    assert manifest["chrome_url_overrides"] == {
        "bookmarks": "bookmarks.html",
        "history": "history.html",
        "newtab": "newtab.html",
    }
    assert warnings == []


def test_firefox_warns_for_unsupported_overrides_and_sandbox(project) -> None:
    manifest, warnings = _map(
        project.config(browser="firefox"),
        [entrypoint("bookmarks"), entrypoint("history"), entrypoint("newtab"), entrypoint("sandbox")],
    )

    assert manifest["chrome_url_overrides"] == {"newtab": "newtab.html"}
    assert "sandbox" not in manifest
    assert len(warnings) == 3
    assert any("chrome_url_overrides.history" in warning[0] for warning in warnings)
    assert any("sandbox.pages" in warning[0] for warning in warnings)


def test_sandbox_lists_every_page(project) -> None:
    manifest, _ = _map(
        project.config(),
        [entrypoint("sandbox", name="sandbox"), entrypoint("sandbox", name="worker-sandbox")],
    )

    assert manifest["sandbox"] == {"pages": ["sandbox.html", "worker-sandbox.html"]}


def test_options_style_key_depends_on_browser(project) -> None:
    options = entrypoint("options", name="options", openInTab=True, chromeStyle=True, browserStyle=False)

    chrome, _ = _map(project.config(), [options])
    firefox, _ = _map(project.config(browser="firefox"), [options])

    assert chrome["options_ui"] == {"open_in_tab": True, "chrome_style": True, "page": "options.html"}
    assert firefox["options_ui"] == {"open_in_tab": True, "browser_style": False, "page": "options.html"}


def test_sidepanel_prefers_entry_named_sidepanel(project) -> None:
    entries = [entrypoint("sidepanel", name="extra"), entrypoint("sidepanel", name="sidepanel")]

    chrome, _ = _map(project.config(), entries)
    firefox, _ = _map(project.config(browser="firefox", manifest_version=2), entries)

    assert chrome["side_panel"] == {"default_path": "sidepanel.html"}
    assert firefox["sidebar_action"] == {"default_panel": "sidepanel.html"}


def test_sidepanel_unsupported_on_chromium_mv2(project) -> None:
    manifest, warnings = _map(project.config(manifest_version=2), [entrypoint("sidepanel")])

    assert "side_panel" not in manifest
    assert "sidebar_action" not in manifest
    assert len(warnings) == 1


def test_content_scripts_are_appended_after_user_entries(project) -> None:
    user_entry = {"matches": ["https://user.example/*"], "js": ["user.js"]}
    manifest, _ = _map(
        project.config(),
        [content_script("overlay", ["https://example.com/*"])],
        manifest={"manifest_version": 3, "content_scripts": [user_entry]},
    )

    assert manifest["content_scripts"] == [
        user_entry,
        {"matches": ["https://example.com/*"], "js": ["content-scripts/overlay.js"]},
    ]


def test_serve_mv3_registers_hosts_instead_of_content_scripts(project) -> None:
    scripts = [
        content_script("a", ["https://example.com/*"], cssInjectionMode="ui"),
        content_script("b", ["https://example.com/*", "https://other.com/*"]),
    ]
    output = build_output(chunks=["content-scripts/a.css"])

    manifest, _ = _map(project.config(command="serve"), scripts, output=output)

    assert "content_scripts" not in manifest
    assert manifest["host_permissions"] == ["https://example.com/*", "https://other.com/*"]
    assert manifest["web_accessible_resources"] == [
        {"resources": ["content-scripts/a.css"], "matches": ["https://example.com/*"]}
    ]


def test_serve_mv2_still_writes_content_scripts(project) -> None:
    manifest, _ = _map(
        project.config(command="serve", manifest_version=2),
        [content_script("a", ["https://example.com/*"])],
    )

    assert manifest["content_scripts"] == [{"matches": ["https://example.com/*"], "js": ["content-scripts/a.js"]}]
    assert "host_permissions" not in manifest
