"""Routes entrypoints into their manifest fields for each browser and manifest version."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import InternalConfig
from .content_scripts import build_content_script_entries, get_content_scripts_css_map
from .entrypoints import (
    get_entrypoint_bundle_path,
    group_entrypoints_by_type,
    resolve_per_browser_option,
)
from .logging import get_logger
from .models import BuildOutput, Entrypoint
from .permissions import add_host_permission
from .resources import get_content_script_web_accessible_resources

logger = get_logger("mapper")

Warnings = List[Tuple[str, ...]]


class EntrypointMapper:
    """Writes entrypoint-derived fields into a manifest being assembled.

    Singleton types honour the first entrypoint of that type. Combinations the
    target browser does not support are reported through ``warnings`` and the
    field is left out.
    """

    def __init__(self, config: InternalConfig, build_output: BuildOutput, warnings: Warnings) -> None:
        self.config = config
        self.build_output = build_output
        self.warnings = warnings

    @property
    def is_firefox(self) -> bool:
        return self.config.browser == "firefox"

    def apply(self, manifest: Dict[str, Any], entrypoints: Sequence[Entrypoint]) -> None:
        by_type = group_entrypoints_by_type(entrypoints)

        def first(entry_type: str) -> Optional[Entrypoint]:
            entries = by_type.get(entry_type)
            return entries[0] if entries else None

        background = first("background")
        if background:
            self._add_background(manifest, background)
        for key in ("bookmarks", "history"):
            entry = first(key)
            if entry:
                self._add_chrome_only_override(manifest, key, entry)
        newtab = first("newtab")
        if newtab:
            manifest.setdefault("chrome_url_overrides", {})["newtab"] = self._html(newtab)
        popup = first("popup")
        if popup:
            self._add_popup(manifest, popup)
        devtools = first("devtools")
        if devtools:
            manifest["devtools_page"] = self._html(devtools)
        options = first("options")
        if options:
            self._add_options(manifest, options)
        if by_type.get("sandbox"):
            self._add_sandbox(manifest, by_type["sandbox"])
        if by_type.get("sidepanel"):
            self._add_sidepanel(manifest, by_type["sidepanel"])
        if by_type.get("content-script"):
            self._add_content_scripts(manifest, by_type["content-script"])

    # ------------------------------------------------------------------
    # Per-type shaping

    def _add_background(self, manifest: Dict[str, Any], entry: Entrypoint) -> None:
        script = get_entrypoint_bundle_path(entry, self.config.out_dir, ".js")
        if self.config.manifest_version == 3:
            background: Dict[str, Any] = {}
            if entry.options.get("type") is not None:
                background["type"] = entry.options["type"]
            # Firefox has no MV3 service worker support
            if self.is_firefox:
                background["scripts"] = [script]
            else:
                background["service_worker"] = script
        else:
            background = {}
            if entry.options.get("persistent") is not None:
                background["persistent"] = entry.options["persistent"]
            background["scripts"] = [script]
        manifest["background"] = background

    def _add_chrome_only_override(self, manifest: Dict[str, Any], key: str, entry: Entrypoint) -> None:
        if self.is_firefox:
            self._warn(
                f"{key.title()} overrides are not supported by Firefox. "
                f"chrome_url_overrides.{key} was not added to the manifest"
            )
            return
        manifest.setdefault("chrome_url_overrides", {})[key] = self._html(entry)

    def _add_popup(self, manifest: Dict[str, Any], entry: Entrypoint) -> None:
        fields: Dict[str, Any] = {}
        for manifest_key, option_key in (
            ("default_icon", "defaultIcon"),
            ("default_title", "defaultTitle"),
            ("browser_style", "browserStyle"),
        ):
            if entry.options.get(option_key):
                fields[manifest_key] = entry.options[option_key]
        key = "action" if manifest.get("manifest_version") == 3 else entry.options.get("mv2Key") or "browser_action"
        manifest[key] = {**(manifest.get(key) or {}), **fields, "default_popup": self._html(entry)}

    def _add_options(self, manifest: Dict[str, Any], entry: Entrypoint) -> None:
        options_ui: Dict[str, Any] = {}
        if entry.options.get("openInTab") is not None:
            options_ui["open_in_tab"] = entry.options["openInTab"]
        style_key, option_key = ("browser_style", "browserStyle") if self.is_firefox else ("chrome_style", "chromeStyle")
        if entry.options.get(option_key) is not None:
            options_ui[style_key] = entry.options[option_key]
        options_ui["page"] = self._html(entry)
        manifest["options_ui"] = options_ui

    def _add_sandbox(self, manifest: Dict[str, Any], entries: Sequence[Entrypoint]) -> None:
        if self.is_firefox:
            self._warn("Sandboxed pages not supported by Firefox. sandbox.pages was not added to the manifest")
            return
        manifest["sandbox"] = {"pages": [self._html(entry) for entry in entries]}

    def _add_sidepanel(self, manifest: Dict[str, Any], entries: Sequence[Entrypoint]) -> None:
        default = next((entry for entry in entries if entry.name == "sidepanel"), entries[0])
        page = self._html(default)
        if self.is_firefox:
            manifest["sidebar_action"] = {"default_panel": page}
        elif self.config.manifest_version == 3:
            manifest["side_panel"] = {"default_path": page}
        else:
            self._warn(
                "Side panel not supported by Chromium using MV2. "
                "side_panel.default_path was not added to the manifest"
            )

    def _add_content_scripts(self, manifest: Dict[str, Any], scripts: Sequence[Entrypoint]) -> None:
        css_map = get_content_scripts_css_map(self.build_output, scripts)

        # In MV3 dev mode the dev runtime registers content scripts itself, so only
        # their hosts are needed.
        if self.config.command == "serve" and self.config.manifest_version == 3:
            for script in scripts:
                matches = resolve_per_browser_option(script.options.get("matches"), self.config.browser) or []
                for pattern in matches:
                    add_host_permission(manifest, pattern)
        else:
            entries = build_content_script_entries(scripts, self.build_output, self.config, css_map)
            if entries:
                manifest.setdefault("content_scripts", []).extend(entries)

        resources = get_content_script_web_accessible_resources(self.config, scripts, css_map)
        if resources:
            manifest.setdefault("web_accessible_resources", []).extend(resources)

    # ------------------------------------------------------------------
    # Helpers

    def _html(self, entry: Entrypoint) -> str:
        return get_entrypoint_bundle_path(entry, self.config.out_dir, ".html")

    def _warn(self, message: str) -> None:
        logger.debug("Warning: %s", message)
        self.warnings.append((message,))


def add_entrypoints(
    manifest: Dict[str, Any],
    entrypoints: Sequence[Entrypoint],
    build_output: BuildOutput,
    config: InternalConfig,
    warnings: Warnings,
) -> None:
    """Add every entrypoint's manifest fields to ``manifest`` in place."""
    EntrypointMapper(config, build_output, warnings).apply(manifest, entrypoints)


__all__ = ["EntrypointMapper", "add_entrypoints"]
