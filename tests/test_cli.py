"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from extmanifest.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate", "--entrypoints", "e.json", "--build-output", "b.json"])
    assert args.verbose is True
    assert args.subcommand == "generate"


def test_cli_parses_target_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["generate", "--entrypoints", "e.json", "--build-output", "b.json", "-b", "firefox", "--mv", "2", "--command", "serve"]
    )
    assert args.browser == "firefox"
    assert args.mv == 2
    assert args.command == "serve"
    assert args.subcommand == "generate"


def test_cli_accepts_verbose_after_subcommand() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--entrypoints", "e.json", "--build-output", "b.json", "--verbose"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_rejects_unknown_command_value() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--entrypoints", "e.json", "--build-output", "b.json", "--command", "deploy"])


def _write_inputs(root: Path) -> tuple[Path, Path]:
    entrypoints = root / "entrypoints.json"
    entrypoints.write_text(
        json.dumps(
            [
                {"name": "background", "type": "background", "outputDir": "", "options": {}},
                {
                    "name": "overlay",
                    "type": "content-script",
                    "outputDir": "content-scripts",
                    "options": {"matches": ["https://example.com/*"]},
                },
            ]
        ),
        encoding="utf-8",
    )
    build = root / "build.json"
    build.write_text(
        json.dumps({"publicAssets": [{"type": "asset", "fileName": "icon-16.png"}], "steps": []}),
        encoding="utf-8",
    )
    return entrypoints, build


def test_generate_writes_manifest(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{"name": "demo", "version": "1.0.0"}', encoding="utf-8")
    entrypoints, build = _write_inputs(tmp_path)

    main(["generate", "--entrypoints", str(entrypoints), "--build-output", str(build), "--config", str(tmp_path)])

    manifest = json.loads((tmp_path / ".output" / "chrome-mv3" / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["name"] == "demo"
    assert manifest["background"] == {"service_worker": "background.js"}
    assert manifest["content_scripts"] == [
        {"matches": ["https://example.com/*"], "js": ["content-scripts/overlay.js"]}
    ]
    assert manifest["icons"] == {"16": "icon-16.png"}


def test_generate_exits_on_fatal_error(tmp_path: Path, capsys) -> None:
    entrypoints, build = _write_inputs(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--entrypoints", str(entrypoints), "--build-output", str(build), "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "Manifest 'name' is missing" in capsys.readouterr().err


def test_generate_serve_command_adds_dev_fields(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{"name": "demo", "version": "1.0.0"}', encoding="utf-8")
    entrypoints, build = _write_inputs(tmp_path)

    main(
        [
            "generate",
            "--entrypoints",
            str(entrypoints),
            "--build-output",
            str(build),
            "--config",
            str(tmp_path),
            "--command",
            "serve",
        ]
    )

    manifest = json.loads((tmp_path / ".output" / "chrome-mv3" / "manifest.json").read_text(encoding="utf-8"))
    assert "content_scripts" not in manifest
    assert "https://example.com/*" in manifest["host_permissions"]
    assert manifest["permissions"] == ["tabs", "scripting"]
