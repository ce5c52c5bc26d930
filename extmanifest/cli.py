"""CLI entrypoint for extmanifest commands."""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, List

from .config import FatalConfigError, load_config
from .logging import configure_logging, get_logger, report_warnings
from .manifest import generate_manifest, write_manifest
from .models import BuildOutput, Entrypoint, build_output_from_dict, entrypoint_from_dict
from .package import load_package_info

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extmanifest",
        description="Generate a browser-extension manifest.json from bundler output.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Assemble manifest.json into the output directory.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "--entrypoints",
        required=True,
        type=Path,
        help="JSON file listing resolved entrypoints.",
    )
    generate_parser.add_argument(
        "--build-output",
        required=True,
        type=Path,
        help="JSON file describing public assets and build steps.",
    )
    generate_parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help="Path to .extmanifest.yml or the project root (defaults to current directory).",
    )
    generate_parser.add_argument("-b", "--browser", help="Target browser, e.g. chrome or firefox.")
    generate_parser.add_argument("--mv", type=int, choices=(2, 3), help="Manifest version.")
    generate_parser.add_argument("--mode", help="Build mode (production or development).")
    generate_parser.add_argument(
        "--command",
        choices=("build", "serve"),
        default="build",
        help="Build command the manifest is generated for; serve adds dev-server fields.",
    )
    return parser


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise FatalConfigError(f"Cannot read {path}: {exc}") from exc


def _load_entrypoints(path: Path) -> List[Entrypoint]:
    payload = _load_json(path)
    if not isinstance(payload, list):
        raise FatalConfigError(f"{path} must contain a JSON array of entrypoints")
    try:
        return [entrypoint_from_dict(item) for item in payload]
    except ValueError as exc:
        raise FatalConfigError(f"Invalid entrypoint in {path}: {exc}") from exc


def _load_build_output(path: Path) -> BuildOutput:
    payload = _load_json(path)
    if not isinstance(payload, dict):
        raise FatalConfigError(f"{path} must contain a JSON object")
    return build_output_from_dict(payload)


def _format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for extmanifest commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    started = time.monotonic()

    if args.subcommand == "generate":
        logger.debug("Generating manifest from %s and %s", args.entrypoints, args.build_output)
        try:
            config = load_config(
                args.config,
                browser=args.browser,
                manifest_version=args.mv,
                mode=args.mode,
                command=args.command,
            )
            entrypoints = _load_entrypoints(args.entrypoints)
            build_output = _load_build_output(args.build_output)
            result = generate_manifest(
                entrypoints,
                build_output,
                config,
                package=load_package_info(config.root),
            )
            write_manifest(result.manifest, build_output, config)
        except FatalConfigError as exc:
            parser.exit(
                1,
                f"Command failed after {_format_duration(time.monotonic() - started)}\n{exc}\n",
            )
        report_warnings(result.warnings)
        print(f"manifest.json written to {_relativize(config.out_dir)}")
        print(f"Finished in {_format_duration(time.monotonic() - started)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
