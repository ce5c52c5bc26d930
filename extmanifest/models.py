"""Core data models shared across extmanifest components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

ENTRYPOINT_TYPES = (
    "background",
    "popup",
    "options",
    "devtools",
    "bookmarks",
    "history",
    "newtab",
    "sandbox",
    "sidepanel",
    "content-script",
)


@dataclass(frozen=True)
class Entrypoint:
    """A resolved extension surface produced by the bundler."""

    name: str
    type: str
    output_dir: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PublicAsset:
    """A file copied verbatim from the public directory."""

    type: str
    file_name: str


@dataclass(frozen=True)
class Chunk:
    """A file emitted by one bundler step."""

    file_name: str
    type: str = "chunk"
    imports: Tuple[str, ...] = ()


@dataclass
class BuildStep:
    """Chunks emitted by a single bundler invocation."""

    chunks: List[Chunk] = field(default_factory=list)


@dataclass
class BuildOutput:
    """Everything the bundler produced for one build."""

    public_assets: List[PublicAsset] = field(default_factory=list)
    steps: List[BuildStep] = field(default_factory=list)

    def all_chunks(self) -> List[Chunk]:
        return [chunk for step in self.steps for chunk in step.chunks]


@dataclass(frozen=True)
class PackageInfo:
    """Subset of package.json used to seed the manifest."""

    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    short_name: Optional[str] = None


@dataclass
class ManifestResult:
    """Assembled manifest plus the non-fatal warnings raised while building it."""

    manifest: Dict[str, Any]
    warnings: List[Tuple[str, ...]] = field(default_factory=list)


def entrypoint_from_dict(payload: Mapping[str, Any]) -> Entrypoint:
    """Build an entrypoint from bundler JSON (camelCase keys accepted)."""
    name = payload.get("name")
    entry_type = payload.get("type")
    output_dir = payload.get("output_dir", payload.get("outputDir"))
    if not isinstance(name, str) or not isinstance(entry_type, str):
        raise ValueError("Entrypoint requires string 'name' and 'type' fields")
    if entry_type not in ENTRYPOINT_TYPES:
        raise ValueError(f"Unknown entrypoint type '{entry_type}' for '{name}'")
    if not isinstance(output_dir, str):
        raise ValueError(f"Entrypoint '{name}' is missing 'outputDir'")
    options = payload.get("options")
    if options is None:
        options = {}
    if not isinstance(options, dict):
        raise ValueError(f"Entrypoint '{name}' options must be a mapping")
    return Entrypoint(name=name, type=entry_type, output_dir=output_dir, options=dict(options))


def build_output_from_dict(payload: Mapping[str, Any]) -> BuildOutput:
    """Build a BuildOutput from bundler JSON (camelCase keys accepted)."""
    assets_payload = payload.get("public_assets", payload.get("publicAssets")) or []
    assets = [
        PublicAsset(
            type=str(item.get("type", "asset")),
            file_name=str(item.get("file_name", item.get("fileName"))),
        )
        for item in assets_payload
        if isinstance(item, dict)
    ]
    steps: List[BuildStep] = []
    for step in payload.get("steps") or []:
        if not isinstance(step, dict):
            continue
        chunks = [
            Chunk(
                file_name=str(chunk.get("file_name", chunk.get("fileName"))),
                type=str(chunk.get("type", "chunk")),
                imports=tuple(chunk.get("imports") or ()),
            )
            for chunk in step.get("chunks") or []
            if isinstance(chunk, dict)
        ]
        steps.append(BuildStep(chunks=chunks))
    return BuildOutput(public_assets=assets, steps=steps)
