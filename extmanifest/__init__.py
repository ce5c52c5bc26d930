"""Browser-extension manifest generation from resolved build output."""

from .config import ConfigError, FatalConfigError, InternalConfig, load_config
from .manifest import ManifestValidationError, generate_manifest, write_manifest
from .models import BuildOutput, Entrypoint, ManifestResult, PackageInfo
from .version import VersionFormatError

__all__ = [
    "BuildOutput",
    "ConfigError",
    "Entrypoint",
    "FatalConfigError",
    "InternalConfig",
    "ManifestResult",
    "ManifestValidationError",
    "PackageInfo",
    "VersionFormatError",
    "generate_manifest",
    "load_config",
    "write_manifest",
]
