"""Manifest readers — auto-registered on import."""

from depsentinel.manifests import (
    gradle_build,  # noqa: F401
    maven_pom,  # noqa: F401
)
from depsentinel.manifests.registry import (
    READER_REGISTRY,
    ManifestReader,
    discover_manifests,
    register_reader,
)

__all__ = ["READER_REGISTRY", "ManifestReader", "discover_manifests", "register_reader"]
