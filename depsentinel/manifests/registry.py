"""Reader registry — discover manifest files and match them to readers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from depsentinel.models import DependencyRecord, DependencyType

# Build output, VCS and IDE directories never hold module manifests or sources.
EXCLUDED_DIRS = frozenset({".git", ".gradle", ".idea", "build", "target", "out", "node_modules"})


@runtime_checkable
class ManifestReader(Protocol):
    """Interface that every manifest reader must satisfy."""

    dependency_type: DependencyType
    file_patterns: list[str]

    def read(self, file_path: Path, content: str) -> list[DependencyRecord]: ...


READER_REGISTRY: dict[DependencyType, ManifestReader] = {}


def register_reader(reader: ManifestReader) -> None:
    """Register a reader instance by its dependency type."""
    READER_REGISTRY[reader.dependency_type] = reader


def is_excluded(path: Path, root: Path) -> bool:
    """True if *path* lies inside an excluded directory below *root*."""
    return any(part in EXCLUDED_DIRS for part in path.relative_to(root).parts[:-1])


def discover_manifests(root: Path) -> list[tuple[ManifestReader, Path]]:
    """Walk the tree and match manifest files to registered readers.

    Returns a list of (reader, matched_file) pairs, sorted by file path.
    """
    matches: list[tuple[ManifestReader, Path]] = []
    for reader in READER_REGISTRY.values():
        for pattern in reader.file_patterns:
            for hit in root.glob(pattern):
                if hit.is_file() and not is_excluded(hit, root):
                    matches.append((reader, hit))
    matches.sort(key=lambda m: m[1].relative_to(root).as_posix())
    return matches
