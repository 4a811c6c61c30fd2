"""Extractor registry — match source files to language extractors."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable

from depsentinel.models import SourceFile, SymbolSet


@runtime_checkable
class SymbolExtractor(Protocol):
    """Interface that every language extractor must satisfy.

    ``extract`` returns every fully-qualified symbol the file references and
    raises ``UnparsableSourceError`` when the file cannot be scanned.
    """

    language: str
    file_extensions: list[str]

    def extract(self, source: SourceFile) -> SymbolSet: ...


EXTRACTOR_REGISTRY: dict[str, SymbolExtractor] = {}


def register_extractor(extractor: SymbolExtractor) -> None:
    """Register an extractor instance by its language."""
    EXTRACTOR_REGISTRY[extractor.language] = extractor


def extractor_for_path(path: str) -> SymbolExtractor | None:
    """Return the extractor handling *path*'s file extension, if any."""
    suffix = PurePosixPath(path).suffix.lower()
    for extractor in EXTRACTOR_REGISTRY.values():
        if suffix in extractor.file_extensions:
            return extractor
    return None
