"""Classpath resolver interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from depsentinel.models import DependencyRecord, SymbolSet


@runtime_checkable
class ClasspathResolver(Protocol):
    """Maps a declared dependency to the symbols its artifact exports.

    Implementations raise ``UnresolvedDependencyError`` when the artifact
    cannot be found or read. Exports are direct only: symbols of the
    dependency's own transitive dependencies are not included.
    """

    def resolve(self, record: DependencyRecord) -> SymbolSet: ...
